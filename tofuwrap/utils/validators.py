"""
Validation utilities for tofuwrap.
"""

import shutil
import subprocess
from typing import Tuple, Optional


def validate_tofu_installed(tofu_path: str = "tofu") -> Tuple[bool, Optional[str]]:
    """
    Check if the tofu binary is installed and runnable.

    Args:
        tofu_path: Path or name of the tofu binary

    Returns:
        Tuple of (is_installed, version_string)
        If not installed, version_string is None
    """
    if not shutil.which(tofu_path):
        return False, None

    try:
        from . import subprocess_creation_flags
        result = subprocess.run(
            [tofu_path, "version"],
            capture_output=True,
            text=True,
            timeout=5,
            creationflags=subprocess_creation_flags(),
        )

        if result.returncode == 0:
            # First line is "OpenTofu vX.Y.Z" (or "Terraform vX.Y.Z")
            version_line = result.stdout.split('\n')[0]
            return True, version_line
        else:
            return False, None

    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False, None
