"""
tofuwrap - a Python wrapper around the OpenTofu command-line tool.
"""

from .core import (
    CommandError,
    CommandResult,
    PlanChanges,
    PlanResult,
    Tofu,
    TofuError,
)
from .security import SecureString, SecurityError

__version__ = "1.0.0"

__all__ = [
    "Tofu",
    "TofuError",
    "CommandError",
    "CommandResult",
    "PlanChanges",
    "PlanResult",
    "SecureString",
    "SecurityError",
]
