"""
Loading of .tfvars files.

Variables read here are fed to Tofu as ordinary -var values.
"""

import logging
from typing import Any, Dict

import hcl2

logger = logging.getLogger(__name__)


class TfvarsHandler:
    """Parse Terraform/OpenTofu .tfvars files."""

    @staticmethod
    def parse_tfvars(file_path: str) -> Dict[str, Any]:
        """
        Parse a .tfvars file and return variable name-value pairs.

        Args:
            file_path: Path to the .tfvars file.

        Returns:
            Dict of variable name to value, in file order.

        Raises:
            FileNotFoundError: If file does not exist.
            ValueError: If file cannot be parsed.
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                parsed = hcl2.load(f)
        except FileNotFoundError:
            raise
        except Exception as e:
            raise ValueError(f"Failed to parse tfvars file {file_path}: {e}") from e

        result = {key: TfvarsHandler._normalize(value) for key, value in parsed.items()}
        logger.debug(f"Loaded {len(result)} variables from {file_path}")
        return result

    @staticmethod
    def _normalize(value: Any) -> Any:
        """Drop the surrounding quotes newer hcl2 releases keep on strings."""
        if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
            return value[1:-1]
        if isinstance(value, list):
            return [TfvarsHandler._normalize(v) for v in value]
        if isinstance(value, dict):
            return {
                TfvarsHandler._normalize(k): TfvarsHandler._normalize(v)
                for k, v in value.items()
            }
        return value
