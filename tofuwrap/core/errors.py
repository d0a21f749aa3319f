"""
Exceptions raised by tofuwrap.
"""

from typing import Optional


class TofuError(Exception):
    """Base error for failed OpenTofu operations."""
    pass


class CommandError(TofuError):
    """
    Raised when the tofu process could not be launched or exited with
    an unexpected code.

    Attributes:
        exit_code: Process exit code (None if the process never started)
        output: Combined stdout/stderr captured before the failure
    """

    def __init__(self, message: str, exit_code: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output
