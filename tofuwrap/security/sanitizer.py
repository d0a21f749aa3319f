"""
Input validation for tofu command arguments.

This module rejects input that cannot be passed safely to the tofu
binary:
- Invalid variable and backend-config key names
- Arguments containing null bytes
- Oversized arguments
"""

import re


class SecurityError(Exception):
    """Raised when a security validation fails."""
    pass


class InputSanitizer:
    """
    Provides input validation methods.

    All sanitize_* methods raise SecurityError if validation fails.
    """

    # Must start with letter/underscore, can contain letters, digits,
    # underscores, hyphens
    VARIABLE_NAME_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_-]*$')

    MAX_VARIABLE_NAME_LENGTH = 255
    MAX_ARGUMENT_LENGTH = 10000

    @staticmethod
    def sanitize_variable_name(name: str) -> str:
        """
        Validate a variable name or backend-config key.

        Rules:
        - Must start with letter or underscore
        - Can contain letters, digits, underscores, hyphens
        - Max length: 255 characters

        Args:
            name: Name to validate

        Returns:
            Validated name (unchanged if valid)

        Raises:
            SecurityError: If name is invalid
        """
        if not name:
            raise SecurityError("Variable name cannot be empty")

        if len(name) > InputSanitizer.MAX_VARIABLE_NAME_LENGTH:
            raise SecurityError(
                f"Variable name too long (max {InputSanitizer.MAX_VARIABLE_NAME_LENGTH})"
            )

        if not InputSanitizer.VARIABLE_NAME_PATTERN.match(name):
            raise SecurityError(
                f"Invalid variable name '{name}': must start with letter/underscore, "
                "contain only letters, digits, underscores, hyphens"
            )

        return name

    @staticmethod
    def is_safe_command_arg(arg: str) -> bool:
        """
        Check if a command argument is safe to pass to subprocess.

        Commands always run with shell=False, so shell metacharacters
        are passed through literally and are not checked here.

        Args:
            arg: Command argument to check

        Returns:
            True if safe, False otherwise
        """
        if '\x00' in arg:
            return False

        if len(arg) > InputSanitizer.MAX_ARGUMENT_LENGTH:
            return False

        return True
