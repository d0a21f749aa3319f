"""
Handling of sensitive variable values.

- SecureString: Container for a secret passed as a tofu variable
- OutputRedactor: Redacts registered secrets from output text
"""

from typing import Dict, List, Optional


class SecureString:
    """
    Container for sensitive strings.

    The value never shows up in str() or repr(), so a SecureString
    can sit in a variables mapping that gets logged.

    Example:
        >>> password = SecureString("my_secret_password")
        >>> tofu = Tofu(variables={"db_password": password})
    """

    def __init__(self, value: str):
        self._value: Optional[str] = value
        self._cleared = False

    def __str__(self) -> str:
        return "[REDACTED]"

    def __repr__(self) -> str:
        return "SecureString([REDACTED])"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear()
        return False

    def get_value(self) -> str:
        """
        Get the actual sensitive value.

        Raises:
            ValueError: If value has been cleared
        """
        if self._cleared or self._value is None:
            raise ValueError("SecureString value has been cleared")
        return self._value

    def clear(self):
        """Drop the value. Idempotent."""
        self._value = None
        self._cleared = True

    def is_cleared(self) -> bool:
        return self._cleared


class OutputRedactor:
    """
    Redacts sensitive values from text output.

    Example:
        >>> redactor = OutputRedactor({"api_key": SecureString("secret123")})
        >>> redactor.redact("Connecting with key: secret123")
        'Connecting with key: [REDACTED]'
    """

    def __init__(self, sensitive_variables: Optional[Dict[str, SecureString]] = None):
        """
        Args:
            sensitive_variables: Dict mapping variable names to SecureString values
        """
        self.sensitive_values: List[str] = []

        if sensitive_variables:
            self.add_sensitive_values(sensitive_variables)

    def add_sensitive_values(self, sensitive_variables: Dict[str, SecureString]):
        """Register every non-empty SecureString in the mapping."""
        for secure_str in sensitive_variables.values():
            if isinstance(secure_str, SecureString):
                try:
                    self.add_value(secure_str.get_value())
                except ValueError:
                    # Value already cleared
                    pass

    def add_value(self, value: str):
        """Register a single raw value for redaction."""
        if value and value not in self.sensitive_values:
            self.sensitive_values.append(value)

    def redact(self, text: str) -> str:
        """
        Replace any occurrence of sensitive values with [REDACTED].

        Uses plain string replacement, not regex. Matching is case-sensitive.
        """
        if not text:
            return text

        redacted = text
        for sensitive_value in self.sensitive_values:
            redacted = redacted.replace(sensitive_value, "[REDACTED]")

        return redacted

    def clear(self):
        """Forget all registered values."""
        self.sensitive_values.clear()
