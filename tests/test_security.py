"""
Tests for argument validation, secret redaction and argument building.
"""

import pytest

from tofuwrap.core.arguments import (
    add_backend_config_args,
    add_backend_config_file_args,
    add_plugin_dir_args,
    add_variable_args,
    as_list,
    check_args,
    format_value,
    merge_variables,
)
from tofuwrap.security.sanitizer import InputSanitizer, SecurityError
from tofuwrap.security.secure_memory import OutputRedactor, SecureString


# ---------------------------------------------------------------------------
# InputSanitizer
# ---------------------------------------------------------------------------

class TestVariableNameValidation:
    """Test variable name validation."""

    def test_valid_names(self):
        for name in ["region", "_private", "instance_type", "my-var", "a1"]:
            assert InputSanitizer.sanitize_variable_name(name) == name

    def test_invalid_names(self):
        for name in ["", "1region", "bad name", "var;rm", "a=b", "-flag"]:
            with pytest.raises(SecurityError):
                InputSanitizer.sanitize_variable_name(name)

    def test_name_too_long(self):
        with pytest.raises(SecurityError, match="too long"):
            InputSanitizer.sanitize_variable_name("a" * 256)


class TestCommandArgs:
    def test_safe_argument(self):
        assert InputSanitizer.is_safe_command_arg("-var=cmd=echo $HOME; ls | wc") is True

    def test_null_byte(self):
        assert InputSanitizer.is_safe_command_arg("-var=a=\x00") is False

    def test_oversized_argument(self):
        assert InputSanitizer.is_safe_command_arg("x" * 10001) is False

    def test_check_args_raises(self):
        with pytest.raises(SecurityError):
            check_args(["plan", "bad\x00arg"])


# ---------------------------------------------------------------------------
# SecureString / OutputRedactor
# ---------------------------------------------------------------------------

class TestSecureString:
    def test_value_hidden_from_repr(self):
        secret = SecureString("hunter2")
        assert str(secret) == "[REDACTED]"
        assert "hunter2" not in repr(secret)
        assert secret.get_value() == "hunter2"

    def test_clear(self):
        secret = SecureString("hunter2")
        secret.clear()
        assert secret.is_cleared()
        with pytest.raises(ValueError):
            secret.get_value()

    def test_context_manager_clears(self):
        with SecureString("hunter2") as secret:
            assert secret.get_value() == "hunter2"
        assert secret.is_cleared()


class TestOutputRedactor:
    def test_redacts_all_occurrences(self):
        redactor = OutputRedactor({"key": SecureString("abc123")})
        assert redactor.redact("abc123 and abc123") == "[REDACTED] and [REDACTED]"

    def test_skips_cleared_values(self):
        secret = SecureString("abc123")
        secret.clear()
        redactor = OutputRedactor({"key": secret})
        assert redactor.sensitive_values == []

    def test_add_value_ignores_empty_and_duplicates(self):
        redactor = OutputRedactor()
        redactor.add_value("")
        redactor.add_value("x1")
        redactor.add_value("x1")
        assert redactor.sensitive_values == ["x1"]

    def test_empty_text(self):
        assert OutputRedactor({"k": SecureString("s")}).redact("") == ""

    def test_clear(self):
        redactor = OutputRedactor({"k": SecureString("secret")})
        redactor.clear()
        assert redactor.redact("secret") == "secret"


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------

class TestFormatValue:
    def test_scalars(self):
        assert format_value("dev") == "dev"
        assert format_value(5) == "5"
        assert format_value(2.5) == "2.5"
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(None) == "null"

    def test_collections_as_json(self):
        assert format_value(["a", "b"]) == '["a", "b"]'
        assert format_value({"team": "ops"}) == '{"team": "ops"}'

    def test_secure_string_registers_value(self):
        redactor = OutputRedactor()
        assert format_value(SecureString("pw"), redactor) == "pw"
        assert redactor.sensitive_values == ["pw"]


class TestMergeVariables:
    def test_overrides_win_and_keep_position(self):
        merged = merge_variables({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert list(merged.items()) == [("a", 1), ("b", 3), ("c", 4)]

    def test_none_inputs(self):
        assert merge_variables(None, None) == {}


class TestArgumentHelpers:
    def test_as_list(self):
        assert as_list(None) == []
        assert as_list("one") == ["one"]
        assert as_list(("a", "b")) == ["a", "b"]

    def test_variable_args(self):
        args = ["plan"]
        add_variable_args(args, {"region": "us-east-1", "count": 2})
        assert args == ["plan", "-var=region=us-east-1", "-var=count=2"]

    def test_empty_variables_add_nothing(self):
        args = ["plan"]
        add_variable_args(args, {})
        assert args == ["plan"]

    def test_backend_args(self):
        args = []
        add_backend_config_file_args(args, "backend.hcl")
        add_backend_config_args(args, {"bucket": "state", "encrypt": True})
        assert args == [
            "-backend-config=backend.hcl",
            "-backend-config=bucket=state",
            "-backend-config=encrypt=true",
        ]

    def test_plugin_dir_args(self):
        args = []
        add_plugin_dir_args(args, "/plugins")
        assert args == ["-plugin-dir=/plugins"]
