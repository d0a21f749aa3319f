"""
Argument-list construction for tofu commands.

Helpers here append tokens to an existing argument list in place, so a
command is built up front to back in the order tofu receives it.
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..security.sanitizer import InputSanitizer, SecurityError
from ..security.secure_memory import OutputRedactor, SecureString

Variables = Mapping[str, Any]
PathOrPaths = Union[str, Sequence[str]]


def as_list(value: Optional[PathOrPaths]) -> List[str]:
    """Normalize a single path or a sequence of paths to a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def format_value(value: Any, redactor: Optional[OutputRedactor] = None) -> str:
    """
    Render a Python value the way tofu expects it on the command line.

    SecureString values are unwrapped and registered with the redactor.
    """
    if isinstance(value, SecureString):
        raw = value.get_value()
        if redactor is not None:
            redactor.add_value(raw)
        return raw
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value)
    return str(value)


def merge_variables(base: Optional[Variables], overrides: Optional[Variables] = None) -> Dict[str, Any]:
    """
    Merge two variable mappings; values in overrides win.

    Keys from base keep their position even when overridden.
    """
    merged: Dict[str, Any] = dict(base or {})
    merged.update(overrides or {})
    return merged


def add_variable_args(
    args: List[str],
    variables: Variables,
    redactor: Optional[OutputRedactor] = None,
):
    """Append one -var=<name>=<value> token per variable."""
    for name, value in variables.items():
        InputSanitizer.sanitize_variable_name(name)
        args.append(f"-var={name}={format_value(value, redactor)}")


def add_backend_config_file_args(args: List[str], files: Optional[PathOrPaths]):
    """Append one -backend-config=<file> token per file, in call order."""
    for path in as_list(files):
        args.append(f"-backend-config={path}")


def add_backend_config_args(
    args: List[str],
    backend_config: Mapping[str, Any],
    redactor: Optional[OutputRedactor] = None,
):
    """Append one -backend-config=<key>=<value> token per setting."""
    for key, value in backend_config.items():
        InputSanitizer.sanitize_variable_name(key)
        args.append(f"-backend-config={key}={format_value(value, redactor)}")


def add_plugin_dir_args(args: List[str], plugin_dirs: Optional[PathOrPaths]):
    """Append one -plugin-dir=<dir> token per directory."""
    for path in as_list(plugin_dirs):
        args.append(f"-plugin-dir={path}")


def check_args(args: Sequence[str]):
    """Raise SecurityError if any token cannot be passed to subprocess."""
    for arg in args:
        if not InputSanitizer.is_safe_command_arg(arg):
            raise SecurityError(f"Unsafe command argument: {arg[:80]!r}")
