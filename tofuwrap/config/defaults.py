"""
Default settings for tofuwrap.

These are the default values used when no user configuration exists.
"""

DEFAULT_SETTINGS = {
    "version": "1.0.0",

    # OpenTofu binary and project
    "tofu_path": "tofu",
    "working_directory": ".",

    # Execution
    "auto_approve": False,
    "timeout": None,  # seconds, None means wait indefinitely

    # Variables passed to every command (lowest precedence)
    "variables": {},

    # Logging
    "log_level": "INFO",
    "log_file": False,
}
