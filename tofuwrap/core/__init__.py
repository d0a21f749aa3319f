"""
Core OpenTofu functionality for tofuwrap.

This module provides the logic for interacting with the tofu binary:
- Building command lines from Python arguments
- Executing commands and capturing their output
- Parsing plan summaries and .tfvars files
"""

from .errors import TofuError, CommandError
from .command_runner import CommandRunner, CommandResult
from .plan_parser import PlanChanges, PlanResult, parse_plan_changes, strip_ansi
from .tfvars_handler import TfvarsHandler
from .tofu import Tofu

__all__ = [
    "Tofu",
    "TofuError",
    "CommandError",
    "CommandRunner",
    "CommandResult",
    "PlanChanges",
    "PlanResult",
    "parse_plan_changes",
    "strip_ansi",
    "TfvarsHandler",
]
