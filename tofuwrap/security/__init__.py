"""
Security module for tofuwrap.

This module provides utilities for validating command arguments and
keeping sensitive variable values out of captured output.
"""

from .sanitizer import InputSanitizer, SecurityError
from .secure_memory import SecureString, OutputRedactor

__all__ = ["InputSanitizer", "SecurityError", "SecureString", "OutputRedactor"]
