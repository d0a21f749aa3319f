"""
OpenTofu command wrapper.

This module provides the Tofu class, which turns Python arguments into
tofu command lines (init, plan, apply, destroy, output, validate), runs
them, and returns their output, parsing plan summaries into counts.
"""

import json as _json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ..security.secure_memory import OutputRedactor
from .arguments import (
    PathOrPaths,
    Variables,
    add_backend_config_args,
    add_backend_config_file_args,
    add_plugin_dir_args,
    add_variable_args,
    merge_variables,
)
from .command_runner import CommandRunner, OutputCallback
from .errors import TofuError
from .plan_parser import PlanResult, parse_plan_changes

logger = logging.getLogger(__name__)

PLAN_SUMMARY = "Plan generated successfully"

# `plan -detailed-exitcode` exits 2 when the plan succeeded with changes
DETAILED_EXITCODE_OK = (0, 2)


class Tofu:
    """
    Runs OpenTofu commands in a working directory.

    Constructor variables are sent with every command that accepts
    variables; per-call variables override them by name.

    Example:
        >>> tofu = Tofu(working_directory="infra", variables={"region": "us-west-2"})
        >>> tofu.init(backend_config={"bucket": "state"})
        >>> plan = tofu.plan(out="tfplan")
        >>> if plan.has_changes:
        ...     tofu.apply(plan_file="tfplan")
    """

    def __init__(
        self,
        working_directory: str = ".",
        auto_approve: bool = False,
        variables: Optional[Variables] = None,
        tofu_path: str = "tofu",
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            working_directory: Directory holding the configuration
            auto_approve: Pass -auto-approve to apply and destroy
            variables: Variables sent with every command
            tofu_path: Name or path of the tofu binary
            env: Extra environment variables for the process
            timeout: Seconds before a command is terminated (None waits forever)
        """
        self.working_directory = working_directory
        self.auto_approve = auto_approve
        self.variables: Dict[str, Any] = dict(variables or {})
        self.tofu_path = tofu_path or "tofu"
        self.redactor = OutputRedactor()
        self._runner = CommandRunner(
            tofu_path=self.tofu_path,
            working_directory=working_directory,
            env=env,
            timeout=timeout,
            redactor=self.redactor,
        )

    def init(
        self,
        upgrade: bool = False,
        reconfigure: bool = False,
        backend_config_files: Optional[PathOrPaths] = None,
        backend_config: Optional[Mapping[str, Any]] = None,
        backend: bool = True,
        get_plugins: bool = True,
        plugin_dir: Optional[PathOrPaths] = None,
        verify_plugins: bool = True,
        variables: Optional[Variables] = None,
        output_callback: Optional[OutputCallback] = None,
    ) -> str:
        """
        Initialize the working directory.

        Backend config files are passed before backend key/value
        settings, so the key/value settings take precedence.

        Returns:
            stdout of `tofu init`

        Raises:
            TofuError: If initialization fails
        """
        args = ["init"]

        if upgrade:
            args.append("-upgrade")

        if reconfigure:
            args.append("-reconfigure")

        if backend is False:
            args.append("-backend=false")

        if get_plugins is False:
            args.append("-get-plugins=false")

        if verify_plugins is False:
            args.append("-verify-plugins=false")

        add_backend_config_file_args(args, backend_config_files)

        if backend_config:
            add_backend_config_args(args, backend_config, self.redactor)

        add_plugin_dir_args(args, plugin_dir)

        self._add_variables(args, variables)

        try:
            return self._run(args, "init", output_callback).stdout
        except TofuError as e:
            raise TofuError(f"Failed to initialize OpenTofu: {e}") from e

    def plan(
        self,
        out: Optional[str] = None,
        detailed: bool = False,
        variables: Optional[Variables] = None,
        output_callback: Optional[OutputCallback] = None,
    ) -> PlanResult:
        """
        Generate an execution plan.

        Args:
            out: Save the plan to this file
            detailed: Pass -detailed-exitcode
            variables: Per-call variables, merged over constructor variables

        Raises:
            TofuError: If planning fails
        """
        args = ["plan"]

        if out:
            args.append(f"-out={out}")

        if detailed:
            args.append("-detailed-exitcode")

        self._add_variables(args, variables)

        ok_codes = DETAILED_EXITCODE_OK if detailed else (0,)
        try:
            result = self._run(args, "plan", output_callback, ok_codes)
        except TofuError as e:
            raise TofuError(f"Failed to generate plan: {e}") from e

        return PlanResult(
            summary=PLAN_SUMMARY,
            changes=parse_plan_changes(result.stdout),
            raw=result.stdout,
        )

    def apply(
        self,
        plan_file: Optional[str] = None,
        output_callback: Optional[OutputCallback] = None,
    ) -> str:
        """
        Apply changes, either from a saved plan file or directly.

        Constructor variables are only sent when no plan file is given;
        a saved plan already carries its variables.

        Raises:
            TofuError: If apply fails
        """
        args = ["apply"]

        if self.auto_approve:
            args.append("-auto-approve")

        if plan_file:
            args.append(plan_file)
        else:
            self._add_variables(args)

        try:
            return self._run(args, "apply", output_callback).stdout
        except TofuError as e:
            raise TofuError(f"Failed to apply changes: {e}") from e

    def destroy(self, output_callback: Optional[OutputCallback] = None) -> str:
        """
        Destroy all managed resources.

        Raises:
            TofuError: If destroy fails
        """
        args = ["destroy"]

        if self.auto_approve:
            args.append("-auto-approve")

        self._add_variables(args)

        try:
            return self._run(args, "destroy", output_callback).stdout
        except TofuError as e:
            raise TofuError(f"Failed to destroy resources: {e}") from e

    def output(
        self,
        name: Optional[str] = None,
        json: bool = False,
    ) -> Union[str, Any]:
        """
        Read root module outputs.

        Args:
            name: Read a single output
            json: Pass -json and decode the result

        Returns:
            Raw stdout, or the decoded JSON value when json=True

        Raises:
            TofuError: If the command fails or its JSON cannot be decoded
        """
        args = ["output"]

        if name:
            args.append(name)

        if json:
            args.append("-json")

        try:
            stdout = self._run(args, "output").stdout
            if json:
                return _json.loads(stdout)
            return stdout
        except (TofuError, ValueError) as e:
            raise TofuError(f"Failed to get outputs: {e}") from e

    def validate(self, output_callback: Optional[OutputCallback] = None) -> str:
        """
        Check the configuration for syntax and consistency errors.

        Raises:
            TofuError: If the configuration is invalid
        """
        try:
            return self._run(["validate"], "validate", output_callback).stdout
        except TofuError as e:
            raise TofuError(f"Failed to validate configuration: {e}") from e

    def cancel(self):
        """Terminate the command currently running, if any."""
        self._runner.cancel()

    def _add_variables(self, args: List[str], variables: Optional[Variables] = None):
        add_variable_args(args, merge_variables(self.variables, variables), self.redactor)

    def _run(self, args, operation, output_callback=None, ok_codes=(0,)):
        return self._runner.run(args, operation, output_callback, ok_codes)
