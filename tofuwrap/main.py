"""
tofuwrap - command-line entry point.

Runs a single OpenTofu command through the Tofu wrapper, taking
defaults from the user settings file.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from . import __version__
from .config import Settings
from .core import Tofu, TofuError, TfvarsHandler
from .security import SecurityError
from .utils import setup_logging, validate_tofu_installed

logger = logging.getLogger(__name__)


def _split_assignment(text: str) -> Tuple[str, str]:
    """Split NAME=VALUE on the first '='."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tofuwrap",
        description="Run OpenTofu commands with merged variables and backend configuration.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--chdir", dest="working_directory", help="directory holding the configuration")
    parser.add_argument("--tofu-path", help="name or path of the tofu binary")
    parser.add_argument("--var", dest="variables", action="append", default=[],
                        type=_split_assignment, metavar="NAME=VALUE",
                        help="set a variable (repeatable)")
    parser.add_argument("--var-file", dest="var_files", action="append", default=[],
                        metavar="FILE", help="load variables from a .tfvars file (repeatable)")
    parser.add_argument("--auto-approve", action="store_true", default=None,
                        help="skip interactive approval for apply and destroy")
    parser.add_argument("--timeout", type=float, help="seconds before a command is terminated")
    parser.add_argument("--config-dir", help="directory holding settings.json")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--log-file", action="store_true", default=None, help="also log to a file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="initialize the working directory")
    init_parser.add_argument("--upgrade", action="store_true")
    init_parser.add_argument("--reconfigure", action="store_true")
    init_parser.add_argument("--backend-config", action="append", default=[],
                             metavar="FILE|KEY=VALUE",
                             help="backend config file or key/value pair (repeatable)")
    init_parser.add_argument("--no-backend", action="store_true", help="pass -backend=false")
    init_parser.add_argument("--plugin-dir", action="append", default=[], metavar="DIR")

    plan_parser = subparsers.add_parser("plan", help="generate an execution plan")
    plan_parser.add_argument("--out", help="save the plan to this file")
    plan_parser.add_argument("--detailed-exitcode", action="store_true",
                             help="exit 2 when the plan has changes")

    apply_parser = subparsers.add_parser("apply", help="apply changes")
    apply_parser.add_argument("plan_file", nargs="?", help="saved plan to apply")

    subparsers.add_parser("destroy", help="destroy all managed resources")

    output_parser = subparsers.add_parser("output", help="show root module outputs")
    output_parser.add_argument("name", nargs="?")
    output_parser.add_argument("--json", action="store_true")

    subparsers.add_parser("validate", help="validate the configuration")

    return parser


def _collect_variables(args: argparse.Namespace, settings: Settings) -> Dict[str, Any]:
    """Merge variables: settings, then var files in order, then --var."""
    variables = dict(settings.get("variables", {}) or {})
    for path in args.var_files:
        variables.update(TfvarsHandler.parse_tfvars(path))
    variables.update(args.variables)
    return variables


def _split_backend_config(values: List[str]) -> Tuple[List[str], Dict[str, str]]:
    """Separate backend config files from KEY=VALUE pairs."""
    files: List[str] = []
    pairs: Dict[str, str] = {}
    for value in values:
        if "=" in value:
            key, _, item = value.partition("=")
            pairs[key] = item
        else:
            files.append(value)
    return files, pairs


def _print_line(line: str):
    print(line, flush=True)


def _run_init(tofu: Tofu, args: argparse.Namespace) -> int:
    files, pairs = _split_backend_config(args.backend_config)
    tofu.init(
        upgrade=args.upgrade,
        reconfigure=args.reconfigure,
        backend_config_files=files or None,
        backend_config=pairs or None,
        backend=not args.no_backend,
        plugin_dir=args.plugin_dir or None,
        output_callback=_print_line,
    )
    return 0


def _run_plan(tofu: Tofu, args: argparse.Namespace) -> int:
    result = tofu.plan(out=args.out, detailed=args.detailed_exitcode, output_callback=_print_line)
    changes = result.changes
    logger.info(
        f"{result.summary}: {changes.add} to add, "
        f"{changes.change} to change, {changes.destroy} to destroy"
    )
    if args.detailed_exitcode and result.has_changes:
        return 2
    return 0


def _run_apply(tofu: Tofu, args: argparse.Namespace) -> int:
    tofu.apply(plan_file=args.plan_file, output_callback=_print_line)
    return 0


def _run_destroy(tofu: Tofu, args: argparse.Namespace) -> int:
    tofu.destroy(output_callback=_print_line)
    return 0


def _run_output(tofu: Tofu, args: argparse.Namespace) -> int:
    result = tofu.output(name=args.name, json=args.json)
    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(result)
    return 0


def _run_validate(tofu: Tofu, args: argparse.Namespace) -> int:
    tofu.validate(output_callback=_print_line)
    return 0


COMMANDS = {
    "init": _run_init,
    "plan": _run_plan,
    "apply": _run_apply,
    "destroy": _run_destroy,
    "output": _run_output,
    "validate": _run_validate,
}


def _pick(value, settings: Settings, key: str):
    """Command-line value if given, else the setting."""
    return value if value is not None else settings.get(key)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for tofuwrap."""
    args = build_parser().parse_args(argv)
    settings = Settings(config_dir=args.config_dir)

    setup_logging(
        log_level=_pick(args.log_level, settings, "log_level") or "INFO",
        log_file=bool(_pick(args.log_file, settings, "log_file")),
    )

    tofu_path = _pick(args.tofu_path, settings, "tofu_path") or "tofu"
    installed, version = validate_tofu_installed(tofu_path)
    if not installed:
        logger.error(f"OpenTofu binary not found or not runnable: {tofu_path}")
        return 1
    logger.debug(f"Using {version}")

    try:
        variables = _collect_variables(args, settings)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load variables: {e}")
        return 1

    tofu = Tofu(
        working_directory=_pick(args.working_directory, settings, "working_directory") or ".",
        auto_approve=bool(_pick(args.auto_approve, settings, "auto_approve")),
        variables=variables,
        tofu_path=tofu_path,
        timeout=_pick(args.timeout, settings, "timeout"),
    )

    try:
        return COMMANDS[args.command](tofu, args)
    except (TofuError, SecurityError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
