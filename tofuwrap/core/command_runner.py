"""
Execution of tofu commands with output capture.

This module runs the tofu binary with shell=False, captures stdout,
stderr and their interleaved stream, and streams lines to an optional
callback. Sensitive values are redacted from every line it reports.
"""

import logging
import os
import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..security.secure_memory import OutputRedactor
from ..utils import subprocess_creation_flags
from .arguments import check_args
from .errors import CommandError

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str], None]


@dataclass
class CommandResult:
    """Result of a tofu command execution."""
    exit_code: int
    stdout: str
    stderr: str
    output: str  # stdout and stderr interleaved as they arrived
    success: bool
    command: str  # operation name (e.g. "init", "plan")


class CommandRunner:
    """
    Runs the tofu binary inside a working directory.

    A non-zero exit code (outside ok_codes), a launch failure or a
    timeout raises CommandError carrying the captured output.
    """

    def __init__(
        self,
        tofu_path: str = "tofu",
        working_directory: str = ".",
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        redactor: Optional[OutputRedactor] = None,
    ):
        self.tofu_path = tofu_path or "tofu"
        self.working_directory = working_directory
        self.env = env
        self.timeout = timeout
        self.redactor = redactor or OutputRedactor()
        self._process: Optional[subprocess.Popen] = None

    def cancel(self):
        """Terminate any running subprocess."""
        process = self._process
        if process is not None:
            self._terminate(process)

    def _build_env(self) -> Optional[Dict[str, str]]:
        if not self.env:
            return None
        merged = dict(os.environ)
        merged.update(self.env)
        return merged

    def run(
        self,
        args: Sequence[str],
        operation: str,
        output_callback: Optional[OutputCallback] = None,
        ok_codes: Sequence[int] = (0,),
    ) -> CommandResult:
        """
        Execute `tofu <args>` and wait for it to finish.

        The returned CommandResult holds tofu's output as written.
        Redaction applies to what is reported as text: lines passed to
        output_callback, CommandError messages and the debug log.

        Args:
            args: Tokens after the binary name, subcommand first
            operation: Operation name recorded in the result
            output_callback: Called with each redacted output line
            ok_codes: Exit codes that count as success

        Returns:
            CommandResult for a successful run

        Raises:
            SecurityError: If an argument is unsafe
            CommandError: If the command fails, cannot start or times out
        """
        cmd = [self.tofu_path] + list(args)
        check_args(cmd)

        cmdline = self.redactor.redact(" ".join(cmd))
        logger.debug(f"Running {cmdline} in {self.working_directory}")

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []
        combined: List[str] = []
        reader_errors: List[BaseException] = []
        lock = threading.Lock()
        timed_out = threading.Event()

        def _collect(line: str, target: List[str]):
            line = line.rstrip("\n")
            with lock:
                target.append(line)
                combined.append(line)
            if output_callback:
                output_callback(self.redactor.redact(line))

        try:
            process = subprocess.Popen(
                cmd,
                cwd=self.working_directory,
                env=self._build_env(),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                shell=False,
                creationflags=subprocess_creation_flags(),
            )
        except OSError as e:
            raise CommandError(f"Command failed: {self.redactor.redact(str(e))}") from e

        self._process = process

        def _on_timeout():
            timed_out.set()
            self._terminate(process)

        watchdog = None
        if self.timeout is not None:
            watchdog = threading.Timer(self.timeout, _on_timeout)
            watchdog.daemon = True
            watchdog.start()

        exit_code: Optional[int] = None
        try:
            def _read_stderr():
                assert process.stderr is not None
                try:
                    for line in process.stderr:
                        _collect(line, stderr_lines)
                except BaseException as e:
                    reader_errors.append(e)
                    self._terminate(process)

            stderr_thread = threading.Thread(target=_read_stderr, daemon=True)
            stderr_thread.start()

            assert process.stdout is not None
            for line in process.stdout:
                _collect(line, stdout_lines)

            stderr_thread.join(timeout=self.timeout)
            if reader_errors:
                raise reader_errors[0]

            process.wait(timeout=self.timeout)
            exit_code = process.returncode

        except subprocess.TimeoutExpired:
            self._terminate(process)
            timed_out.set()
        except BaseException:
            self._stop(process)
            raise
        finally:
            if watchdog is not None:
                watchdog.cancel()
            self._process = None

        output = self.redactor.redact("\n".join(combined))

        # A watchdog firing just as the process exits cleanly is not a timeout
        if timed_out.is_set() and exit_code not in ok_codes:
            raise CommandError(
                self._failure_message(f"Command timed out after {self.timeout}s: {cmdline}", output),
                exit_code=exit_code,
                output=output,
            )

        if exit_code not in ok_codes:
            raise CommandError(
                self._failure_message(f"Command failed with exit code {exit_code}: {cmdline}", output),
                exit_code=exit_code,
                output=output,
            )

        logger.debug(f"{operation} finished with exit code {exit_code}")

        return CommandResult(
            exit_code=exit_code,
            stdout="\n".join(stdout_lines),
            stderr="\n".join(stderr_lines),
            output="\n".join(combined),
            success=True,
            command=operation,
        )

    @staticmethod
    def _terminate(process: subprocess.Popen):
        try:
            process.terminate()
        except OSError:
            pass

    @staticmethod
    def _stop(process: subprocess.Popen):
        """Terminate the process and reap it, killing it if it lingers."""
        CommandRunner._terminate(process)
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    @staticmethod
    def _failure_message(message: str, output: str) -> str:
        if output:
            return f"{message}\n{output}"
        return message
