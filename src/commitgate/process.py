"""Subprocess adapter for the external tools the checks delegate to."""

from __future__ import annotations

import os
import signal
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

# Conventional shell status for "command not found".
COMMAND_NOT_FOUND = 127

# Seconds to wait for remaining output once the command has exited.
_PUMP_GRACE = 5


@dataclass
class ProcessResult:
    """Exit status and captured output of a finished subprocess."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def successful(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def error_output(self) -> str:
        """The tool's error stream, falling back to stdout when stderr is empty."""
        return self.stderr.strip() or self.stdout.strip()


class ProcessRunner:
    """Run external commands and capture their result.

    A missing executable or a timeout is reported through the returned
    ``ProcessResult`` rather than raised, so a check can turn it into a
    failure carrying the message.
    """

    def run(
        self,
        args: list[str],
        cwd: str | Path | None = None,
        timeout: float | None = None,
        stream: TextIO | None = None,
    ) -> ProcessResult:
        """Run ``args`` to completion.

        Args:
            args: Command and arguments.
            cwd: Working directory for the command.
            timeout: Seconds to wait before the command is killed.
            stream: When given, output is written to it line by line as the
                command produces it (stderr is merged into stdout).
        """
        try:
            if stream is None:
                return self._run_captured(args, cwd, timeout)
            return self._run_streaming(args, cwd, timeout, stream)
        except FileNotFoundError:
            return ProcessResult(
                args=list(args),
                returncode=COMMAND_NOT_FOUND,
                stderr=f"{args[0]}: command not found",
            )

    def _run_captured(
        self, args: list[str], cwd: str | Path | None, timeout: float | None
    ) -> ProcessResult:
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                cwd=cwd,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            return ProcessResult(
                args=list(args),
                returncode=-1,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr) + f"\n{args[0]} timed out after {timeout:g} seconds",
                timed_out=True,
            )
        return ProcessResult(
            args=list(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def _run_streaming(
        self,
        args: list[str],
        cwd: str | Path | None,
        timeout: float | None,
        stream: TextIO,
    ) -> ProcessResult:
        captured: list[str] = []
        timed_out = False

        # Own process group, so a timeout also kills what the command spawned.
        proc = subprocess.Popen(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
            start_new_session=True,
        )
        pump = threading.Thread(
            target=_pump, args=(proc.stdout, stream, captured), daemon=True
        )
        pump.start()
        try:
            returncode = proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            returncode = proc.wait()
            timed_out = True

        # A background child may keep the pipe open after the command exits.
        # Past the grace period the daemon reader is left to finish on its own.
        pump.join(timeout=_PUMP_GRACE)
        if not pump.is_alive():
            proc.stdout.close()

        stderr = f"{args[0]} timed out after {timeout:g} seconds" if timed_out else ""
        return ProcessResult(
            args=list(args),
            returncode=returncode,
            stdout="".join(captured),
            stderr=stderr,
            timed_out=timed_out,
        )


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _kill_group(proc: subprocess.Popen) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (AttributeError, ProcessLookupError, PermissionError):
        proc.kill()


def _pump(source: TextIO, stream: TextIO, captured: list[str]) -> None:
    """Copy lines from the child's output to the operator as they arrive."""
    for line in source:
        stream.write(line)
        stream.flush()
        captured.append(line)
