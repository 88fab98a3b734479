"""Execution of the transformer as a child process.

Standard streams are inherited, so the transformer's own output reaches the
build log unchanged.
"""

from __future__ import annotations

import logging
import os
import signal
import stat
import subprocess
from pathlib import Path
from typing import Sequence

from core.domain.errors import ProcessLaunchError
from core.domain.models import ProcessResult

_logger = logging.getLogger(__name__)

TERMINATE_GRACE_SECONDS = 5.0


def _signal_cause(returncode: int) -> str | None:
    if returncode >= 0:
        return None
    try:
        name = signal.Signals(-returncode).name
    except ValueError:
        name = str(-returncode)
    return f"terminated by signal {name}"


def _stop(process: subprocess.Popen) -> None:
    process.terminate()
    try:
        process.wait(timeout=TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        _logger.warning("Transformer did not exit after terminate(); killing pid %s", process.pid)
        process.kill()
        process.wait()


def ensure_executable(program: Path) -> None:
    """Add execute bits to a bundled script that lost them in the archive."""

    if os.name == "nt" or not program.is_file() or os.access(program, os.X_OK):
        return
    mode = program.stat().st_mode
    program.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def run_process(command: Sequence[str], cwd: Path) -> ProcessResult:
    """Run `command` inside `cwd`, block until it exits and return its status.

    An interrupt while waiting terminates the child before the error is
    raised.
    """

    if not command:
        raise ValueError("command must not be empty")

    args = [str(part) for part in command]
    try:
        ensure_executable(Path(args[0]))
        process = subprocess.Popen(args, cwd=str(cwd))
    except OSError as exc:
        raise ProcessLaunchError(args, str(exc)) from exc

    _logger.debug("Started transformer pid %s in '%s'", process.pid, cwd)

    try:
        returncode = process.wait()
    except KeyboardInterrupt as exc:
        _stop(process)
        raise ProcessLaunchError(args, "interrupted whilst waiting for the process to exit") from exc

    return ProcessResult(exit_code=returncode, cause=_signal_cause(returncode))
