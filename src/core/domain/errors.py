"""Error taxonomy for the compile step.

Lower layers raise the specific errors below and chain the underlying cause
with `raise ... from exc`. The pipeline turns them into either a
`CompilerExecutionError` (fatal) or a `BuildFailure` (the transformer ran and
reported a non-zero exit code).
"""

from __future__ import annotations

from pathlib import Path

from core.domain.models import Phase


class TransformerError(Exception):
    """Base class for every error raised by this package."""


class ArchiveLocationError(TransformerError):
    """The archive backing the running program could not be located."""


class ExtractionError(TransformerError):
    """Base class for failures while extracting the embedded toolchain."""


class ArchiveUnreadableError(ExtractionError):
    def __init__(self, archive_path: Path, reason: str) -> None:
        super().__init__(f"Failed to open archive '{archive_path}': {reason}")
        self.archive_path = archive_path


class DestinationDirectoryError(ExtractionError):
    def __init__(self, path: Path, reason: str | None = None) -> None:
        message = f"Failed to create path '{path}' whilst extracting embedded node modules"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class EntryCopyError(ExtractionError):
    def __init__(self, entry_name: str, path: Path | None, reason: str) -> None:
        target = f" to '{path}'" if path is not None else ""
        super().__init__(f"Failed to extract archive entry '{entry_name}'{target}: {reason}")
        self.entry_name = entry_name
        self.path = path


class ProcessLaunchError(TransformerError):
    """The transformer could not be started, or the wait was interrupted."""

    def __init__(self, command: list[str], reason: str) -> None:
        program = command[0] if command else "<empty>"
        super().__init__(f"Failed to execute '{program}': {reason}")
        self.command = list(command)


class CompilerExecutionError(TransformerError):
    """Fatal failure of one phase of the pipeline."""

    def __init__(self, phase: Phase, cause: BaseException | str) -> None:
        super().__init__(f"{phase.label()} failed: {cause}")
        self.phase = phase


class BuildFailure(TransformerError):
    """The transformer terminated with a non-zero exit code."""

    def __init__(self, exit_code: int, cause: str | None = None) -> None:
        message = f"JSX transformer returned non zero status code {exit_code}"
        if cause:
            message = f"{message} ({cause})"
        super().__init__(message)
        self.phase = Phase.RUNNING
        self.exit_code = exit_code
        self.cause = cause
