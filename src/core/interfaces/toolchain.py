"""Contracts for the toolchain collaborators used by the compile pipeline.

The pipeline depends on these signatures only; the zip-based extractor and
the subprocess runner in `adapters` satisfy them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import ExtractionReport, ProcessResult


@runtime_checkable
class ToolchainExtractor(Protocol):
    """Materializes the embedded toolchain from `archive_path` into `destination`."""

    def __call__(self, archive_path: Path, destination: Path) -> ExtractionReport:
        ...


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs a command to completion inside `cwd` and reports its exit status."""

    def __call__(self, command: Sequence[str], cwd: Path) -> ProcessResult:
        ...
