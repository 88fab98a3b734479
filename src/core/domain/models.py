"""Domain models for the JSX transformer step (Pydantic v2).

These models describe *what* the step consumes and produces: the options
bound from configuration, the entries read from the backing archive and the
outcome of the external transformer. They know nothing about zip files,
subprocesses or the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Callable

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

EXTRACTION_PREFIX = "META-INF/node_modules/"
DEFAULT_ENTRY_POINT = "react-tools/bin/jsx"
BUFFER_SIZE = 0x4000


class Phase(str, Enum):
    """Steps of a single compile invocation."""

    START = "start"
    EXTRACTING = "extracting"
    BUILDING_COMMAND = "building_command"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"

    def label(self) -> str:
        return {
            Phase.START: "Start",
            Phase.EXTRACTING: "Extraction",
            Phase.BUILDING_COMMAND: "Command",
            Phase.RUNNING: "Execution",
            Phase.DONE: "Done",
            Phase.FAILED: "Failed",
        }[self]


class CompilerOptions(BaseModel):
    """Options for one transformer invocation.

    Built once per invocation (usually by `AppSettings.to_compiler_options`)
    and read-only afterwards.
    """

    model_config = ConfigDict(frozen=True)

    node_module_extract_path: Path = Field(
        ...,
        description="Directory the embedded toolchain is extracted into.",
    )
    source_path: str = Field(
        ...,
        min_length=1,
        description="Directory holding the JSX sources.",
    )
    target_path: str = Field(
        ...,
        min_length=1,
        description="Directory the plain JavaScript output is written to.",
    )
    source_charset: str = Field(default="utf8", description="Encoding of the sources.")
    target_charset: str = Field(default="utf8", description="Encoding of the output.")
    target_ecma_version: str = Field(default="es5", description="Target ECMAScript version.")
    strip_annotation_types: bool = Field(default=False, description="Strip type annotations.")
    relative: bool = Field(default=False, description="Rewrite module identifiers as relative.")
    follow_requires: bool = Field(default=False, description="Scan modules for required dependencies.")
    extension: str = Field(
        default="js",
        min_length=1,
        description="File suffix to scan for, without the dot.",
    )
    module_ids: tuple[str, ...] = Field(
        default=(),
        description="Module identifiers passed positionally, in order.",
    )

    @field_validator("source_path", "target_path", "extension")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


@dataclass(frozen=True)
class ArchiveEntry:
    """An entry read from the backing archive.

    `name` keeps the archive's forward-slash separators. `open` is `None`
    for directory entries.
    """

    name: str
    is_directory: bool
    open: Callable[[], IO[bytes]] | None = None
    mode: int = 0


@dataclass
class ExtractionReport:
    destination: Path
    files: int = 0
    directories: int = 0


class ProcessResult(BaseModel):
    """Exit status of the external transformer."""

    model_config = ConfigDict(frozen=True)

    exit_code: int = Field(..., description="Process exit code (negative when killed by a signal).")
    cause: str | None = Field(
        default=None,
        description="Failure detail when the exit status alone does not explain it.",
    )

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass
class CompileResult:
    """Output of a successful pipeline invocation."""

    command: list[str]
    process: ProcessResult
    extraction: ExtractionReport
    phases: list[Phase] = field(default_factory=list)
