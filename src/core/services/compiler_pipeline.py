"""Compile pipeline: extract the toolchain, build the command, run it.

The CLI delegates the whole flow to `compile_sources`, which keeps
side-effects such as printing out of the core logic. Collaborators are
injected so that tests (and other entry-points) can substitute them.

Phases run strictly in sequence:

    START -> EXTRACTING -> BUILDING_COMMAND -> RUNNING -> DONE

Any fatal error moves to FAILED and skips the remaining phases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from adapters.archive_extractor import extract_node_modules
from adapters.command_builder import build_command, format_command, resolve_entry_point
from adapters.process_runner import run_process
from core.domain.errors import (
    BuildFailure,
    CompilerExecutionError,
    ExtractionError,
    ProcessLaunchError,
)
from core.domain.models import DEFAULT_ENTRY_POINT, CompileResult, CompilerOptions, Phase
from core.interfaces.toolchain import ProcessRunner, ToolchainExtractor

_logger = logging.getLogger(__name__)


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress)."""

    phase_changed: Callable[[Phase], None] | None = None


def compile_sources(
    *,
    options: CompilerOptions,
    archive_path: Path,
    extractor: ToolchainExtractor = extract_node_modules,
    runner: ProcessRunner = run_process,
    entry_point: str = DEFAULT_ENTRY_POINT,
    hooks: PipelineHooks | None = None,
) -> CompileResult:
    """Run one compile invocation.

    Raises `CompilerExecutionError` when a phase fails fatally and
    `BuildFailure` when the transformer exits with a non-zero code.
    """

    hooks = hooks or PipelineHooks()
    phases: list[Phase] = []

    def enter(phase: Phase) -> None:
        phases.append(phase)
        if hooks.phase_changed:
            hooks.phase_changed(phase)

    enter(Phase.START)
    destination = options.node_module_extract_path

    enter(Phase.EXTRACTING)
    _logger.info("Extracting React tools and dependencies...")
    try:
        extraction = extractor(archive_path, destination)
    except ExtractionError as exc:
        enter(Phase.FAILED)
        raise CompilerExecutionError(Phase.EXTRACTING, exc) from exc

    enter(Phase.BUILDING_COMMAND)
    entry = resolve_entry_point(destination, entry_point)
    _logger.info("jsx transformer binary is available at %s", entry)
    command = build_command(options, entry)

    enter(Phase.RUNNING)
    _logger.info(
        "Transforming files in source path '%s' to destination path '%s'",
        options.source_path,
        options.target_path,
    )
    _logger.debug("Executing jsx binary command: %s", format_command(command))
    try:
        result = runner(command, destination)
    except ProcessLaunchError as exc:
        enter(Phase.FAILED)
        raise CompilerExecutionError(Phase.RUNNING, exc) from exc

    if not result.succeeded:
        enter(Phase.FAILED)
        raise BuildFailure(result.exit_code, result.cause)

    enter(Phase.DONE)
    return CompileResult(command=command, process=result, extraction=extraction, phases=phases)
