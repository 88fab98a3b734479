"""Typer application for the JSX transformer step."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli import doctor
from cli.ui_components import build_result_panel, print_banner, print_error
from core.archive_locator import resolve_archive_path
from core.config import AppSettings
from core.domain.errors import ArchiveLocationError, BuildFailure, CompilerExecutionError
from core.domain.models import Phase
from core.services.compiler_pipeline import PipelineHooks, compile_sources

app = typer.Typer(
    no_args_is_help=True,
    help="Extract the embedded JSX transformer and run it against a source tree.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_logger = logging.getLogger(__name__)


def configure_logging(*, verbose: bool, console: Console | None = None) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), show_path=False)],
        force=True,
    )


def _apply_overrides(settings: AppSettings, overrides: dict[str, Any]) -> AppSettings:
    update = {key: value for key, value in overrides.items() if value is not None}
    if not update:
        return settings
    return settings.model_copy(update=update)


@app.command(name="compile")
def compile_command(
    module_ids: Optional[list[str]] = typer.Argument(None, help="Module IDs passed to the transformer, in order."),
    source_path: Optional[str] = typer.Option(None, "--source-path", help="Source path for transforming JSX."),
    target_path: Optional[str] = typer.Option(None, "--target-path", help="Target path for transformed JavaScript."),
    extract_path: Optional[Path] = typer.Option(None, "--extract-path", help="Where the toolchain is extracted."),
    archive: Optional[Path] = typer.Option(None, "--archive", help="Archive holding the embedded toolchain."),
    source_charset: Optional[str] = typer.Option(None, "--source-charset"),
    target_charset: Optional[str] = typer.Option(None, "--target-charset"),
    target_version: Optional[str] = typer.Option(None, "--target", help="Target ECMAScript version."),
    extension: Optional[str] = typer.Option(None, "--extension", help="File extension to scan for."),
    strip_types: Optional[bool] = typer.Option(None, "--strip-types/--no-strip-types"),
    relative: Optional[bool] = typer.Option(None, "--relative/--no-relative"),
    follow_requires: Optional[bool] = typer.Option(None, "--follow-requires/--no-follow-requires"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log the extracted entries and the full command."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the banner."),
) -> None:
    """Transform the JSX sources with the embedded toolchain."""

    configure_logging(verbose=verbose)
    if not quiet:
        print_banner(_console)

    settings = _apply_overrides(
        AppSettings(),
        {
            "module_ids": list(module_ids) if module_ids else None,
            "source_path": source_path,
            "target_path": target_path,
            "node_module_extract_path": extract_path,
            "archive_path": archive,
            "source_charset": source_charset,
            "target_charset": target_charset,
            "target_ecma_version": target_version,
            "extension": extension,
            "strip_annotation_types": strip_types,
            "relative": relative,
            "follow_requires": follow_requires,
        },
    )

    try:
        options = settings.to_compiler_options()
    except ValueError as exc:
        print_error(_console, f"Configuration failed: {exc}")
        raise typer.Exit(code=1) from exc

    try:
        archive_path = resolve_archive_path(settings.archive_path)
    except ArchiveLocationError as exc:
        print_error(_console, f"Resolution failed: {exc}")
        raise typer.Exit(code=1) from exc

    hooks = PipelineHooks(phase_changed=lambda phase: _logger.debug("Phase: %s", phase.value))

    try:
        result = compile_sources(
            options=options,
            archive_path=archive_path,
            entry_point=settings.entry_point,
            hooks=hooks,
        )
    except CompilerExecutionError as exc:
        print_error(_console, str(exc))
        raise typer.Exit(code=1) from exc
    except BuildFailure as exc:
        print_error(_console, f"{Phase.RUNNING.label()} failed: {exc}")
        raise typer.Exit(code=exc.exit_code if exc.exit_code > 0 else 1) from exc

    _console.print(build_result_panel(result))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
