"""Doctor command for environment diagnostics."""

from __future__ import annotations

import os
import shutil
import zipfile
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from core.archive_locator import resolve_archive_path
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import ArchiveLocationError
from core.domain.models import EXTRACTION_PREFIX

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_archive(archive_path: Path, entry_point: str) -> tuple[bool, str]:
    """Check the archive holds the toolchain subtree and its entry point."""

    try:
        with zipfile.ZipFile(archive_path) as archive:
            names = archive.namelist()
    except (OSError, zipfile.BadZipFile) as exc:
        return False, str(exc)

    toolchain = [name for name in names if name.startswith(EXTRACTION_PREFIX) and name != EXTRACTION_PREFIX]
    if not toolchain:
        return False, f"No entries under {EXTRACTION_PREFIX}"
    if EXTRACTION_PREFIX + entry_point not in names:
        return False, f"{len(toolchain)} entries, entry point '{entry_point}' missing"
    return True, f"{len(toolchain)} entries"


def _check_writable(path: Path) -> tuple[bool, str]:
    probe = path
    while not probe.exists() and probe != probe.parent:
        probe = probe.parent
    if probe.is_dir() and os.access(probe, os.W_OK):
        return True, str(path)
    return False, f"{probe} is not a writable directory"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="jsx-transformer Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok = True

    try:
        archive_path = resolve_archive_path(settings.archive_path)
        table.add_row("Archive location", "OK", str(archive_path))
        ok_archive, detail_archive = _check_archive(archive_path, settings.entry_point)
        table.add_row("Embedded toolchain", "OK" if ok_archive else "FAIL", detail_archive)
        ok = ok and ok_archive
    except ArchiveLocationError as exc:
        table.add_row("Archive location", "FAIL", str(exc))
        ok = False

    node = shutil.which("node")
    table.add_row("node on PATH", "OK" if node else "FAIL", node or "Install Node.js to run the transformer")
    ok = ok and bool(node)

    ok_dir, detail_dir = _check_writable(settings.resolved_extract_path())
    table.add_row("Extraction directory", "OK" if ok_dir else "FAIL", detail_dir)
    ok = ok and ok_dir

    table.add_row("Source path", "INFO", settings.resolved_source_path())
    table.add_row("Target path", "INFO", settings.resolved_target_path())

    _console.print(table)

    if not ok:
        raise typer.Exit(code=1)


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    build_directory = typer.prompt("Build directory", default=str(settings.build_directory)).strip()
    final_name = typer.prompt("Build output folder name", default=settings.final_name).strip()
    ecma_version = typer.prompt("Target ECMAScript version", default=settings.target_ecma_version).strip()
    extension = typer.prompt("File extension to scan for", default=settings.extension).strip()
    archive = typer.prompt(
        "Archive holding the toolchain (empty: auto-detect)",
        default=str(settings.archive_path or ""),
        show_default=False,
    ).strip()

    if not build_directory or not final_name or not extension:
        raise typer.BadParameter("build directory, output folder name and extension are required")

    env_path = write_user_env_vars(
        {
            "JSX_TRANSFORMER_BUILD_DIRECTORY": build_directory,
            "JSX_TRANSFORMER_FINAL_NAME": final_name,
            "JSX_TRANSFORMER_TARGET_ECMA_VERSION": ecma_version,
            "JSX_TRANSFORMER_EXTENSION": extension,
            "JSX_TRANSFORMER_ARCHIVE_PATH": archive or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
