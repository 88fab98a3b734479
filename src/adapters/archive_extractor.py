"""Extraction of the embedded toolchain from the program's archive.

Only entries under `META-INF/node_modules/` are materialized; the prefix is
stripped and the remaining relative layout is preserved. Entries are handled
in the archive's own order, so parent directories are created lazily when a
file shows up before its directory entry.

Any failure aborts the whole extraction. Files written before the failure are
left in place.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Iterator

from core.domain.errors import (
    ArchiveUnreadableError,
    DestinationDirectoryError,
    EntryCopyError,
)
from core.domain.models import BUFFER_SIZE, EXTRACTION_PREFIX, ArchiveEntry, ExtractionReport

_logger = logging.getLogger(__name__)

# zipfile reports corrupt deflate streams as zlib.error, truncated ones as
# EOFError, and unsupported compression or encryption as RuntimeError.
_ENTRY_READ_ERRORS = (OSError, EOFError, RuntimeError, zipfile.BadZipFile, zlib.error)


def iter_archive_entries(archive: zipfile.ZipFile, prefix: str = EXTRACTION_PREFIX) -> Iterator[ArchiveEntry]:
    """Yield the entries under `prefix`, in archive order, prefix stripped.

    The prefix's own directory marker is skipped.
    """

    for info in archive.infolist():
        if not info.filename.startswith(prefix) or info.filename == prefix:
            continue
        name = info.filename[len(prefix):]
        mode = stat.S_IMODE(info.external_attr >> 16)
        if info.is_dir():
            yield ArchiveEntry(name=name, is_directory=True, mode=mode)
        else:
            yield ArchiveEntry(
                name=name,
                is_directory=False,
                open=lambda info=info: archive.open(info),
                mode=mode,
            )


def _output_path(destination: Path, entry: ArchiveEntry) -> Path:
    relative = PurePosixPath(entry.name.rstrip("/"))
    if relative.is_absolute() or ".." in relative.parts or not relative.parts:
        raise EntryCopyError(entry.name, None, "entry path escapes the destination directory")
    return destination.joinpath(*relative.parts)


def _ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        if not path.is_dir():
            raise DestinationDirectoryError(path, str(exc)) from exc
    if not path.is_dir():
        raise DestinationDirectoryError(path)


def copy_entry(entry: ArchiveEntry, output: Path) -> None:
    """Copy one file entry into `output`, replacing any previous copy.

    Any failure while reading the entry (I/O, corrupt or truncated
    compressed data, unsupported compression or encryption) is raised as
    `EntryCopyError`; both streams are closed on every path.
    """

    if entry.open is None:
        raise EntryCopyError(entry.name, output, "entry has no content")
    try:
        # A previous run may have left a read-only copy behind.
        if output.is_file() and not os.access(output, os.W_OK):
            output.chmod(output.stat().st_mode | stat.S_IWUSR)
        with entry.open() as source, open(output, "wb") as target:
            shutil.copyfileobj(source, target, BUFFER_SIZE)
        # Unix permission bits matter for the entry point script; the owner
        # keeps write access so the next extraction can overwrite the file.
        if entry.mode and os.name != "nt":
            output.chmod(entry.mode | stat.S_IWUSR)
    except _ENTRY_READ_ERRORS as exc:
        raise EntryCopyError(entry.name, output, str(exc) or type(exc).__name__) from exc


def extract_node_modules(
    archive_path: Path,
    destination: Path,
    *,
    prefix: str = EXTRACTION_PREFIX,
) -> ExtractionReport:
    """Extract every entry under `prefix` from `archive_path` into `destination`.

    Existing files are overwritten, so running it twice leaves the same
    content on disk.
    """

    report = ExtractionReport(destination=destination)

    try:
        archive = zipfile.ZipFile(archive_path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveUnreadableError(archive_path, str(exc)) from exc

    with archive:
        _ensure_directory(destination)

        for entry in iter_archive_entries(archive, prefix):
            output = _output_path(destination, entry)
            _logger.debug("Extracting archive entry '%s' to '%s'", entry.name, output)

            if entry.is_directory:
                _ensure_directory(output)
                report.directories += 1
                continue

            _ensure_directory(output.parent)
            copy_entry(entry, output)
            report.files += 1

    _logger.debug(
        "Extracted %d files and %d directories into '%s'",
        report.files,
        report.directories,
        destination,
    )
    return report
