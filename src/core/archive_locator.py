"""Location of the archive the running program was loaded from.

The toolchain ships inside the program's own distributable (a zipapp or any
zip on `sys.path`). The location is resolved once at startup and handed to
the pipeline explicitly.

Order:
1) an explicit override (`JSX_TRANSFORMER_ARCHIVE_PATH` / `--archive`)
2) the zip archive this module was imported from
"""

from __future__ import annotations

import sys
import zipimport
from pathlib import Path
from types import ModuleType

from core.domain.errors import ArchiveLocationError


def _loader_archive(module: ModuleType) -> Path | None:
    spec = getattr(module, "__spec__", None)
    loader = getattr(spec, "loader", None) or getattr(module, "__loader__", None)
    if isinstance(loader, zipimport.zipimporter):
        return Path(loader.archive)
    return None


def resolve_archive_path(override: Path | None = None, *, module: ModuleType | None = None) -> Path:
    """Return the path of the archive holding the embedded toolchain."""

    if override is not None:
        if not override.is_file():
            raise ArchiveLocationError(f"Configured archive '{override}' does not exist or is not a file")
        return override

    module = module or sys.modules[__name__]
    archive = _loader_archive(module)
    if archive is None:
        raise ArchiveLocationError(
            "Failed to discover archive path to extract embedded node modules: "
            f"'{module.__name__}' was not loaded from an archive (set JSX_TRANSFORMER_ARCHIVE_PATH)"
        )
    return archive
