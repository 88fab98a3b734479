from __future__ import annotations

import types
import zipimport
from pathlib import Path

import pytest

from core.archive_locator import resolve_archive_path
from core.domain.errors import ArchiveLocationError


def test_override_wins(toolchain_archive: Path) -> None:
    assert resolve_archive_path(toolchain_archive) == toolchain_archive


def test_missing_override_is_a_location_error(tmp_path: Path) -> None:
    with pytest.raises(ArchiveLocationError):
        resolve_archive_path(tmp_path / "missing.jar")


def test_module_loaded_from_zip(toolchain_archive: Path) -> None:
    module = types.ModuleType("bundled")
    module.__loader__ = zipimport.zipimporter(str(toolchain_archive))

    assert resolve_archive_path(module=module) == toolchain_archive


def test_source_checkout_is_unsupported() -> None:
    # Tests import the package from the filesystem, not from an archive.
    with pytest.raises(ArchiveLocationError) as exc_info:
        resolve_archive_path()

    assert "JSX_TRANSFORMER_ARCHIVE_PATH" in str(exc_info.value)
