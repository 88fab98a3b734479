from __future__ import annotations

import stat
import struct
import sys
import zipfile
from pathlib import Path
from typing import Callable, Iterable, Optional

import pytest

PREFIX = "META-INF/node_modules/"

# (name, content or None for directories, unix mode or 0)
Entry = tuple[str, Optional[bytes], int]


def write_archive(path: Path, entries: Iterable[Entry], compression: int = zipfile.ZIP_STORED) -> Path:
    with zipfile.ZipFile(path, "w", compression=compression) as archive:
        for name, content, mode in entries:
            info = zipfile.ZipInfo(name)
            info.compress_type = compression
            if content is None:
                if mode:
                    info.external_attr = (mode | stat.S_IFDIR) << 16
                archive.writestr(info, b"")
            else:
                if mode:
                    info.external_attr = (mode | stat.S_IFREG) << 16
                archive.writestr(info, content)
    return path


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    def _make(entries: Iterable[Entry], name: str = "plugin.jar", compression: int = zipfile.ZIP_STORED) -> Path:
        return write_archive(tmp_path / name, entries, compression)

    return _make


FAKE_JSX = f"""#!{sys.executable}
import json
import os
import sys

root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "..")
with open(os.path.join(root, "invocation.json"), "w", encoding="utf-8") as fh:
    json.dump({{"argv": sys.argv[1:], "cwd": os.getcwd()}}, fh)
sys.exit(int(os.environ.get("FAKE_JSX_EXIT", "0")))
""".encode("utf-8")


@pytest.fixture
def toolchain_archive(make_archive: Callable[..., Path]) -> Path:
    """Archive with a runnable fake `react-tools/bin/jsx` under the toolchain prefix."""

    return make_archive(
        [
            ("META-INF/MANIFEST.MF", b"Manifest-Version: 1.0\n", 0),
            (PREFIX, None, 0),
            (PREFIX + "react-tools/", None, 0),
            (PREFIX + "react-tools/bin/", None, 0),
            (PREFIX + "react-tools/bin/jsx", FAKE_JSX, 0o755),
            (PREFIX + "react-tools/package.json", b'{"name": "react-tools"}\n', 0o644),
        ]
    )


def corrupt_entry_payload(path: Path, name: str, count: int = 20) -> None:
    """Flip the first `count` bytes of an entry's compressed data in place."""

    with zipfile.ZipFile(path) as archive:
        offset = archive.getinfo(name).header_offset
    data = bytearray(path.read_bytes())
    name_len, extra_len = struct.unpack("<HH", data[offset + 26:offset + 30])
    start = offset + 30 + name_len + extra_len
    for i in range(start, start + count):
        data[i] ^= 0xFF
    path.write_bytes(bytes(data))
