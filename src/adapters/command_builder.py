"""Translation of `CompilerOptions` into the transformer's command line.

The transformer's argument grammar is positional and flag-order sensitive:

    <entry> [--relativize] [--follow-requires] [--source-charset <cs>]
            [--output-charset <cs>] [--target <ver>] [--strip-types]
            --extension <ext> <source> <target> [<module id> ...]

No validation happens here; values are passed through verbatim.
"""

from __future__ import annotations

import shlex
from pathlib import Path, PurePosixPath
from typing import Sequence

from core.domain.models import DEFAULT_ENTRY_POINT, CompilerOptions


def resolve_entry_point(extract_path: Path, entry_point: str = DEFAULT_ENTRY_POINT) -> Path:
    """Absolute path of the transformer script inside the extraction directory."""

    return extract_path.absolute().joinpath(*PurePosixPath(entry_point).parts)


def build_command(options: CompilerOptions, entry_point: Path | str) -> list[str]:
    command = [str(entry_point)]

    if options.relative:
        command.append("--relativize")

    if options.follow_requires:
        command.append("--follow-requires")

    if options.source_charset:
        command.extend(["--source-charset", options.source_charset])

    if options.target_charset:
        command.extend(["--output-charset", options.target_charset])

    if options.target_ecma_version:
        command.extend(["--target", options.target_ecma_version])

    if options.strip_annotation_types:
        command.append("--strip-types")

    command.extend(["--extension", options.extension])

    command.append(options.source_path)
    command.append(options.target_path)
    command.extend(options.module_ids)

    return command


def format_command(command: Sequence[str]) -> str:
    """Shell-quoted rendering of a command, for logs."""

    return shlex.join(command)
