"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets the pipeline and the doctor read the same contract, bound once per
  invocation and frozen into a `CompilerOptions` value.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import DEFAULT_ENTRY_POINT, CompilerOptions


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies).

    Goal: let an installed build step be configured once per machine, without
    editing a `.env` inside every project.
    """

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "jsx-transformer"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "jsx-transformer"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "jsx-transformer"
    return Path.home() / ".config" / "jsx-transformer"


def _absolute(value: str) -> str:
    # Blank paths stay blank so `CompilerOptions` rejects them.
    if not value.strip():
        return value
    return str(Path(value).absolute())


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env.

    Why rewrite the whole file:
    - Keeps the keys sorted and deduplicated, so `doctor configure` can be run
      repeatedly without growing the file.
    - `None` values are skipped: an empty prompt keeps the previous setting.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# jsx-transformer user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central configuration of the compile step.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars, .env files) without putting
      that logic in the Core.
    - A single configuration contract for the CLI and the pipeline.

    Defaults follow the build layout the step was designed for: everything
    lives under `build_directory`, the toolchain is extracted into
    `<build>/react-jsxtransformer` and sources are transformed in place under
    `<build>/<final_name>`.
    """

    model_config = SettingsConfigDict(
        env_prefix="JSX_TRANSFORMER_",
        extra="ignore",
        case_sensitive=False,
        # Project first, then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    build_directory: Path = Field(
        default=Path("target"),
        description="Build output directory of the calling project.",
    )
    final_name: str = Field(
        default="classes",
        min_length=1,
        description="Name of the build's output folder inside `build_directory`.",
    )

    node_module_extract_path: Path | None = Field(
        default=None,
        description="Where the embedded toolchain is extracted (default: <build>/react-jsxtransformer).",
    )
    source_path: str | None = Field(
        default=None,
        description="Source path for transforming JSX (default: <build>/<final_name>).",
    )
    target_path: str | None = Field(
        default=None,
        description="Target path for transformed JavaScript (default: <build>/<final_name>).",
    )
    source_charset: str = Field(default="utf8", description="Source encoding for JSX transformation.")
    target_charset: str = Field(default="utf8", description="Target encoding for JSX transformation.")
    target_ecma_version: str = Field(default="es5", description="Target ECMAScript version.")
    strip_annotation_types: bool = Field(default=False, description="Strip annotation types.")
    relative: bool = Field(default=False, description="Rewrite all module identifiers to be relative.")
    follow_requires: bool = Field(default=False, description="Scan modules for required dependencies.")
    extension: str = Field(default="js", min_length=1, description="File extension to scan for.")
    module_ids: list[str] = Field(default_factory=list, description="List of module IDs.")

    archive_path: Path | None = Field(
        default=None,
        description="Archive holding the embedded toolchain (default: the archive this program runs from).",
    )
    entry_point: str = Field(
        default=DEFAULT_ENTRY_POINT,
        min_length=1,
        description="Transformer entry point, relative to the extraction directory.",
    )

    def resolved_extract_path(self) -> Path:
        if self.node_module_extract_path is not None:
            return self.node_module_extract_path
        return self.build_directory / "react-jsxtransformer"

    def resolved_source_path(self) -> str:
        if self.source_path is None:
            return str(self.build_directory / self.final_name)
        return self.source_path

    def resolved_target_path(self) -> str:
        if self.target_path is None:
            return str(self.build_directory / self.final_name)
        return self.target_path

    def to_compiler_options(self) -> CompilerOptions:
        """Bind the settings into an immutable `CompilerOptions`.

        Source and target paths are made absolute: the transformer runs with
        the extraction directory as its working directory.
        """

        return CompilerOptions(
            node_module_extract_path=self.resolved_extract_path().absolute(),
            source_path=_absolute(self.resolved_source_path()),
            target_path=_absolute(self.resolved_target_path()),
            source_charset=self.source_charset,
            target_charset=self.target_charset,
            target_ecma_version=self.target_ecma_version,
            strip_annotation_types=self.strip_annotation_types,
            relative=self.relative,
            follow_requires=self.follow_requires,
            extension=self.extension,
            module_ids=tuple(self.module_ids),
        )
