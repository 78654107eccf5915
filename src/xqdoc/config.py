"""Report configuration loader.

Values are resolved once per invocation, in increasing precedence:
literal defaults, an optional ``xqdoc.yaml`` in the project base directory,
``XQDOC_*`` environment variables, then explicit overrides (CLI options).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "xqdoc.yaml"

ENV_SKIP = "XQDOC_SKIP"
ENV_ARCHIVE = "XQDOC_ARCHIVE"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}

_PATH_KEYS = (
    "build_directory",
    "output_directory",
    "xquery_dir_entry",
    "implementation_folder",
    "archive",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file or an override is invalid."""


@dataclass(frozen=True)
class ReportConfig:
    """Resolved settings for one report generation run."""

    basedir: Path
    build_directory: Path
    output_directory: Path
    xquery_dir_entry: Path
    implementation_folder: Path
    skip: bool = False
    archive: Path | None = None
    java_executable: str = "java"

    @classmethod
    def defaults(cls, basedir: Path) -> ReportConfig:
        """Literal fallback values for a project rooted at ``basedir``."""
        base = basedir.resolve()
        build = base / "build"
        return cls(
            basedir=base,
            build_directory=build,
            output_directory=build / "xquerydoc",
            xquery_dir_entry=base / "src" / "main" / "xquery",
            implementation_folder=build / "xquerydoc" / "__impl",
        )

    @property
    def output_folder(self) -> Path:
        """Folder holding the HTML report and its ``lib`` assets."""
        return self.output_directory / "xquerydoc"

    def with_output_directory(self, output_directory: Path) -> ReportConfig:
        """Copy with a new output directory; relative paths resolve against ``basedir``."""
        if not output_directory.is_absolute():
            output_directory = self.basedir / output_directory
        return replace(self, output_directory=output_directory.resolve())


def parse_bool(value: Any, *, key: str) -> bool:
    """Interpret a YAML or environment value as a boolean flag."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {key}: {value!r}")


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML config at {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Unable to read config at {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config structure in {path}: expected a mapping")
    return data


def _apply(config: ReportConfig, values: dict[str, Any], *, source: str) -> ReportConfig:
    known = {f.name for f in fields(ReportConfig)} - {"basedir"}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {source}: {', '.join(unknown)}")

    updates: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if key in _PATH_KEYS:
            path = Path(os.path.expanduser(str(value)))
            if not path.is_absolute():
                path = config.basedir / path
            updates[key] = path.resolve()
        elif key == "skip":
            updates[key] = parse_bool(value, key=key)
        else:
            updates[key] = str(value)

    # Derived defaults follow an overridden build directory unless set explicitly.
    if "build_directory" in updates:
        build = updates["build_directory"]
        updates.setdefault("output_directory", build / "xquerydoc")
        updates.setdefault("implementation_folder", build / "xquerydoc" / "__impl")

    return replace(config, **updates)


def load_config(
    basedir: Path | None = None,
    *,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
) -> ReportConfig:
    """Resolve the report configuration for a project.

    Args:
        basedir: Project base directory (defaults to the current directory)
        overrides: Explicit values, typically from CLI options; ``None`` values are ignored
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Immutable ReportConfig

    Raises:
        ConfigError: If the config file, an environment value or an override is invalid
    """
    base = (basedir or Path.cwd()).resolve()
    env = os.environ if environ is None else environ
    config = ReportConfig.defaults(base)

    config_path = base / CONFIG_FILENAME
    if config_path.exists():
        config = _apply(config, _read_config_file(config_path), source=str(config_path))

    env_values: dict[str, Any] = {}
    if ENV_SKIP in env:
        env_values["skip"] = parse_bool(env[ENV_SKIP], key=ENV_SKIP)
    if env.get(ENV_ARCHIVE):
        env_values["archive"] = env[ENV_ARCHIVE]
    if env_values:
        config = _apply(config, env_values, source="environment")

    if overrides:
        config = _apply(config, overrides, source="overrides")

    return config
