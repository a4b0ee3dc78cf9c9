"""
Configuration for girlink runs.

Settings live in an optional ``.girlink.yml`` next to where girlink is run::

    girDirectories:
      - /usr/share/gir-1.0
    modules:
      - Gtk-3.0
    ignore:
      - Gtk-4.0
    ignoreVersionConflicts: false
    verbose: false

CLI options are merged on top of the file.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

CONFIG_FILENAME = ".girlink.yml"
DEFAULT_GIR_DIRECTORY = Path("/usr/share/gir-1.0")


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


class GenerateConfig(BaseModel):
    """
    Settings for one girlink run.

    Attributes:
        gir_directories: Directories searched for .gir files, in order
        modules: Module name patterns to load, wildcards allowed
        ignore: Package names to leave out
        ignore_version_conflicts: Keep every version instead of asking
        verbose: Enable debug logging
    """

    gir_directories: list[Path] = Field(
        default_factory=lambda: [DEFAULT_GIR_DIRECTORY], alias="girDirectories"
    )
    modules: list[str] = Field(default_factory=lambda: ["*"])
    ignore: list[str] = Field(default_factory=list)
    ignore_version_conflicts: bool = Field(default=False, alias="ignoreVersionConflicts")
    verbose: bool = False

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def merged(self, **overrides: Any) -> GenerateConfig:
        """
        Return a copy with ``overrides`` applied.

        None values are skipped, empty lists keep the current value and
        ``ignore`` is unioned rather than replaced.
        """
        updates: dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, list | tuple) and not value:
                continue
            if key == "ignore":
                value = _unique([*self.ignore, *value])
            elif key == "gir_directories":
                value = [Path(v) for v in value]
            updates[key] = list(value) if isinstance(value, tuple) else value
        return self.model_copy(update=updates)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping", path)
    return data


def load_config(path: Path | None = None) -> GenerateConfig:
    """
    Load configuration from YAML.

    Args:
        path: Config file; defaults to ``.girlink.yml`` in the working directory

    Returns:
        GenerateConfig, with defaults if the file does not exist or is empty

    Raises:
        ConfigError: If the file is not valid YAML or has invalid fields
    """
    path = path or Path.cwd() / CONFIG_FILENAME
    if not path.exists():
        return GenerateConfig()

    data = _read_yaml(path)
    try:
        return GenerateConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}", path) from e


class YamlConfigStore:
    """Persists the ignore list into the YAML config file."""

    def __init__(self, path: Path | None = None):
        self._path = path or Path.cwd() / CONFIG_FILENAME

    @property
    def config_path(self) -> Path:
        return self._path

    def read_ignore(self) -> list[str]:
        if not self._path.exists():
            return []
        ignore = _read_yaml(self._path).get("ignore") or []
        if not isinstance(ignore, list):
            raise ConfigError("'ignore' must be a list", self._path)
        return [str(name) for name in ignore]

    def add_to_ignore(self, names: Iterable[str]) -> None:
        """Merge ``names`` into the persisted ignore list, creating the file if needed."""
        data = _read_yaml(self._path) if self._path.exists() else {}
        data["ignore"] = _unique([*self.read_ignore(), *names])

        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
