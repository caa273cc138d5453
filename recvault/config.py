"""Configuration management.

Settings are resolved from, in increasing precedence: built-in defaults,
YAML config files, environment variables, and explicit overrides (CLI
flags).
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

DEFAULT_MONGODB_URI = "mongodb://localhost:27017/vaultdb"


def default_data_dir() -> Path:
    """Default data directory under XDG data home."""
    xdg_data_home = Path(
        os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    )
    return xdg_data_home / "recvault"


@dataclass(frozen=True)
class Settings:
    """Resolved vault configuration."""

    mongodb_uri: str = DEFAULT_MONGODB_URI
    data_dir: Path | None = None
    connect_timeout_ms: int = 5000
    socket_timeout_ms: int = 45000
    collection: str = "records"

    @property
    def resolved_data_dir(self) -> Path:
        return Path(self.data_dir) if self.data_dir else default_data_dir()

    @property
    def records_file(self) -> Path:
        return self.resolved_data_dir / "records.json"

    @property
    def backup_dir(self) -> Path:
        return self.resolved_data_dir / "backups"


def get_config_paths() -> list[Path]:
    """Get configuration paths in precedence order."""
    xdg_config_home = Path(
        os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    )
    return [
        xdg_config_home / "recvault" / "config.yaml",
        Path("recvault.yaml"),
    ]


def read_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except OSError as e:
        raise ValueError(f"Error reading config file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def load_settings(
    config_file: Path | None = None, **overrides: Any
) -> Settings:
    """Resolve settings from files, environment, and overrides.

    Args:
        config_file: Explicit config file; replaces the default search paths.
        **overrides: Values that win over everything else. ``None`` values
            are ignored.

    Returns:
        The resolved ``Settings``.
    """
    values: dict[str, Any] = {}

    paths = [config_file] if config_file else get_config_paths()
    for path in paths:
        if path.exists():
            values.update(read_config_file(path))

    if uri := os.environ.get("MONGODB_URI"):
        values["mongodb_uri"] = uri
    if data_dir := os.environ.get("RECVAULT_DATA_DIR"):
        values["data_dir"] = data_dir

    values.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(Settings)}
    settings = replace(Settings(), **{k: v for k, v in values.items() if k in known})
    if settings.data_dir is not None:
        settings = replace(settings, data_dir=Path(settings.data_dir).expanduser())
    return settings
