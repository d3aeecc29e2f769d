"""TOML configuration files for dynamotree.

Settings are layered: ``default.toml`` first, then ``{DYNAMOTREE_ENV}.toml``
on top. Both files are optional; anything they leave out falls back to the
defaults declared on the config models.
"""

import os
import tomllib
from functools import reduce
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "DYNAMOTREE_CONFIG_DIR"
ENVIRONMENT_ENV = "DYNAMOTREE_ENV"
DEFAULT_ENVIRONMENT = "development"

# how far up from the working directory to look for config/
SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Locate the configuration directory.

    DYNAMOTREE_CONFIG_DIR wins when set and must exist. Otherwise the first
    ``config/`` found in the working directory or its parents is used.
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    cwd = Path.cwd()
    for directory in [cwd, *cwd.parents][:SEARCH_DEPTH]:
        candidate = directory / "config"
        if candidate.is_dir():
            return candidate
    return Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Configuration file not found: {file_path}") from e


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_files(config_dir: Path, environment: str) -> list[Path]:
    """Existing layer files in the order they apply."""
    layers = [config_dir / "default.toml", config_dir / f"{environment}.toml"]
    return [path for path in dict.fromkeys(layers) if path.is_file()]


def load_config() -> dict[str, Any]:
    """Read and merge every layer for the current environment."""
    files = config_files(get_config_dir(), get_environment())
    return reduce(deep_merge, (load_toml(path) for path in files), {})
