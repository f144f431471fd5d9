"""
smartrefs.config.loader - Locate, parse and merge configuration.

Configuration comes from three layers, later ones winning:

1. ``DEFAULT_CONFIG``
2. ``.smartrefs.toml`` (found by walking up from the working directory)
3. ``SMARTREFS_<SECTION>_<KEY>`` environment variables
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.toml_document import TOMLDocument

from smartrefs.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG

ENV_PREFIX = "SMARTREFS_"


def parse_toml_document(content: str) -> TOMLDocument:
    """Parse TOML text, keeping formatting for round-trip writes."""
    return tomlkit.parse(content)


def find_config_file(start_path: Path) -> Path | None:
    """Find ``.smartrefs.toml`` in ``start_path`` or one of its parents.

    The search stops at the first directory containing ``.git``.
    """
    current = Path(start_path).resolve()
    if current.is_file():
        current = current.parent

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if (current / ".git").exists() or current.parent == current:
            return None
        current = current.parent


def merge_configs(defaults: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``user`` over ``defaults`` without mutating either."""
    merged = copy.deepcopy(defaults)
    for key, value in user.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file and merge it over the defaults.

    Raises:
        ValueError: The file is not valid TOML.
    """
    config_path = Path(config_path)
    try:
        user = parse_toml_document(config_path.read_text(encoding="utf-8")).unwrap()
    except ParseError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e
    return merge_configs(DEFAULT_CONFIG, user)


def _try_parse_env_value(value: str) -> Any:
    """Interpret an environment value as JSON list/object, boolean or string."""
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``SMARTREFS_<SECTION>_<KEY>`` variables to ``config`` in place.

    ``SMARTREFS_FIX_DEDUPE_OUTSIDE=true`` sets ``config["fix"]["dedupe_outside"]``.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not section or not key:
            continue
        table = config.setdefault(section, {})
        if not isinstance(table, dict):
            continue
        table[key] = _try_parse_env_value(raw)
    return config


def get_config(
    config_path: Path | None = None,
    start_path: Path | None = None,
) -> dict[str, Any]:
    """Return the effective configuration.

    Args:
        config_path: Explicit config file; discovered when None.
        start_path: Directory to start discovery from (default: cwd).
    """
    if config_path is None:
        config_path = find_config_file(start_path or Path.cwd())

    if config_path is not None:
        config = load_config(config_path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)
    return _apply_env_overrides(config)
