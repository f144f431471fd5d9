"""
smartrefs.config - Configuration loading and defaults
"""

from smartrefs.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG
from smartrefs.config.loader import (
    _apply_env_overrides,
    _try_parse_env_value,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
    parse_toml_document,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "_apply_env_overrides",
    "_try_parse_env_value",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml_document",
]
