"""
smartrefs.config.defaults - Built-in configuration values.
"""

from __future__ import annotations

from typing import Any

CONFIG_FILENAME = ".smartrefs.toml"

DEFAULT_CONFIG: dict[str, Any] = {
    "fix": {
        # Directory names replaced by the placeholder in hint paths
        "configuration_segments": ["Debug", "Release"],
        "configuration_placeholder": "$(Configuration)",
        "private_value": "False",
        "dedupe_outside": False,
        "strict": False,
        "indent": "  ",
    },
    "output": {
        "channel_name": "Smart References",
        "channel_id": "0387718b-56c5-47c6-8c88-53b48714ca34",
    },
}
