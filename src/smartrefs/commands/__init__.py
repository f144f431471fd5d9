"""
smartrefs.commands - CLI command implementations
"""

__all__ = [
    "completion",
    "config_cmd",
    "fix_cmd",
    "init_cmd",
]
