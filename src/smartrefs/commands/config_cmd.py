"""
smartrefs.commands.config_cmd - Inspect the effective configuration.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import tomlkit

from smartrefs.config import find_config_file, get_config


def run(args: argparse.Namespace) -> int:
    """Dispatch ``config path`` / ``config show``."""
    action = getattr(args, "config_action", None)
    if action == "path":
        return cmd_path(args)
    if action == "show":
        return cmd_show(args)
    print("Usage: smartrefs config {path,show}", file=sys.stderr)
    return 1


def cmd_path(args: argparse.Namespace) -> int:
    """Print the configuration file in use."""
    config_path = getattr(args, "config", None) or find_config_file(Path.cwd())
    if config_path is None:
        print("No configuration file found (using defaults)")
        return 0
    print(config_path)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the merged configuration as TOML."""
    config = get_config(config_path=getattr(args, "config", None))
    print(tomlkit.dumps(config), end="")
    return 0
