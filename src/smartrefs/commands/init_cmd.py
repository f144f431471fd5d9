"""
smartrefs.commands.init_cmd - Create a .smartrefs.toml configuration file.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import tomlkit

from smartrefs.config import CONFIG_FILENAME, DEFAULT_CONFIG


def build_default_document() -> tomlkit.TOMLDocument:
    """Build the default configuration as a commented TOML document."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("smartrefs configuration"))
    doc.add(tomlkit.nl())

    fix = tomlkit.table()
    defaults = DEFAULT_CONFIG["fix"]
    fix.add(tomlkit.comment("Build-configuration directories replaced in hint paths"))
    fix.add("configuration_segments", list(defaults["configuration_segments"]))
    fix.add("configuration_placeholder", defaults["configuration_placeholder"])
    fix.add("private_value", defaults["private_value"])
    fix.add(tomlkit.comment("Do not add a binary reference that is already present"))
    fix.add("dedupe_outside", defaults["dedupe_outside"])
    fix.add(tomlkit.comment("Abort on the first project reference that is not found"))
    fix.add("strict", defaults["strict"])
    fix.add("indent", defaults["indent"])
    doc.add("fix", fix)

    output = tomlkit.table()
    output.add("channel_name", DEFAULT_CONFIG["output"]["channel_name"])
    output.add("channel_id", DEFAULT_CONFIG["output"]["channel_id"])
    doc.add("output", output)
    return doc


def run(args: argparse.Namespace) -> int:
    """Write .smartrefs.toml into the current directory."""
    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists() and not getattr(args, "force", False):
        print(f"Configuration already exists: {config_path}", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        return 1

    config_path.write_text(tomlkit.dumps(build_default_document()), encoding="utf-8")
    if not getattr(args, "quiet", False):
        print(f"Created {config_path}")
    return 0
