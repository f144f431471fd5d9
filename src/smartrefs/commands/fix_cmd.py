"""
smartrefs.commands.fix_cmd - Fix selected project references.

For every selected reference that knows its source project, the
containing project file is rewritten so the reference is a project
reference inside Visual Studio and a binary reference elsewhere. Each
item is loaded, fixed and saved independently; a reference that cannot
be found is reported and the remaining items are still processed.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from smartrefs.config import get_config
from smartrefs.msbuild import FixOptions, FixResult, fix_reference
from smartrefs.output import OutputChannel, get_channel
from smartrefs.selection import (
    ReferenceSelection,
    SelectedReference,
    load_selection_manifest,
    resolve_path,
)


class FixReferenceCommand:
    """The "fix reference" command, created once per host session.

    Args:
        config: Effective configuration (see ``smartrefs.config``).
        output: Channel that receives diagnostics.
        **overrides: ``FixOptions`` fields overriding the ``[fix]`` table.
    """

    def __init__(self, config: dict[str, Any], output: OutputChannel, **overrides: Any) -> None:
        self.config = config
        self.output = output
        self.options = FixOptions.from_config(config, **overrides)

    def execute(self, selection: Iterable[ReferenceSelection]) -> list[FixResult]:
        """Fix every selected reference that has a source project.

        Raises:
            ProjectReferenceNotFound: In strict mode, on the first missing
                reference; later items are not processed.
        """
        results: list[FixResult] = []
        try:
            for item in selection:
                library = item.library_path()
                source = item.source_project_path()
                if source is None:
                    self.output.write_line(f"Skipping {library}: no source project")
                    continue

                results.append(
                    fix_reference(
                        item.containing_project_path(),
                        library,
                        source,
                        options=self.options,
                        output=self.output,
                    )
                )
        finally:
            self.output.activate()
        return results


def _build_selection(args: argparse.Namespace) -> list[ReferenceSelection] | None:
    """Collect selected references from --selection or the single-item flags."""
    manifest = getattr(args, "selection", None)
    project = getattr(args, "project", None)
    library = getattr(args, "library", None)

    if manifest:
        return list(load_selection_manifest(Path(manifest)))

    if not project or not library:
        print(
            "Error: specify --selection FILE or both --project and --library",
            file=sys.stderr,
        )
        return None

    source = getattr(args, "source_project", None)
    cwd = Path.cwd()
    return [
        SelectedReference(
            project=resolve_path(cwd, project),
            library=resolve_path(cwd, library),
            source_project=resolve_path(cwd, source) if source else None,
        )
    ]


def run(args: argparse.Namespace) -> int:
    """Run the fix command.

    Returns:
        0 when every item was fixed or skipped, 1 when a project reference
        was not found or the arguments were incomplete.
    """
    quiet = getattr(args, "quiet", False)
    dry_run = getattr(args, "dry_run", False)
    config = get_config(config_path=getattr(args, "config", None))

    selection = _build_selection(args)
    if selection is None:
        return 1

    output_cfg = config.get("output", {})
    output = get_channel(
        output_cfg.get("channel_name", "Smart References"),
        output_cfg.get("channel_id", "smartrefs"),
        quiet=quiet,
    )

    command = FixReferenceCommand(
        config,
        output,
        dry_run=dry_run,
        strict=True if getattr(args, "strict", False) else None,
        dedupe_outside=True if getattr(args, "dedupe", False) else None,
    )
    results = command.execute(selection)

    if not quiet:
        verb = "Would fix" if dry_run else "Fixed"
        for result in results:
            if not result.fixed:
                continue
            project = Path(result.project_path).name
            print(f"{verb} {result.project_name} in {project}: {result.hint_path}")
            if getattr(args, "verbose", False):
                print(f"  moved into inside-IDE group: {'yes' if result.moved else 'no'}")
                print(f"  binary reference added: {'yes' if result.added else 'no'}")
                for message in result.messages:
                    print(f"  {message}")

    return 0 if all(result.fixed for result in results) else 1
