"""
smartrefs.selection - Selected references to fix.

A selection is an ordered list of items, each naming the project file to
modify, the library it consumes and (optionally) the project that builds
that library. Items come from the command line, from a TOML selection
manifest, or from a host automation object wrapped by
``HostReferenceAdapter``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Any, Protocol, runtime_checkable

import tomlkit
from tomlkit.exceptions import ParseError


@runtime_checkable
class ReferenceSelection(Protocol):
    """Narrow view of one selected reference."""

    def library_path(self) -> str: ...

    def source_project_path(self) -> str | None: ...

    def containing_project_path(self) -> str: ...


@dataclass(frozen=True)
class SelectedReference:
    """A selected reference built from plain paths.

    Attributes:
        project: Project file that holds the reference (rewritten).
        library: Library file the reference resolves to.
        source_project: Project that builds the library, if known.
    """

    project: str
    library: str
    source_project: str | None = None

    def library_path(self) -> str:
        return self.library

    def source_project_path(self) -> str | None:
        return self.source_project

    def containing_project_path(self) -> str:
        return self.project


class HostReferenceAdapter:
    """Adapt a loosely typed host reference object.

    The host object exposes ``Path``, ``SourceProject.FullName`` (the
    source project may be missing) and ``ContainingProject.FullName``, the
    shape IDE automation models give to reference items.
    """

    def __init__(self, item: Any) -> None:
        self._item = item

    def library_path(self) -> str:
        return str(self._item.Path)

    def source_project_path(self) -> str | None:
        source = getattr(self._item, "SourceProject", None)
        if source is None:
            return None
        full_name = getattr(source, "FullName", None)
        return str(full_name) if full_name else None

    def containing_project_path(self) -> str:
        return str(self._item.ContainingProject.FullName)


def resolve_path(base: Path, value: str) -> str:
    """Anchor a relative path at ``base``; Windows-style paths are kept verbatim."""
    path = Path(value)
    if path.is_absolute() or "\\" in value or PureWindowsPath(value).drive:
        return value
    return str((base / path).resolve())


def load_selection_manifest(path: Path) -> list[SelectedReference]:
    """Load selected references from a TOML manifest.

    Format::

        [[reference]]
        project = "App/App.csproj"
        library = "Lib/bin/Debug/Lib.dll"
        source_project = "Lib/Lib.csproj"

    Relative paths are resolved against the manifest's directory.
    ``source_project`` may be omitted; such items are skipped when fixing.

    Raises:
        ValueError: The manifest is not valid TOML or an entry lacks
            ``project`` or ``library``.
    """
    path = Path(path)
    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()
    except ParseError as e:
        raise ValueError(f"Invalid selection manifest {path}: {e}") from e

    base = path.parent
    items: list[SelectedReference] = []
    for index, entry in enumerate(doc.get("reference", []), start=1):
        missing = [key for key in ("project", "library") if not entry.get(key)]
        if missing:
            raise ValueError(
                f"{path.name}: reference #{index} is missing {', '.join(missing)}"
            )
        source = entry.get("source_project")
        items.append(
            SelectedReference(
                project=resolve_path(base, entry["project"]),
                library=resolve_path(base, entry["library"]),
                source_project=resolve_path(base, source) if source else None,
            )
        )
    return items
