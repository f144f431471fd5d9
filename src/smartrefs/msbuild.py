"""MSBuild project file rewriting.

Turns a project-to-project reference into a pair of conditioned
references:

- the ``ProjectReference`` moves into an ``ItemGroup`` guarded by
  ``'$(BuildingInsideVisualStudio)' == 'true'`` so the IDE keeps building
  and debugging the referenced project;
- an equivalent binary ``Reference`` with a relative ``HintPath`` is added
  to an ``ItemGroup`` guarded by ``'$(BuildingInsideVisualStudio)' != 'true'``
  for builds outside the IDE.

Every element created here lives in the MSBuild 2003 namespace. The
project file is loaded, mutated in place and written back to the same
path; nothing is written when the project reference is not found.

Public API
----------
- ``fix_reference``          — run the whole rewrite for one reference
- ``load_project``           — parse a project file
- ``save_project``           — write a project file back in place
- ``project_name``           — final path segment of a project path
- ``library_include_name``   — ``Include`` value for a binary reference
- ``relative_hint_path``     — configuration-independent ``HintPath``
- ``find_project_reference`` — suffix lookup of a ``ProjectReference``
- ``find_condition_group`` / ``ensure_condition_group``
"""

from __future__ import annotations

import ntpath
import posixpath
import re
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from smartrefs.output import OutputChannel

MSBUILD_NS = "http://schemas.microsoft.com/developer/msbuild/2003"

ITEM_GROUP = "ItemGroup"
CONDITION = "Condition"
PROJECT = "Project"
PROJECT_REFERENCE = "ProjectReference"
REFERENCE = "Reference"
INCLUDE = "Include"
HINT_PATH = "HintPath"
PRIVATE = "Private"

BUILD_INSIDE_VS = "'$(BuildingInsideVisualStudio)' == 'true'"
BUILD_OUTSIDE_VS = "'$(BuildingInsideVisualStudio)' != 'true'"

FALSE_LITERAL = "False"
CONFIGURATION_PLACEHOLDER = "$(Configuration)"
CONFIGURATION_SEGMENTS = ("Debug", "Release")

STATUS_FIXED = "fixed"
STATUS_NOT_FOUND = "not-found"

_DRIVE_RE = re.compile(r"^[A-Za-z]:")
_SEPARATOR_RE = re.compile(r"[\\/]")

# Serialize MSBuild elements without a prefix, as Visual Studio writes them.
ET.register_namespace("", MSBUILD_NS)


class ProjectFormatError(ValueError):
    """The document is well-formed XML but not an MSBuild 2003 project."""


class ProjectReferenceNotFound(LookupError):
    """No ProjectReference matched the source project (strict mode only)."""


@dataclass
class FixOptions:
    """Knobs for a single ``fix_reference`` pass.

    Attributes:
        configuration_segments: Directory names replaced by the placeholder.
        configuration_placeholder: Token substituted for those directories.
        private_value: Literal written to ``Private`` children.
        dedupe_outside: Skip adding a binary reference that already exists.
        strict: Raise ``ProjectReferenceNotFound`` instead of logging.
        dry_run: Compute the rewrite without saving the project file.
        indent: Indentation used when writing the file ("" keeps layout).
    """

    configuration_segments: tuple[str, ...] = CONFIGURATION_SEGMENTS
    configuration_placeholder: str = CONFIGURATION_PLACEHOLDER
    private_value: str = FALSE_LITERAL
    dedupe_outside: bool = False
    strict: bool = False
    dry_run: bool = False
    indent: str = "  "

    @classmethod
    def from_config(cls, config: dict[str, Any], **overrides: Any) -> FixOptions:
        """Build options from the ``[fix]`` table of a configuration dict."""
        fix = config.get("fix", {})
        values: dict[str, Any] = {
            "configuration_segments": _as_segments(
                fix.get("configuration_segments", CONFIGURATION_SEGMENTS)
            ),
            "configuration_placeholder": fix.get(
                "configuration_placeholder", CONFIGURATION_PLACEHOLDER
            ),
            "private_value": fix.get("private_value", FALSE_LITERAL),
            "dedupe_outside": _as_bool("dedupe_outside", fix.get("dedupe_outside", False)),
            "strict": _as_bool("strict", fix.get("strict", False)),
            "indent": fix.get("indent", "  "),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class FixResult:
    """Outcome of one ``fix_reference`` call."""

    project_path: str
    project_name: str
    status: str = STATUS_FIXED
    moved: bool = False
    added: bool = False
    include: str | None = None
    hint_path: str | None = None
    messages: list[str] = field(default_factory=list)

    @property
    def fixed(self) -> bool:
        return self.status == STATUS_FIXED


_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"fix.{key} must be a boolean, got {value!r}")


def _as_segments(value: Any) -> tuple[str, ...]:
    """Accept a list of directory names or a comma-separated string."""
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(part) for part in value)
    raise ValueError(
        f"fix.configuration_segments must be a list of names, got {value!r}"
    )


def _q(tag: str) -> str:
    return f"{{{MSBUILD_NS}}}{tag}"


# ---------------------------------------------------------------------------
# Document I/O
# ---------------------------------------------------------------------------


def load_project(path: str | Path) -> ET.ElementTree:
    """Parse a project file, keeping comments and processing instructions.

    Raises:
        FileNotFoundError: The file does not exist.
        xml.etree.ElementTree.ParseError: The file is not well-formed XML.
        ProjectFormatError: The root is not an MSBuild 2003 ``Project``.
    """
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    tree = ET.parse(str(path), parser=parser)
    root = tree.getroot()
    if root.tag != _q(PROJECT):
        raise ProjectFormatError(
            f"{Path(path).name} is not an MSBuild project file "
            f"(expected <Project xmlns=\"{MSBUILD_NS}\">, found <{root.tag}>)"
        )
    return tree


def save_project(tree: ET.ElementTree, path: str | Path, indent: str = "  ") -> None:
    """Write the document back to ``path``, overwriting it in place."""
    if indent:
        ET.indent(tree, space=indent)
    with open(path, "wb") as fh:
        tree.write(fh, encoding="utf-8", xml_declaration=True)
        fh.write(b"\n")


# ---------------------------------------------------------------------------
# Names and paths
# ---------------------------------------------------------------------------


def project_name(source_project_path: str) -> str:
    """Return the final segment of a project path (``\\`` or ``/`` separated)."""
    return PureWindowsPath(source_project_path).name


def library_include_name(library_path: str) -> str:
    """Return the library file name without its extension.

    The extension is cut at the last dot; a name without a dot is
    returned unchanged.
    """
    name = PureWindowsPath(library_path).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot else name


def _is_windows_path(path: str) -> bool:
    return "\\" in path or bool(_DRIVE_RE.match(path))


def relative_hint_path(
    project_path: str,
    library_path: str,
    segments: Sequence[str] = CONFIGURATION_SEGMENTS,
    placeholder: str = CONFIGURATION_PLACEHOLDER,
) -> str:
    """Compute the ``HintPath`` from a project file to a library.

    The path is relative to the directory holding the project file, with
    every configuration directory (``Debug``, ``Release``) replaced by
    ``placeholder`` and ``\\`` as separator. The file name itself is never
    substituted. A library on another drive keeps its absolute path.
    Characters such as spaces are written literally; the result is not
    percent-escaped the way a URI-based relative path would be.

    Example:
        >>> relative_hint_path("/repo/App/App.csproj", "/repo/Lib/bin/Debug/Lib.dll")
        '..\\\\Lib\\\\bin\\\\$(Configuration)\\\\Lib.dll'
    """
    windows = _is_windows_path(project_path) or _is_windows_path(library_path)
    pathmod = ntpath if windows else posixpath
    try:
        relative = pathmod.relpath(library_path, pathmod.dirname(project_path))
    except ValueError:
        # Different drives: there is no relative form
        relative = library_path

    parts = _SEPARATOR_RE.split(relative)
    directories = [placeholder if part in segments else part for part in parts[:-1]]
    return "\\".join(directories + parts[-1:])


# ---------------------------------------------------------------------------
# Element lookup
# ---------------------------------------------------------------------------


def find_project_reference(root: ET.Element, name: str) -> ET.Element | None:
    """Find the first ``ProjectReference`` whose ``Include`` ends with ``name``.

    Matching is a plain suffix test, so differing relative prefixes for the
    same project file name all match; document order breaks ties.
    """
    for element in root.iter(_q(PROJECT_REFERENCE)):
        include = element.get(INCLUDE)
        if include is None:
            continue
        if include.endswith(name):
            return element
    return None


def _condition_matches(element: ET.Element, condition: str) -> bool:
    return element.tag == _q(ITEM_GROUP) and element.get(CONDITION, "").strip() == condition


def find_condition_group(root: ET.Element, condition: str) -> ET.Element | None:
    """Return the top-level ``ItemGroup`` carrying ``condition``, if any."""
    for group in root.findall(_q(ITEM_GROUP)):
        if _condition_matches(group, condition):
            return group
    return None


def ensure_condition_group(root: ET.Element, condition: str) -> ET.Element:
    """Return the group for ``condition``, appending a new one to the root if missing."""
    group = find_condition_group(root, condition)
    if group is None:
        group = ET.SubElement(root, _q(ITEM_GROUP), {CONDITION: condition})
    return group


def _parent_of(root: ET.Element, target: ET.Element) -> ET.Element | None:
    for parent in root.iter():
        for child in parent:
            if child is target:
                return parent
    return None


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def _set_child_text(element: ET.Element, tag: str, text: str) -> None:
    child = element.find(_q(tag))
    if child is None:
        child = ET.SubElement(element, _q(tag))
    child.text = text


def _move_inside(root: ET.Element, reference: ET.Element) -> bool:
    """Put ``reference`` under the inside-IDE group; return True if it moved."""
    parent = _parent_of(root, reference)
    if parent is not None and _condition_matches(parent, BUILD_INSIDE_VS):
        return False

    group = ensure_condition_group(root, BUILD_INSIDE_VS)
    if parent is not None:
        parent.remove(reference)
    group.append(reference)
    return True


def _has_binary_reference(group: ET.Element, include: str, hint_path: str) -> bool:
    for element in group.findall(_q(REFERENCE)):
        if element.get(INCLUDE) != include:
            continue
        if element.findtext(_q(HINT_PATH)) == hint_path:
            return True
    return False


def _binary_reference(include: str, hint_path: str, private_value: str) -> ET.Element:
    element = ET.Element(_q(REFERENCE), {INCLUDE: include})
    ET.SubElement(element, _q(HINT_PATH)).text = hint_path
    ET.SubElement(element, _q(PRIVATE)).text = private_value
    return element


def fix_reference(
    containing_project_path: str | Path,
    library_path: str,
    source_project_path: str,
    options: FixOptions | None = None,
    output: OutputChannel | None = None,
) -> FixResult:
    """Rewrite one project reference into inside/outside IDE references.

    Args:
        containing_project_path: Project file to modify (rewritten in place).
        library_path: Built library of the referenced project.
        source_project_path: Project file of the referenced project.
        options: Fix options; defaults to ``FixOptions()``.
        output: Channel receiving diagnostics.

    Returns:
        FixResult describing what happened. A missing project reference
        gives ``status == "not-found"`` and leaves the file untouched.

    Raises:
        ProjectReferenceNotFound: Only when ``options.strict`` is set.
    """
    if options is None:
        options = FixOptions()

    tree = load_project(containing_project_path)
    root = tree.getroot()

    name = project_name(source_project_path)
    result = FixResult(project_path=str(containing_project_path), project_name=name)

    reference = find_project_reference(root, name)
    if reference is None:
        message = f"Project reference for {name} not found in {Path(containing_project_path).name}"
        if options.strict:
            raise ProjectReferenceNotFound(message)
        result.status = STATUS_NOT_FOUND
        result.messages.append(message)
        if output is not None:
            output.write_line(message)
            output.activate()
        return result

    # Inside the IDE: project reference, never copied locally
    _set_child_text(reference, PRIVATE, options.private_value)
    result.moved = _move_inside(root, reference)

    # Outside the IDE: binary reference to the built library
    result.include = library_include_name(library_path)
    result.hint_path = relative_hint_path(
        str(containing_project_path),
        str(library_path),
        options.configuration_segments,
        options.configuration_placeholder,
    )
    outside = ensure_condition_group(root, BUILD_OUTSIDE_VS)
    if options.dedupe_outside and _has_binary_reference(
        outside, result.include, result.hint_path
    ):
        project = Path(containing_project_path).name
        message = f"Reference {result.include} already present in {project}"
        result.messages.append(message)
        if output is not None:
            output.info(message)
    else:
        outside.append(
            _binary_reference(result.include, result.hint_path, options.private_value)
        )
        result.added = True

    if not options.dry_run:
        save_project(tree, containing_project_path, options.indent)
    return result
