"""
smartrefs - Smart project references for MSBuild project files

Rewrites a project file so a library dependency is consumed as a
project-to-project reference when building inside Visual Studio, and as
a binary file reference with a relative hint path everywhere else
(build servers without the dependency's source).
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("smartrefs")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__author__ = "smartrefs contributors"
__license__ = "MIT"

from smartrefs.msbuild import (
    FixOptions,
    FixResult,
    ProjectFormatError,
    ProjectReferenceNotFound,
    fix_reference,
)
from smartrefs.selection import ReferenceSelection, SelectedReference

__all__ = [
    "__version__",
    "FixOptions",
    "FixResult",
    "ProjectFormatError",
    "ProjectReferenceNotFound",
    "ReferenceSelection",
    "SelectedReference",
    "fix_reference",
]
