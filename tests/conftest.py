"""Shared pytest fixtures: a small solution with an App project referencing Lib."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

import pytest

NS = {"ns": "http://schemas.microsoft.com/developer/msbuild/2003"}

APP_PROJECT = """\
<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="14.0" DefaultTargets="Build" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <!-- application project -->
  <PropertyGroup>
    <OutputType>Exe</OutputType>
    <AssemblyName>App</AssemblyName>
  </PropertyGroup>
  <ItemGroup>
    <Reference Include="System" />
  </ItemGroup>
  <ItemGroup>
    <ProjectReference Include="..\\Lib\\Lib.csproj">
      <Project>{11111111-2222-3333-4444-555555555555}</Project>
      <Name>Lib</Name>
    </ProjectReference>
  </ItemGroup>
</Project>
"""


@dataclass
class Solution:
    """Paths of the sample solution on disk."""

    root: Path
    app_project: Path
    lib_project: Path
    library: Path


@pytest.fixture(autouse=True)
def _fresh_channels():
    """Each test starts without registered output channels."""
    from smartrefs.output import reset_channels

    reset_channels()
    yield
    reset_channels()


@pytest.fixture
def solution(tmp_path: Path) -> Solution:
    """Create repo/App/App.csproj referencing repo/Lib/Lib.csproj."""
    root = tmp_path / "repo"
    app_dir = root / "App"
    lib_dir = root / "Lib"
    app_dir.mkdir(parents=True)
    (lib_dir / "bin" / "Debug").mkdir(parents=True)

    app_project = app_dir / "App.csproj"
    app_project.write_text(APP_PROJECT, encoding="utf-8")
    lib_project = lib_dir / "Lib.csproj"
    lib_project.write_text(
        '<Project xmlns="http://schemas.microsoft.com/developer/msbuild/2003" />\n',
        encoding="utf-8",
    )
    library = lib_dir / "bin" / "Debug" / "Lib.dll"
    library.write_bytes(b"MZ")
    return Solution(root=root, app_project=app_project, lib_project=lib_project, library=library)


@pytest.fixture
def condition_groups():
    """Return a helper listing top-level ItemGroups carrying a Condition."""

    def _groups(path: Path, condition: str) -> list[ET.Element]:
        root = ET.parse(path).getroot()
        return [
            group
            for group in root.findall("ns:ItemGroup", NS)
            if group.get("Condition", "").strip() == condition
        ]

    return _groups
