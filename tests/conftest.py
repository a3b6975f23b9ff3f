"""Shared test fixtures for rebracer tests."""

from __future__ import annotations

import pathlib

import pytest

import rebracer.config

SAMPLE_SETTINGS = """\
<?xml version="1.0" encoding="utf-8"?>
<UserSettings>
  <ToolsOptions>
    <ToolsOptionsCategory name="Environment">
      <ToolsOptionsSubCategory name="TaskList">
        <PropertyValue name="ConfirmTaskDeletion">true</PropertyValue>
      </ToolsOptionsSubCategory>
      <ToolsOptionsSubCategory name="ProjectsAndSolution">
        <PropertyValue name="ProjectTemplatesLocation">\\\\evil\\share</PropertyValue>
      </ToolsOptionsSubCategory>
    </ToolsOptionsCategory>
    <ToolsOptionsCategory name="TextEditor">
      <ToolsOptionsSubCategory name="C/C++ Specific">
        <PropertyValue name="IntellisenseOptions">0</PropertyValue>
        <PropertyValue name="TabSize">4</PropertyValue>
      </ToolsOptionsSubCategory>
    </ToolsOptionsCategory>
  </ToolsOptions>
</UserSettings>
"""


@pytest.fixture(autouse=True)
def _isolate_global_config(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Point the global config file at a temp directory."""
    global_toml = tmp_path / "global" / "config.toml"
    monkeypatch.setattr(rebracer.config, "_global_path", lambda: global_toml)
    return global_toml


@pytest.fixture
def settings_file(tmp_path: pathlib.Path):
    """Factory for writing a .vssettings file."""

    def _create(content: str = SAMPLE_SETTINGS, name: str = "Team.vssettings") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _create
