"""Tests for the ``policy`` config section and load_policy()."""

from __future__ import annotations

import logging
import pathlib

import pytest

import rebracer.config
import rebracer.policy.config
import rebracer.policy.known
from rebracer.sections import SectionKey


def _write_local(root: pathlib.Path, text: str) -> None:
    path = root / ".rebracer" / "config.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestPolicyConfig:
    def test_registered(self) -> None:
        assert rebracer.config.section_class("policy") is rebracer.policy.config.PolicyConfig

    def test_defaults(self, tmp_path: pathlib.Path) -> None:
        cfg = rebracer.config.load("policy", root=tmp_path)
        assert cfg.extra_blocked == []
        assert cfg.log_level == "WARNING"


class TestSplitNames:
    def test_comma_separated_string(self) -> None:
        assert rebracer.policy.config.split_names(" A, ,B ,") == ["A", "B"]
        assert rebracer.policy.config.split_names("") == []

    def test_list_entries_stripped(self) -> None:
        assert rebracer.policy.config.split_names([" TaskList ", "", "Fonts"]) == [
            "TaskList",
            "Fonts",
        ]

    def test_none(self) -> None:
        assert rebracer.policy.config.split_names(None) == []

    @pytest.mark.parametrize("raw", [5, True, {"a": 1}])
    def test_rejects_other_types(self, raw) -> None:
        with pytest.raises(ValueError, match="extra_blocked must be"):
            rebracer.policy.config.split_names(raw)

    def test_rejects_non_string_entries(self) -> None:
        with pytest.raises(ValueError, match="entries must be strings"):
            rebracer.policy.config.split_names(["TaskList", 3])


class TestParseValue:
    def test_extra_blocked(self) -> None:
        assert rebracer.policy.config.parse_value("extra_blocked", "A,B") == ["A", "B"]

    def test_log_level(self) -> None:
        assert rebracer.policy.config.parse_value("log_level", " info ") == "INFO"
        assert rebracer.policy.config.log_level("info") == logging.INFO

    def test_bad_log_level(self) -> None:
        with pytest.raises(ValueError, match="log_level must be one of"):
            rebracer.policy.config.parse_value("log_level", "chatty")

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError):
            rebracer.policy.config.parse_value("bogus", "x")


class TestLoadPolicy:
    def test_without_overrides_is_default(self, tmp_path: pathlib.Path) -> None:
        policy = rebracer.policy.known.load_policy(tmp_path)
        assert policy is rebracer.policy.known.DEFAULT_POLICY

    def test_extra_blocked_string(self, tmp_path: pathlib.Path) -> None:
        _write_local(tmp_path, '[policy]\nextra_blocked = "TaskList, Fonts and Colors"\n')

        policy = rebracer.policy.known.load_policy(tmp_path)

        assert not policy.is_allowed(SectionKey("Environment", "TaskList"))
        assert not policy.is_allowed(SectionKey("Environment", "fonts and colors"))
        # built-ins are still blocked
        assert not policy.is_allowed(SectionKey("Environment", "WebBrowser"))
        # the shared default is untouched
        assert rebracer.policy.known.is_allowed(SectionKey("Environment", "TaskList"))

    def test_extra_blocked_toml_list(self, tmp_path: pathlib.Path) -> None:
        _write_local(tmp_path, '[policy]\nextra_blocked = ["TaskList"]\n')

        policy = rebracer.policy.known.load_policy(tmp_path)

        assert not policy.is_allowed(SectionKey("Environment", "TaskList"))
        assert policy.is_allowed(SectionKey("Environment", "General"))

    def test_extra_blocked_wrong_type(self, tmp_path: pathlib.Path) -> None:
        _write_local(tmp_path, "[policy]\nextra_blocked = 42\n")
        with pytest.raises(ValueError, match="extra_blocked must be"):
            rebracer.policy.known.load_policy(tmp_path)

    def test_extra_blocked_from_global_config(
        self, tmp_path: pathlib.Path, _isolate_global_config: pathlib.Path
    ) -> None:
        _isolate_global_config.parent.mkdir(parents=True)
        _isolate_global_config.write_text('[policy]\nextra_blocked = ["Debugging"]\n')

        policy = rebracer.policy.known.load_policy(tmp_path)

        assert not policy.is_allowed(SectionKey("Debugger", "Debugging"))
