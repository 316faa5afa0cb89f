"""Tests for loading the JSON configuration file."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from gh_triage.config import (
    CONFIG_FILENAME,
    ConfigError,
    _dict_to_config,
    get_config_path,
    load_config,
)
from gh_triage.models import DEFAULT_CODE_THEME, DEFAULT_PRIORITIES, Priority, UserConfig


def write_config(tmp_path: Path, data) -> Path:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestGetConfigPath:
    def test_uses_platform_config_dir(self, tmp_path) -> None:
        with patch("gh_triage.config.user_config_dir", return_value=str(tmp_path)) as mock_dir:
            assert get_config_path() == tmp_path / "config.json"
        mock_dir.assert_called_once_with("gh-triage")


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        assert load_config(tmp_path / "absent.json") == UserConfig()

    def test_priorities_and_theme(self, tmp_path) -> None:
        path = write_config(
            tmp_path,
            {
                "priorities": [
                    {"name": "P0", "label": "pri/0", "color": "#FF0000"},
                    {"name": "P1", "label": "pri/1", "color": "00ff00"},
                ],
                "theme": {"code": "dracula"},
            },
        )
        config = load_config(path)
        assert config.priorities == (
            Priority("P0", "pri/0", "#FF0000"),
            Priority("P1", "pri/1", "00ff00"),
        )
        assert config.code_theme == "dracula"

    def test_invalid_json_is_fatal(self, tmp_path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(path)

    def test_non_object_is_fatal(self, tmp_path) -> None:
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(write_config(tmp_path, ["priorities"]))

    def test_undecodable_file_is_fatal(self, tmp_path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(ConfigError):
            load_config(path)


class TestDictToConfig:
    def test_empty_object_gives_defaults(self) -> None:
        config = _dict_to_config({})
        assert config.priorities == DEFAULT_PRIORITIES
        assert config.code_theme == DEFAULT_CODE_THEME

    def test_bad_entries_are_dropped(self, caplog) -> None:
        config = _dict_to_config(
            {
                "priorities": [
                    "Low",
                    {"name": "", "label": "x", "color": "#000000"},
                    {"name": "Bad", "label": "bad", "color": "red"},
                    {"name": "Ok", "label": "ok", "color": "#123abc"},
                    {"name": "Ok", "label": "again", "color": "#123abc"},
                ]
            }
        )
        assert config.priorities == (Priority("Ok", "ok", "#123abc"),)
        assert "invalid color" in caplog.text
        assert "duplicate" in caplog.text

    def test_all_entries_invalid_falls_back(self) -> None:
        config = _dict_to_config({"priorities": [{"name": "x"}]})
        assert config.priorities == DEFAULT_PRIORITIES

    def test_wrong_section_types(self) -> None:
        config = _dict_to_config({"priorities": {"Low": "#fff"}, "theme": "dracula"})
        assert config == UserConfig()

    def test_blank_code_theme(self) -> None:
        assert _dict_to_config({"theme": {"code": "  "}}).code_theme == DEFAULT_CODE_THEME
