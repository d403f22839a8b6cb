"""Tests for pi.readline.settings -- settings dataclass and JSON loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pi.readline.settings import ReadLineSettings, load_settings


class TestReadLineSettingsDefaults:
    def test_defaults(self) -> None:
        settings = ReadLineSettings()
        assert settings.history_enabled is False
        assert settings.history_max_size is None
        assert settings.auto_completion_enabled is True
        assert settings.kill_buffer_enabled is True
        assert settings.undo_enabled is True
        assert settings.ctrl_c_enabled is False
        assert settings.interruptible is False


class TestReadLineSettingsFromDict:
    """camelCase mappings are validated."""

    def test_camel_case_keys(self) -> None:
        settings = ReadLineSettings.from_dict(
            {"historyEnabled": True, "historyMaxSize": 10, "ctrlCEnabled": True}
        )
        assert settings.history_enabled is True
        assert settings.history_max_size == 10
        assert settings.ctrl_c_enabled is True

    def test_to_dict_uses_camel_case(self) -> None:
        data = ReadLineSettings().to_dict()
        assert data["killBufferEnabled"] is True
        assert data["pollInterval"] == 0.05

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown setting"):
            ReadLineSettings.from_dict({"colour": True})

    def test_bad_boolean_raises(self) -> None:
        with pytest.raises(ValueError):
            ReadLineSettings.from_dict({"undoEnabled": "yes"})

    def test_negative_max_size_raises(self) -> None:
        with pytest.raises(ValueError):
            ReadLineSettings.from_dict({"historyMaxSize": -1})

    def test_none_values_keep_defaults(self) -> None:
        settings = ReadLineSettings.from_dict({"historyMaxSize": None})
        assert settings.history_max_size is None

    def test_poll_interval_coerced_to_float(self) -> None:
        settings = ReadLineSettings.from_dict({"pollInterval": 1})
        assert settings.poll_interval == 1.0
        assert isinstance(settings.poll_interval, float)

    def test_merged(self) -> None:
        base = ReadLineSettings(undo_enabled=False)
        merged = base.merged({"historyEnabled": True, "interruptible": None})
        assert merged.history_enabled is True
        assert merged.undo_enabled is False
        assert base.history_enabled is False


class TestLoadSettings:
    """Settings files on disk."""

    def test_missing_file_yields_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "missing.json") == ReadLineSettings()

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "readline.json"
        path.write_text(json.dumps({"historyEnabled": True, "historyMaxSize": 3}))
        settings = load_settings(path)
        assert settings.history_enabled is True
        assert settings.history_max_size == 3

    def test_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "readline.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_settings(path)
