"""Tests for gitsense.core.config: project-wide configuration management."""

import json

import pytest

from gitsense.core.config import (
    CONFIG_SCHEMA,
    config_path,
    default_config,
    load_config,
    save_config,
    set_config_value,
    unset_config_value,
)


# ===========================================================================
# default_config
# ===========================================================================

class TestDefaultConfig:
    def test_returns_all_keys(self):
        cfg = default_config()
        for key in CONFIG_SCHEMA:
            assert key in cfg

    def test_default_values(self):
        cfg = default_config()
        assert cfg["default_database"] == ""
        assert cfg["grep_context"] == 0
        assert cfg["grep_limit"] == 50
        assert cfg["tree_indent"] == 4
        assert cfg["tree_truncate"] == 60
        assert cfg["tree_fields"] == []

    def test_defaults_are_copies(self):
        cfg = default_config()
        cfg["tree_fields"].append("purpose")
        assert default_config()["tree_fields"] == []


# ===========================================================================
# load_config / save_config round-trip
# ===========================================================================

class TestLoadSaveConfig:
    def test_no_file_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "config.json")
        assert cfg == default_config()

    def test_no_file_is_not_created(self, tmp_path):
        load_config(tmp_path / "config.json")
        assert not (tmp_path / "config.json").exists()

    def test_round_trip(self, tmp_path):
        p = tmp_path / ".gitsense" / "config.json"
        cfg = default_config()
        cfg["default_database"] = "arch"
        cfg["tree_fields"] = ["purpose"]
        save_config(cfg, p)
        assert load_config(p) == cfg

    def test_missing_keys_filled(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"grep_limit": 5}))
        cfg = load_config(p)
        assert cfg["grep_limit"] == 5
        assert cfg["tree_indent"] == 4

    def test_wrong_type_falls_back_to_default(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"grep_limit": "many", "tree_fields": "purpose"}))
        cfg = load_config(p)
        assert cfg["grep_limit"] == 50
        assert cfg["tree_fields"] == []

    def test_corrupt_file_returns_defaults(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text("{not json")
        assert load_config(p) == default_config()

    def test_config_path_uses_data_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GITSENSE_DIR", raising=False)
        assert config_path(tmp_path) == tmp_path / ".gitsense" / "config.json"


# ===========================================================================
# set_config_value / unset_config_value
# ===========================================================================

class TestSetConfigValue:
    def test_set_string(self):
        cfg = default_config()
        set_config_value(cfg, "default_database", "security")
        assert cfg["default_database"] == "security"

    def test_set_int(self):
        cfg = default_config()
        set_config_value(cfg, "grep_limit", "0")
        assert cfg["grep_limit"] == 0

    def test_set_int_invalid(self):
        cfg = default_config()
        with pytest.raises(ValueError, match="Expected integer"):
            set_config_value(cfg, "tree_indent", "wide")

    def test_set_int_negative(self):
        cfg = default_config()
        with pytest.raises(ValueError, match="non-negative"):
            set_config_value(cfg, "grep_context", "-1")

    def test_set_list_appends_without_duplicates(self):
        cfg = default_config()
        set_config_value(cfg, "tree_fields", "purpose, risk_level")
        set_config_value(cfg, "tree_fields", "purpose,layer")
        assert cfg["tree_fields"] == ["purpose", "risk_level", "layer"]

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            set_config_value(default_config(), "nonexistent", "x")


class TestUnsetConfigValue:
    def test_reset_to_default(self):
        cfg = default_config()
        cfg["tree_fields"] = ["purpose"]
        unset_config_value(cfg, "tree_fields")
        assert cfg["tree_fields"] == []

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            unset_config_value(default_config(), "nonexistent")
