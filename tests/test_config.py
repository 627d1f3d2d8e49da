"""Tests for config.py -- IntelFeedConfig, TOML loading, env overrides."""

from unittest.mock import patch

import pytest

from intelfeed.config import IntelFeedConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(tmp_path, monkeypatch):
    """Isolate tests from the caller's env vars and home config."""
    for key in (
        "INTELFEED_SUMMARY_MAX_LENGTH",
        "INTELFEED_ELLIPSIS",
        "INTELFEED_SEISMIC_HIGH",
        "INTELFEED_SEISMIC_CRITICAL",
        "INTELFEED_SOCIAL_VIRAL_SCORE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


class TestIntelFeedConfigDefaults:
    """Test that IntelFeedConfig has sensible defaults."""

    def test_default_normalizer(self):
        cfg = IntelFeedConfig()
        assert cfg.normalizer.summary_max_length == 500
        assert cfg.normalizer.ellipsis == "..."

    def test_default_classifier(self):
        cfg = IntelFeedConfig()
        assert cfg.classifier.seismic_high == 6.0
        assert cfg.classifier.seismic_critical == 7.0
        assert cfg.classifier.social_viral_score == 1000
        assert "cve" in cfg.classifier.enabled_rules


class TestLoadConfig:
    """Test load_config with TOML files."""

    def test_load_from_explicit_path(self, tmp_path):
        toml_path = tmp_path / ".intelfeed.toml"
        toml_path.write_text(
            "[normalizer]\nsummary_max_length = 280\n\n"
            '[classifier]\nenabled_rules = ["cve", "breaking"]\nseismic_high = 5.5\n'
        )
        cfg = load_config(toml_path)
        assert cfg.normalizer.summary_max_length == 280
        assert cfg.classifier.enabled_rules == ["cve", "breaking"]
        assert cfg.classifier.seismic_high == 5.5

    def test_load_missing_path_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nonexistent.toml")
        assert cfg.normalizer.summary_max_length == 500

    def test_load_searches_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".intelfeed.toml").write_text("[normalizer]\nellipsis = \" [more]\"\n")
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg.normalizer.ellipsis == " [more]"

    def test_patched_search_paths(self, tmp_path):
        config_dir = tmp_path / "conf"
        config_dir.mkdir()
        (config_dir / ".intelfeed.toml").write_text("[classifier]\nsocial_viral_score = 50\n")
        with patch("intelfeed.config.CONFIG_SEARCH_PATHS", [config_dir]):
            cfg = load_config()
        assert cfg.classifier.social_viral_score == 50

    def test_global_config(self, tmp_path, monkeypatch):
        global_dir = tmp_path / "home" / ".config" / "intelfeed"
        global_dir.mkdir(parents=True)
        (global_dir / "config.toml").write_text("[normalizer]\nsummary_max_length = 99\n")
        monkeypatch.chdir(tmp_path)
        assert load_config().normalizer.summary_max_length == 99

    def test_invalid_toml_returns_defaults(self, tmp_path):
        toml_path = tmp_path / "broken.toml"
        toml_path.write_text("[normalizer\nsummary_max_length = ")
        cfg = load_config(toml_path)
        assert cfg.normalizer.summary_max_length == 500

    def test_invalid_values_return_defaults(self, tmp_path):
        toml_path = tmp_path / "bad.toml"
        toml_path.write_text("[normalizer]\nsummary_max_length = 2\n")
        cfg = load_config(toml_path)
        assert cfg.normalizer.summary_max_length == 500


class TestEnvOverrides:
    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        toml_path = tmp_path / ".intelfeed.toml"
        toml_path.write_text("[normalizer]\nsummary_max_length = 280\n")
        monkeypatch.setenv("INTELFEED_SUMMARY_MAX_LENGTH", "120")
        monkeypatch.setenv("INTELFEED_SEISMIC_CRITICAL", "7.5")
        cfg = load_config(toml_path)
        assert cfg.normalizer.summary_max_length == 120
        assert cfg.classifier.seismic_critical == 7.5

    def test_invalid_env_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INTELFEED_SOCIAL_VIRAL_SCORE", "lots")
        cfg = load_config(tmp_path / "missing.toml")
        assert cfg.classifier.social_viral_score == 1000

    def test_no_config_anywhere(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg == IntelFeedConfig()
