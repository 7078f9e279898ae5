"""
Tests for genfilter.core.config — GenfilterConfig defaults, environment
loading and validation.
"""

import pytest
from genfilter import health
from genfilter.core.config import DEFAULT_CONFIG, GenfilterConfig
from genfilter.exceptions import ConfigError


class TestDefaults:

    def test_stock_heuristics(self):
        assert DEFAULT_CONFIG.generated_file_patterns == (r"\.designer\.cs$",)
        assert DEFAULT_CONFIG.header_markers == ("<auto-generated", "<autogenerated")

    def test_target_extensions(self):
        assert ".cs" in DEFAULT_CONFIG.target_extensions

    def test_exclude_dirs_has_build_output(self):
        for d in (".git", "bin", "obj"):
            assert d in DEFAULT_CONFIG.exclude_dirs

    def test_defaults_validate(self):
        assert GenfilterConfig().validate() is True

    def test_max_file_bytes(self):
        assert GenfilterConfig(max_file_size_mb=2).get_max_file_bytes() == 2 * 1024 * 1024


class TestFromEnv:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GENFILTER_MAX_WORKERS", "3")
        monkeypatch.setenv("GENFILTER_MAX_FILE_SIZE_MB", "1")
        monkeypatch.setenv("GENFILTER_LOG_LEVEL", "debug")
        config = GenfilterConfig.from_env()
        assert config.max_workers == 3
        assert config.max_file_size_mb == 1
        assert config.log_level == "DEBUG"

    def test_defaults_without_environment(self, monkeypatch):
        for name in ("GENFILTER_MAX_WORKERS", "GENFILTER_MAX_FILE_SIZE_MB", "GENFILTER_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        assert GenfilterConfig.from_env() == GenfilterConfig()

    def test_non_numeric_value(self, monkeypatch):
        monkeypatch.setenv("GENFILTER_MAX_WORKERS", "many")
        with pytest.raises(ConfigError):
            GenfilterConfig.from_env()


class TestValidate:

    @pytest.mark.parametrize("overrides", [
        {"max_workers": 0},
        {"max_file_size_mb": -1},
        {"header_markers": ()},
        {"header_markers": ("",)},
        {"generated_file_patterns": ("(unclosed",)},
        {"log_level": "CHATTY"},
    ])
    def test_invalid_settings(self, overrides):
        with pytest.raises(ConfigError):
            GenfilterConfig(**overrides).validate()

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            GenfilterConfig(max_workers=0).validate()


class TestHealth:

    def test_health_snapshot(self):
        status = health(GenfilterConfig(max_workers=2))
        assert status["max_workers"] == 2
        assert status["header_markers"] == ["<auto-generated", "<autogenerated"]
        assert "version" in status
