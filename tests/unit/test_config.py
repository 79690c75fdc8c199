"""
Module 08 - Configuration Tests
Tests for picopak/config/runtime.py and picopak_cli/config.py

Tests:
- index URL precedence
- environment overrides
- config file loading and merge order
"""
import json

import pytest

from picopak.config.runtime import DEFAULT_INDEX_URL, RuntimeConfig, get_index_urls
from picopak_cli.config import (
    CLIConfig,
    build_runtime_config,
    get_default_config_template,
    load_config,
    load_config_from_file,
)


class TestIndexUrls:
    """Tests for get_index_urls()."""

    def test_default(self):
        assert get_index_urls() == [DEFAULT_INDEX_URL]

    def test_single_env(self, monkeypatch):
        monkeypatch.setenv("PICO_PAK_INDEX_URL", " https://one/index.json ")
        assert get_index_urls() == ["https://one/index.json"]

    def test_list_env_beats_single(self, monkeypatch):
        monkeypatch.setenv("PICO_PAK_INDEX_URL", "https://one/index.json")
        monkeypatch.setenv("PICO_PAK_INDEX_URLS", "https://a/index.json, ,https://b/index.json")
        assert get_index_urls() == ["https://a/index.json", "https://b/index.json"]

    def test_explicit_beats_env(self, monkeypatch):
        monkeypatch.setenv("PICO_PAK_INDEX_URLS", "https://a/index.json")
        assert get_index_urls("https://cli/index.json") == ["https://cli/index.json"]


class TestRuntimeConfig:
    """Tests for RuntimeConfig.from_env()."""

    def test_defaults(self):
        config = RuntimeConfig.from_env()

        assert config.index_urls == [DEFAULT_INDEX_URL]
        assert config.platform is None
        assert config.http.timeout == 30.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PICO_PLATFORM", "RP2350")
        monkeypatch.setenv("PICOPAK_HTTP_TIMEOUT", "5")

        config = RuntimeConfig.from_env()

        assert config.platform == "rp2350"
        assert config.http.timeout == 5.0

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("PICOPAK_HTTP_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            RuntimeConfig.from_env()

    def test_cli_overrides(self, monkeypatch):
        monkeypatch.setenv("PICO_PLATFORM", "rp2040")
        config = RuntimeConfig.from_env(index_url="https://cli/index.json", platform="rp2350")

        assert config.index_urls == ["https://cli/index.json"]
        assert config.platform == "rp2350"

    def test_to_dict_fields(self):
        assert set(RuntimeConfig().to_dict()) == {"index_urls", "platform", "http", "extra"}

    def test_unsupported_platform_override(self):
        with pytest.raises(ValueError):
            RuntimeConfig().with_overrides(platform="esp32")


class TestCLIConfig:
    """Tests for the CLI config file layer."""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({
            "index_urls": ["https://file/index.json"],
            "platform": "rp2350",
            "http_timeout": 12,
            "log_level": "DEBUG",
        }), encoding="utf-8")

        config = load_config_from_file(path)

        assert config.index_urls == ["https://file/index.json"]
        assert config.http_timeout == 12.0
        assert config.log_level == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_from_file(tmp_path / "none.json")

    def test_default_path_discovered(self, tmp_path):
        (tmp_path / ".picopak.json").write_text(json.dumps({"log_level": "INFO"}), encoding="utf-8")
        assert load_config().log_level == "INFO"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "picopak.config.json").write_text(json.dumps({"log_level": "INFO"}), encoding="utf-8")
        monkeypatch.setenv("PICOPAK_LOG_LEVEL", "ERROR")
        assert load_config().log_level == "ERROR"

    def test_template_is_valid_config(self, tmp_path):
        path = tmp_path / "template.json"
        path.write_text(get_default_config_template(), encoding="utf-8")

        config = load_config_from_file(path)
        assert config.index_urls == [DEFAULT_INDEX_URL]


class TestBuildRuntimeConfig:
    """Precedence: flag, then environment, then config file."""

    def test_file_values_used(self):
        cli = CLIConfig(index_urls=["https://file/index.json"], platform="rp2350", http_timeout=3)
        runtime = build_runtime_config(cli)

        assert runtime.index_urls == ["https://file/index.json"]
        assert runtime.platform == "rp2350"
        assert runtime.http.timeout == 3

    def test_env_beats_file(self, monkeypatch):
        monkeypatch.setenv("PICO_PAK_INDEX_URL", "https://env/index.json")
        monkeypatch.setenv("PICO_PLATFORM", "rp2040")

        runtime = build_runtime_config(CLIConfig(index_urls=["https://file/index.json"], platform="rp2350"))

        assert runtime.index_urls == ["https://env/index.json"]
        assert runtime.platform == "rp2040"

    def test_flag_beats_env(self, monkeypatch):
        monkeypatch.setenv("PICO_PAK_INDEX_URL", "https://env/index.json")
        runtime = build_runtime_config(CLIConfig(), index_url="https://flag/index.json")
        assert runtime.index_urls == ["https://flag/index.json"]
