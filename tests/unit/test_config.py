"""
Unit tests for configuration loading.
"""

import pytest

import canvas_mcp_server.config as config


class TestNormalizeDomain:
    @pytest.mark.parametrize(
        "raw",
        [
            "school.instructure.com",
            "https://school.instructure.com",
            "https://school.instructure.com/",
            "https://school.instructure.com/api/v1",
            "http://school.instructure.com/api/v1/",
            "  school.instructure.com  ",
        ],
    )
    def test_strips_scheme_and_api_path(self, raw):
        assert config.normalize_domain(raw) == "school.instructure.com"

    def test_empty(self):
        assert config.normalize_domain(None) is None


class TestIntEnv:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("CANVAS_MAX_RETRIES", raising=False)
        assert config._int_env("CANVAS_MAX_RETRIES", 3) == 3

    def test_reads_value(self, monkeypatch):
        monkeypatch.setenv("CANVAS_MAX_RETRIES", "5")
        assert config._int_env("CANVAS_MAX_RETRIES", 3) == 5

    @pytest.mark.parametrize("raw", ["abc", "-1", "1.5"])
    def test_invalid_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("CANVAS_RETRY_DELAY", raw)
        assert config._int_env("CANVAS_RETRY_DELAY", 1000) == 1000

    def test_minimum(self, monkeypatch):
        monkeypatch.setenv("CANVAS_TIMEOUT", "0")
        assert config._int_env("CANVAS_TIMEOUT", 30000, minimum=1) == 30000


class TestValidateConfig:
    def test_complete(self, monkeypatch):
        monkeypatch.setattr(config, "API_TOKEN", "token")
        monkeypatch.setattr(config, "DOMAIN", "school.instructure.com")
        assert config.validate_config() == []

    def test_missing(self, monkeypatch):
        monkeypatch.setattr(config, "API_TOKEN", None)
        monkeypatch.setattr(config, "DOMAIN", "")
        assert config.validate_config() == ["CANVAS_API_TOKEN", "CANVAS_DOMAIN"]
