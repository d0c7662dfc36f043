"""Tests for configuration module"""
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from actuator_exporter.config import Config, parse_duration, split_listen_address


class TestConfig:
    """Test configuration validation and parsing"""

    def test_default_config(self):
        """Test default configuration values"""
        config = Config()

        assert config.listen_address == ":9101"
        assert config.listen_host == "0.0.0.0"
        assert config.listen_port == 9101
        assert config.telemetry_path == "/metrics"
        assert config.scrape_uri == "http://localhost/metrics"
        assert config.scrape_timeout == 5.0
        assert config.fail_on_malformed_json is True
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_environment_override(self):
        """Test configuration override from environment variables"""
        env_vars = {
            "LISTEN_ADDRESS": "127.0.0.1:9200",
            "TELEMETRY_PATH": "/prometheus",
            "SCRAPE_URI": "http://app:8080/actuator/metrics",
            "SCRAPE_TIMEOUT": "750ms",
            "FAIL_ON_MALFORMED_JSON": "false",
            "LOG_LEVEL": "debug",
        }

        with patch.dict(os.environ, env_vars):
            config = Config()

            assert config.listen_host == "127.0.0.1"
            assert config.listen_port == 9200
            assert config.telemetry_path == "/prometheus"
            assert config.scrape_uri == "http://app:8080/actuator/metrics"
            assert config.scrape_timeout == pytest.approx(0.75)
            assert config.fail_on_malformed_json is False
            assert config.log_level == "DEBUG"

    def test_keyword_overrides_environment(self):
        """Explicit values take precedence over the environment"""
        with patch.dict(os.environ, {"SCRAPE_URI": "http://env/metrics"}):
            config = Config(scrape_uri="http://flag/metrics")

        assert config.scrape_uri == "http://flag/metrics"

    @pytest.mark.parametrize("address", ["9101", ":0", ":70000", "::1:9101", "host:port"])
    def test_validation_listen_address(self, address):
        """Invalid listen addresses are rejected at startup"""
        with pytest.raises(ValidationError):
            Config(listen_address=address)

    @pytest.mark.parametrize("path", ["/", "metrics", ""])
    def test_validation_telemetry_path(self, path):
        with pytest.raises(ValidationError):
            Config(telemetry_path=path)

    @pytest.mark.parametrize("uri", ["ftp://host/metrics", "localhost/metrics", "http://"])
    def test_validation_scrape_uri(self, uri):
        with pytest.raises(ValidationError):
            Config(scrape_uri=uri)

    @pytest.mark.parametrize("timeout", ["0", "-1s", "soon", "5x"])
    def test_validation_scrape_timeout(self, timeout):
        with pytest.raises(ValidationError):
            Config(scrape_timeout=timeout)

    def test_log_file_is_not_created_on_load(self):
        """Loading configuration leaves the filesystem untouched"""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "subdir" / "exporter.log"

            with patch.dict(os.environ, {"LOG_FILE": str(log_file)}):
                config = Config()

                assert config.log_file == log_file
                assert not log_file.parent.exists()


class TestParsing:
    """Test duration and address helpers"""

    @pytest.mark.parametrize("value,seconds", [
        ("5s", 5.0),
        ("500ms", 0.5),
        ("1m30s", 90.0),
        ("1h", 3600.0),
        ("2.5", 2.5),
        (3, 3.0),
        (" 10s ", 10.0),
    ])
    def test_parse_duration(self, value, seconds):
        assert parse_duration(value) == pytest.approx(seconds)

    @pytest.mark.parametrize("value", ["", "s", "5 s", "1d"])
    def test_parse_duration_rejects(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)

    @pytest.mark.parametrize("address,expected", [
        (":9101", ("0.0.0.0", 9101)),
        ("localhost:8080", ("localhost", 8080)),
        ("[::1]:9101", ("::1", 9101)),
    ])
    def test_split_listen_address(self, address, expected):
        assert split_listen_address(address) == expected
