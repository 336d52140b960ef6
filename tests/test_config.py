"""Unit tests for Hookshot configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hookshot.builder import DockerHubDetector, detect_github, detect_gitlab
from hookshot.config import DOCKER_HUB_NEWRELIC_ID, Settings


class TestSettings:
    """Tests for Settings model."""

    def test_default_settings(self):
        """Default settings should be reasonable."""
        # Use _env_file=None to prevent reading from .env file
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.endpoint_path == "/"
        assert settings.parse_payload is True
        assert settings.docker_hub_newrelic_id == DOCKER_HUB_NEWRELIC_ID
        assert settings.freeze_registry is True

    def test_log_formats(self):
        """Only valid log formats should be accepted."""
        assert Settings(log_format="text").log_format == "text"
        with pytest.raises(ValidationError):
            Settings(log_format="xml")

    def test_endpoint_path_must_be_absolute(self):
        """endpoint_path must start with a slash."""
        assert Settings(endpoint_path="/hooks").endpoint_path == "/hooks"
        with pytest.raises(ValidationError):
            Settings(endpoint_path="hooks")

    def test_env_prefix(self):
        """Settings should use HOOKSHOT_ prefix for environment variables."""
        with patch.dict(os.environ, {"HOOKSHOT_LOG_LEVEL": "DEBUG"}):
            settings = Settings(_env_file=None)
            assert settings.log_level == "DEBUG"

    def test_env_parse_payload(self):
        """HOOKSHOT_PARSE_PAYLOAD should override default."""
        with patch.dict(os.environ, {"HOOKSHOT_PARSE_PAYLOAD": "false"}):
            settings = Settings(_env_file=None)
            assert settings.parse_payload is False


class TestBuildDetectors:
    """Tests for Settings.build_detectors."""

    def test_default_chain(self):
        """Default chain is GitHub, GitLab, then Docker Hub."""
        detectors = Settings(_env_file=None).build_detectors()
        assert detectors[0] is detect_github
        assert detectors[1] is detect_gitlab
        assert isinstance(detectors[2], DockerHubDetector)
        assert detectors[2].newrelic_id == DOCKER_HUB_NEWRELIC_ID

    def test_custom_newrelic_id(self):
        """A configured sentinel replaces the default."""
        detectors = Settings(_env_file=None, docker_hub_newrelic_id="abc=").build_detectors()
        assert detectors[2].newrelic_id == "abc="

    def test_docker_hub_disabled(self):
        """An empty sentinel drops Docker Hub detection."""
        detectors = Settings(_env_file=None, docker_hub_newrelic_id="").build_detectors()
        assert detectors == [detect_github, detect_gitlab]
