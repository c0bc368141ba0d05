"""Tests for configuration and result models."""

from pathlib import Path

import pytest
from jwmd.models import (
    DEFAULT_USER_AGENT,
    ErrorType,
    ExtractionResult,
    JwmdConfig,
    NetworkConfig,
    OutputConfig,
)
from pydantic import ValidationError


class TestJwmdConfig:
    """Tests for the configuration models."""

    def test_defaults(self):
        """Test default values."""
        config = JwmdConfig()

        assert config.network.user_agent == DEFAULT_USER_AGENT
        assert config.network.timeout == 10.0
        assert config.network.max_retries == 2
        assert config.network.proxy is None
        assert config.extraction.content_selector == "#content.content"
        assert config.extraction.title_selector == "header h1"
        assert config.output.include_title is True
        assert config.output.post_process is True
        assert config.log_level == "WARNING"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"bogus": 1},
            {"network": {"retries": 3}},
            {"output": {"title": False}},
        ],
    )
    def test_extra_fields_forbidden(self, kwargs):
        """Test unknown keys are rejected."""
        with pytest.raises(ValidationError):
            JwmdConfig(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [{"timeout": 0}, {"max_retries": -1}, {"retry_base_delay": -0.5}],
    )
    def test_network_bounds(self, kwargs):
        """Test invalid network values are rejected."""
        with pytest.raises(ValidationError):
            NetworkConfig(**kwargs)

    def test_invalid_log_level(self):
        """Test only known log levels are accepted."""
        with pytest.raises(ValidationError):
            JwmdConfig(log_level="TRACE")

    def test_yaml_round_trip(self):
        """Test a config survives YAML serialization."""
        config = JwmdConfig(
            network=NetworkConfig(timeout=20, proxy="http://proxy.local:8080"),
            output=OutputConfig(include_title=False, output_file=Path("article.md")),
            log_level="DEBUG",
        )

        assert JwmdConfig.from_yaml(config.to_yaml()) == config

    def test_yaml_omits_unset_paths(self):
        """Test empty optional values are not written."""
        assert "output_file" not in JwmdConfig().to_yaml()

    def test_empty_yaml(self):
        """Test an empty document gives the defaults."""
        assert JwmdConfig.from_yaml("") == JwmdConfig()

    def test_from_yaml_file(self, tmp_path):
        """Test loading from a file."""
        path = tmp_path / "jwmd.yaml"
        path.write_text("network:\n  timeout: 15\nextraction:\n  title_selector: h1.title\n")

        config = JwmdConfig.from_yaml_file(path)

        assert config.network.timeout == 15
        assert config.extraction.title_selector == "h1.title"
        assert config.extraction.content_selector == "#content.content"


class TestExtractionResult:
    """Tests for ExtractionResult."""

    def test_ok(self):
        """Test a successful result."""
        result = ExtractionResult.ok(html="<p>Hi</p>", markdown="Hi", title="Title")

        assert result.success
        assert result.error is None
        assert result.to_dict() == {
            "success": True,
            "html": "<p>Hi</p>",
            "markdown": "Hi",
            "title": "Title",
        }

    def test_ok_without_title(self):
        """Test an empty title is stored as None."""
        result = ExtractionResult.ok(html="<p>Hi</p>", markdown="Hi", title="")

        assert result.title is None
        assert "title" not in result.to_dict()

    def test_failure(self):
        """Test a failed result."""
        result = ExtractionResult.failure(ErrorType.NETWORK_ERROR, "The page is not reachable. Status: 404")

        assert not result.success
        assert result.markdown is None
        assert result.to_dict() == {
            "success": False,
            "error": {"type": "NETWORK_ERROR", "message": "The page is not reachable. Status: 404"},
        }

    def test_error_type_values(self):
        """Test error kinds serialize as their names."""
        assert [error_type.value for error_type in ErrorType] == [
            "INVALID_URL",
            "CONTENT_NOT_FOUND",
            "NETWORK_ERROR",
        ]
