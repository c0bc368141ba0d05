"""Pydantic configuration models for jwmd."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class NetworkConfig(BaseModel):
    """Configuration for the HTTP client."""

    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header sent with requests")
    timeout: float = Field(10.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(2, ge=0, description="Retry attempts for 429/5xx and connection errors")
    retry_base_delay: float = Field(1.0, ge=0, description="Base delay for exponential backoff (seconds)")
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")

    model_config = {"extra": "forbid"}


class ExtractionConfig(BaseModel):
    """Configuration for locating the article in a page."""

    content_selector: str = Field("#content.content", description="CSS selector for the content region")
    title_selector: str = Field("header h1", description="CSS selector for the article title")

    model_config = {"extra": "forbid"}


class OutputConfig(BaseModel):
    """Configuration for the produced Markdown."""

    include_title: bool = Field(True, description="Prepend the article title as a level-1 heading")
    post_process: bool = Field(True, description="Run the Markdown cleanup passes")
    output_file: Optional[Path] = Field(None, description="Write Markdown here instead of stdout")

    model_config = {"extra": "forbid"}


class JwmdConfig(BaseModel):
    """
    Root configuration model for jwmd.

    Example:
        config = JwmdConfig(network=NetworkConfig(timeout=20))

    YAML format:
        network:
          timeout: 20
          max_retries: 1
        output:
          include_title: false
        log_level: DEBUG
    """

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "WARNING",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "JwmdConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "JwmdConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
