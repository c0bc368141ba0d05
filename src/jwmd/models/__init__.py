"""jwmd configuration and result models."""

from .config import (
    DEFAULT_USER_AGENT,
    ExtractionConfig,
    JwmdConfig,
    NetworkConfig,
    OutputConfig,
)
from .result import ErrorType, ExtractionError, ExtractionResult

__all__ = [
    # Config
    "DEFAULT_USER_AGENT",
    "ExtractionConfig",
    "JwmdConfig",
    "NetworkConfig",
    "OutputConfig",
    # Results
    "ErrorType",
    "ExtractionError",
    "ExtractionResult",
]
