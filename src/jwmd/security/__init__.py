"""URL validation for jwmd."""

from .url_validator import INVALID_URL_MESSAGE, UrlValidationResult, UrlValidator

__all__ = ["INVALID_URL_MESSAGE", "UrlValidationResult", "UrlValidator"]
