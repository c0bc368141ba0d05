"""URL validation for supported article pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlparse

INVALID_URL_MESSAGE = "Invalid URL format. Please enter a valid jw.org or wol.jw.org link."


@dataclass
class UrlValidationResult:
    """Result of URL validation."""

    is_valid: bool
    rejection_reason: str | None = None

    @staticmethod
    def valid() -> UrlValidationResult:
        """Create a valid result."""
        return UrlValidationResult(is_valid=True)

    @staticmethod
    def invalid(reason: str) -> UrlValidationResult:
        """Create an invalid result with reason."""
        return UrlValidationResult(is_valid=False, rejection_reason=reason)


class UrlValidator:
    """
    Validates that a URL points at a page on a supported site.

    Accepts http(s) URLs on jw.org, www.jw.org and wol.jw.org that name a
    page (a bare domain is rejected).

    Example:
        validator = UrlValidator()
        result = validator.validate("https://wol.jw.org/en/wol/d/r1/lp-e/2024245")
        if not result.is_valid:
            print(f"Rejected: {result.rejection_reason}")
    """

    DEFAULT_ALLOWED_SCHEMES = {"http", "https"}
    DEFAULT_ALLOWED_HOSTS = {"jw.org", "www.jw.org", "wol.jw.org"}

    def __init__(
        self,
        allowed_schemes: set[str] | None = None,
        allowed_hosts: set[str] | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the URL validator.

        Args:
            allowed_schemes: Set of allowed URL schemes (default: http, https)
            allowed_hosts: Set of allowed host names (default: jw.org sites)
            logger: Optional logger for validation messages
        """
        self.allowed_schemes = allowed_schemes or self.DEFAULT_ALLOWED_SCHEMES
        self.allowed_hosts = {host.lower() for host in (allowed_hosts or self.DEFAULT_ALLOWED_HOSTS)}
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, url: str) -> UrlValidationResult:
        """
        Validate a URL.

        Args:
            url: The URL to validate

        Returns:
            UrlValidationResult with is_valid and optional rejection_reason
        """
        try:
            parsed = urlparse(url.strip())
            hostname = (parsed.hostname or "").lower()
        except ValueError:
            return UrlValidationResult.invalid("Invalid URL format")

        # Check scheme
        if parsed.scheme.lower() not in self.allowed_schemes:
            return UrlValidationResult.invalid(
                f"Scheme '{parsed.scheme}' not allowed (allowed: {sorted(self.allowed_schemes)})"
            )

        # Check for missing domain
        if not hostname:
            return UrlValidationResult.invalid("URL has no domain")

        if hostname not in self.allowed_hosts:
            return UrlValidationResult.invalid(f"Domain '{hostname}' is not a supported site")

        # Something must follow the slash after the host
        if not parsed.path.startswith("/") or not (parsed.path[1:] or parsed.query or parsed.fragment):
            return UrlValidationResult.invalid("URL does not point to a page")

        self.logger.debug(f"Accepted URL {url}")
        return UrlValidationResult.valid()

    def is_valid(self, url: str) -> bool:
        """
        Quick check if URL is valid.

        Args:
            url: The URL to check

        Returns:
            True if valid, False otherwise
        """
        return self.validate(url).is_valid
