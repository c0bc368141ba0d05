"""Page extraction service: fetch, locate the article, convert to Markdown."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Any, Optional

import aiohttp

from ..conversion.extractor import JwContentExtractor
from ..conversion.markdown import HtmlToMarkdown
from ..conversion.protocols import ContentExtractor, MarkdownConverter
from ..http import AsyncHttpClient, HttpClient
from ..models.config import JwmdConfig
from ..models.result import ErrorType, ExtractionResult
from ..security.url_validator import INVALID_URL_MESSAGE, UrlValidator

logger = logging.getLogger(__name__)

CONTENT_MISSING_MESSAGE = "Content could not be loaded. The page structure may have changed."
CONTENT_EMPTY_MESSAGE = "Content could not be loaded. The #content div is empty."
TIMEOUT_MESSAGE = "The page is not reachable. Request timed out."
CONNECTION_MESSAGE = "The page is not reachable. Please check your internet connection."
UNEXPECTED_MESSAGE = "An unexpected error occurred. Please try again."


def with_title(markdown: str, title: Optional[str]) -> str:
    """Prepend the article title as a level-1 heading."""
    if not title:
        return markdown
    return f"# {title}\n\n{markdown}"


class ContentService:
    """
    Extracts jw.org articles as Markdown.

    Owns an HTTP client for the duration of an ``async with`` block. A
    client can be injected (for tests or connection reuse), in which case
    its lifecycle is left to the caller.

    Example:
        async with ContentService() as service:
            result = await service.extract("https://www.jw.org/en/library/...")
            if result.success:
                print(result.markdown)
    """

    def __init__(
        self,
        config: Optional[JwmdConfig] = None,
        client: Optional[HttpClient] = None,
        validator: Optional[UrlValidator] = None,
        extractor: Optional[ContentExtractor] = None,
        converter: Optional[MarkdownConverter] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Configuration (defaults used if None)
            client: HTTP client; created from ``config.network`` if None
            validator: URL validator (uses default if None)
            extractor: Content region extractor (built from ``config.extraction`` if None)
            converter: Markdown converter (built from ``config.output`` if None)
        """
        self.config = config or JwmdConfig()
        self._owns_client = client is None
        self._client: Optional[HttpClient] = client
        self._validator = validator or UrlValidator()
        self._extractor: ContentExtractor = extractor or JwContentExtractor(
            content_selector=self.config.extraction.content_selector,
            title_selector=self.config.extraction.title_selector,
        )
        self._converter: MarkdownConverter = converter or HtmlToMarkdown(
            post_process=self.config.output.post_process
        )

    async def __aenter__(self) -> ContentService:
        if self._owns_client:
            network = self.config.network
            client = AsyncHttpClient(
                max_retries=network.max_retries,
                retry_base_delay=network.retry_base_delay,
                user_agent=network.user_agent,
                proxy=network.proxy,
                default_timeout=network.timeout,
            )
            self._client = await client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._owns_client and isinstance(self._client, AsyncHttpClient):
            await self._client.__aexit__(exc_type, exc_val, exc_tb)
            self._client = None

    def convert_fragment(self, html: str, title: Optional[str] = None) -> str:
        """
        Convert a content fragment, prepending the title if configured.

        Args:
            html: Inner HTML of the content region
            title: Optional article title

        Returns:
            Markdown string
        """
        markdown = self._converter.convert(html)
        if self.config.output.include_title:
            markdown = with_title(markdown, title)
        return markdown

    def convert_page(self, page: bytes | str) -> ExtractionResult:
        """
        Locate the article in a downloaded page and convert it.

        Args:
            page: Full HTML document

        Returns:
            ExtractionResult (CONTENT_NOT_FOUND when the region is missing or empty)
        """
        content = self._extractor.extract(page)
        if content is None:
            return ExtractionResult.failure(ErrorType.CONTENT_NOT_FOUND, CONTENT_MISSING_MESSAGE)
        if content.is_empty:
            return ExtractionResult.failure(ErrorType.CONTENT_NOT_FOUND, CONTENT_EMPTY_MESSAGE)

        markdown = self.convert_fragment(content.html, content.title)
        return ExtractionResult.ok(html=content.html, markdown=markdown, title=content.title)

    async def extract(self, url: str) -> ExtractionResult:
        """
        Fetch a page and convert its article to Markdown.

        Never raises for network or content problems; failures are reported
        through the returned result.

        Args:
            url: jw.org or wol.jw.org page URL

        Returns:
            ExtractionResult
        """
        validation = self._validator.validate(url)
        if not validation.is_valid:
            logger.info(f"Rejected {url}: {validation.rejection_reason}")
            return ExtractionResult.failure(ErrorType.INVALID_URL, INVALID_URL_MESSAGE)

        if self._client is None:
            raise RuntimeError("Service not initialized. Use 'async with' context manager.")

        try:
            response = await self._client.get(url.strip())
            if not response.ok:
                logger.warning(f"Got status {response.status_code} for {url}")
                return ExtractionResult.failure(
                    ErrorType.NETWORK_ERROR,
                    f"The page is not reachable. Status: {response.status_code}",
                )

            page = self._client.decode_content(response)
            result = self.convert_page(page)
            if result.success:
                logger.debug(f"Extracted {url} ({len(result.markdown or '')} bytes of Markdown)")
            return result

        except asyncio.TimeoutError:
            logger.error(f"Timed out fetching {url}")
            return ExtractionResult.failure(ErrorType.NETWORK_ERROR, TIMEOUT_MESSAGE)
        except (aiohttp.ClientError, ConnectionError) as e:
            logger.error(f"Network error fetching {url}: {e!r}")
            return ExtractionResult.failure(ErrorType.NETWORK_ERROR, CONNECTION_MESSAGE)
        except Exception as e:
            logger.exception(f"Unexpected error extracting {url}: {e}")
            return ExtractionResult.failure(ErrorType.NETWORK_ERROR, UNEXPECTED_MESSAGE)


def extract_content_blocking(url: str, **kwargs: Any) -> ExtractionResult:
    """
    Blocking extraction for sync code.

    WARNING: Do not call from within an existing event loop (e.g., Jupyter,
    asyncio-based frameworks). Use ContentService instead.

    Args:
        url: Page URL
        **kwargs: Config options passed to JwmdConfig

    Returns:
        ExtractionResult

    Example:
        result = extract_content_blocking(
            "https://wol.jw.org/en/wol/d/r1/lp-e/2024245",
            network={"timeout": 20},
        )
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        raise RuntimeError("extract_content_blocking() called from async context. Use ContentService instead.")

    config = JwmdConfig(**kwargs)

    async def run() -> ExtractionResult:
        async with ContentService(config) as service:
            return await service.extract(url)

    return asyncio.run(run())
