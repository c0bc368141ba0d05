"""Extraction service for jwmd."""

from .service import ContentService, extract_content_blocking, with_title

__all__ = ["ContentService", "extract_content_blocking", "with_title"]
