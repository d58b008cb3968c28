"""
Core layer - stable foundation for the scraping pipeline.

Components:
- models: DocumentRecord, DownloadResult, DownloadStatus
- http_client: Shared async HTTP client
- index: Index fetching and JSON parsing
- normalizer: Extension filter, origin prefixing, URL validation
- deduplicator: First-seen URL deduplication
- downloader: Validated fetch-and-persist for single PDFs
"""

from .models import DocumentRecord, DownloadResult, DownloadStatus
from .http_client import HttpClient
from .index import fetch_index, parse_index
from .normalizer import (
    get_file_extension,
    is_pdf_url,
    filter_pdf_urls,
    prefix_with_origin,
    normalize_url,
    is_valid_url,
    file_name_from_url,
)
from .deduplicator import Deduplicator, deduplicate_urls
from .downloader import PdfDownloader

__all__ = [
    "DocumentRecord",
    "DownloadResult",
    "DownloadStatus",
    "HttpClient",
    "fetch_index",
    "parse_index",
    "get_file_extension",
    "is_pdf_url",
    "filter_pdf_urls",
    "prefix_with_origin",
    "normalize_url",
    "is_valid_url",
    "file_name_from_url",
    "Deduplicator",
    "deduplicate_urls",
    "PdfDownloader",
]
