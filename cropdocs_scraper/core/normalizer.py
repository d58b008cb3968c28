"""
URL normalization utilities.

Handles:
- File extension detection on the URL path
- PDF candidate filtering
- Origin prefixing for relative index URLs
- Syntactic URL validation
- Local file naming
"""

import re
from typing import Iterable
from urllib.parse import urlsplit

from .models import DocumentRecord

PDF_EXTENSION = ".pdf"

# ASCII control characters are never valid in a request URL; spaces get escaped
INVALID_URL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _url_path(url: str) -> str:
    """Return the path component of a URL, or the raw string if unparseable."""
    try:
        return urlsplit(url).path
    except ValueError:
        return url


def get_file_extension(url: str) -> str:
    """
    Get file extension from the last path segment of a URL.

    Query string and fragment are ignored. The extension includes the
    leading dot, so "/docs/label.pdf?v=2" gives ".pdf".

    Args:
        url: URL or path

    Returns:
        Extension (e.g. ".pdf") or "" if the segment has no dot
    """
    if not url:
        return ""

    segment = _url_path(url).rsplit("/", 1)[-1]
    dot = segment.rfind(".")
    if dot < 0:
        return ""

    return segment[dot:]


def is_pdf_url(url: str) -> bool:
    """Check whether a URL path ends with the .pdf extension (case-sensitive)."""
    return get_file_extension(url) == PDF_EXTENSION


def filter_pdf_urls(records: Iterable[DocumentRecord]) -> list[str]:
    """
    Select URLs of records pointing to PDF files.

    Args:
        records: Parsed index records

    Returns:
        PDF URLs in index order
    """
    return [record.url for record in records if is_pdf_url(record.url)]


def prefix_with_origin(url: str, origin: str) -> str:
    """
    Prefix a URL with the origin unless it already starts with it.

    Plain string test: an absolute URL on a different host is
    concatenated too, which gives a malformed URL.
    """
    if url.startswith(origin):
        return url
    return origin + url


def normalize_url(url: str, origin: str) -> str:
    """
    Make an index URL absolute against the origin.

    Args:
        url: URL as listed in the index
        origin: Scheme and host, e.g. "https://cropscience.bayer.co.uk"

    Returns:
        Absolute URL
    """
    return prefix_with_origin(url, origin)


def is_valid_url(url: str) -> bool:
    """
    Check that a string is a well-formed absolute request URL.

    Requires scheme, host and a numeric port if one is given;
    rejects control characters.
    """
    if not url or INVALID_URL_CHARS.search(url):
        return False

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # ValueError for a non-numeric or out-of-range port
    except ValueError:
        return False

    return bool(parts.scheme) and bool(hostname)


def file_name_from_url(url: str) -> str:
    """
    Get local file name for a URL (last segment of the URL path).

    Args:
        url: Absolute URL

    Returns:
        File name, or "" if the path has no usable last segment
    """
    name = _url_path(url).rsplit("/", 1)[-1]
    if name in ("", ".", ".."):
        return ""
    return name
