"""
URL deduplication preserving first-seen order.

URLs are compared by exact string equality; no normalization happens
before this stage.
"""

from typing import Iterable, Optional

import structlog

logger = structlog.get_logger(__name__)


class Deduplicator:
    """
    Set-based URL deduplicator.

    Tracks seen URLs and lets through only the first occurrence of each.
    """

    def __init__(self):
        """Initialize deduplicator with empty seen set."""
        self._seen: set[str] = set()

    def check(self, url: str) -> bool:
        """
        Check if URL was already seen.

        Args:
            url: URL to check

        Returns:
            True if URL is a duplicate
        """
        return url in self._seen

    def add(self, url: str) -> None:
        """Add URL to the seen set."""
        self._seen.add(url)

    def process(self, url: str) -> Optional[str]:
        """
        Process URL through deduplication.

        Combines check and add in one operation.

        Args:
            url: URL to process

        Returns:
            URL if first occurrence, None if duplicate
        """
        if self.check(url):
            logger.debug("url_skipped_duplicate", url=url)
            return None

        self.add(url)
        return url

    @property
    def seen_count(self) -> int:
        """Return number of distinct URLs seen."""
        return len(self._seen)

    def clear(self) -> None:
        """Clear seen set."""
        self._seen.clear()


def deduplicate_urls(urls: Iterable[str]) -> list[str]:
    """
    Remove repeated URLs, keeping first occurrences in order.

    Args:
        urls: URLs, possibly with repeats

    Returns:
        Unique URLs in first-seen order
    """
    dedup = Deduplicator()
    return [url for url in urls if dedup.process(url) is not None]
