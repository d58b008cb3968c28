"""
Master orchestrator for the document scraping pipeline.

Coordinates:
- Index fetching and parsing
- PDF filtering and deduplication
- URL normalization and validation
- Sequential downloads into the output directory
"""

from pathlib import Path
from typing import Iterable, Optional

import httpx
import structlog

from .config.loader import ScraperConfig
from .core.models import DocumentRecord, DownloadResult
from .core.http_client import HttpClient
from .core.index import fetch_index, parse_index
from .core.normalizer import filter_pdf_urls, normalize_url, is_valid_url
from .core.deduplicator import deduplicate_urls
from .core.downloader import PdfDownloader

logger = structlog.get_logger(__name__)


class DocumentScraper:
    """
    Master orchestrator for the scraping pipeline.

    Runs fetch -> parse -> filter -> dedup -> normalize -> download,
    one URL at a time. Per-URL failures never stop the run.
    """

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize document scraper.

        Args:
            config: Run settings (defaults to ScraperConfig())
            transport: Optional httpx transport, mainly for tests
        """
        self.config = config or ScraperConfig()
        self.output_dir = Path(self.config.output_dir)
        self.transport = transport

        # Statistics
        self.stats = {
            "documents_indexed": 0,
            "pdf_candidates": 0,
            "duplicates_removed": 0,
            "invalid_urls": 0,
            "downloaded": 0,
            "skipped": 0,
            "failed": 0,
        }

    async def run(self, dry_run: bool = False) -> list[DownloadResult]:
        """
        Run the scraping pipeline.

        Args:
            dry_run: If True, only list download URLs without fetching them

        Returns:
            One DownloadResult per attempted URL, in index order
        """
        logger.info(
            "starting_scrape",
            endpoint=self.config.endpoint,
            output_dir=str(self.output_dir),
            dry_run=dry_run,
        )

        results: list[DownloadResult] = []

        async with HttpClient(
            timeout=self.config.index_timeout,
            user_agent=self.config.user_agent,
            transport=self.transport,
        ) as client:
            payload = await fetch_index(client, self.config.endpoint)
            records = parse_index(payload)
            self.stats["documents_indexed"] = len(records)

            if not dry_run:
                self._ensure_output_dir()

            urls = self.collect_download_urls(records)

            if dry_run:
                for url in urls:
                    logger.info("discovered_pdf", url=url)
                logger.info("dry_run_complete", pdfs=len(urls))
                return results

            downloader = PdfDownloader(client, timeout=self.config.download_timeout)

            for i, url in enumerate(urls):
                logger.debug("processing_url", index=i + 1, total=len(urls), url=url)
                result = await downloader.download(url, self.output_dir)
                self.stats[result.status.value] += 1
                results.append(result)

        logger.info("scrape_complete", **self.stats)

        return results

    def collect_download_urls(self, records: Iterable[DocumentRecord]) -> list[str]:
        """
        Turn index records into the ordered list of URLs to download.

        Args:
            records: Parsed index records

        Returns:
            Unique, absolute, syntactically valid PDF URLs
        """
        candidates = filter_pdf_urls(records)
        self.stats["pdf_candidates"] = len(candidates)

        unique = deduplicate_urls(candidates)
        self.stats["duplicates_removed"] = len(candidates) - len(unique)

        urls = []
        for candidate in unique:
            url = normalize_url(candidate, self.config.origin)
            if not is_valid_url(url):
                logger.debug("invalid_url_skipped", url=url)
                self.stats["invalid_urls"] += 1
                continue
            urls.append(url)

        logger.info(
            "candidates_collected",
            candidates=len(candidates),
            unique=len(unique),
            valid=len(urls),
        )
        return urls

    def _ensure_output_dir(self) -> None:
        """Create the output directory if missing; failure is logged, not raised."""
        if self.output_dir.is_dir():
            return

        try:
            self.output_dir.mkdir(mode=self.config.dir_mode, parents=True)
            logger.info("output_dir_created", path=str(self.output_dir))
        except OSError as e:
            logger.error(
                "output_dir_create_failed",
                path=str(self.output_dir),
                error=str(e),
            )


async def run_scraper(
    config: Optional[ScraperConfig] = None,
    dry_run: bool = False,
) -> list[DownloadResult]:
    """
    Convenience function to run the scraper.

    Args:
        config: Run settings
        dry_run: List URLs only

    Returns:
        Download results
    """
    scraper = DocumentScraper(config=config)
    return await scraper.run(dry_run=dry_run)
