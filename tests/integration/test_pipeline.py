"""Integration tests for the full scraping pipeline."""

import json

import httpx
import pytest

from cropdocs_scraper.config.loader import ScraperConfig
from cropdocs_scraper.core.models import DocumentRecord, DownloadStatus
from cropdocs_scraper.orchestrator import DocumentScraper

ORIGIN = "https://cropscience.bayer.co.uk"
ENDPOINT = f"{ORIGIN}/api/documents"


class FakeSite:
    """In-memory document site served through httpx.MockTransport."""

    def __init__(self, index, pdfs=None):
        self.index = index
        self.pdfs = pdfs or {}
        self.requested: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)

        if url == ENDPOINT:
            if isinstance(self.index, Exception):
                raise self.index
            return httpx.Response(200, content=self.index)

        if url in self.pdfs:
            return httpx.Response(
                200,
                headers={"Content-Type": "application/pdf"},
                content=self.pdfs[url],
            )

        return httpx.Response(404, content=b"not found")

    @property
    def downloads(self) -> list[str]:
        return [url for url in self.requested if url != ENDPOINT]


def make_scraper(site, tmp_path, **overrides):
    config = ScraperConfig(output_dir=str(tmp_path / "PDFs"), **overrides)
    return DocumentScraper(config=config, transport=httpx.MockTransport(site))


def index_payload(*urls) -> bytes:
    return json.dumps([{"url": url} for url in urls]).encode()


class TestPipelineIntegration:
    """End-to-end runs against a fake site."""

    @pytest.mark.asyncio
    async def test_filter_dedup_normalize_download(self, tmp_path):
        """Test duplicates and non-PDFs produce exactly two download attempts."""
        site = FakeSite(
            index=index_payload("/a.pdf", "/a.pdf", "/b.txt", f"{ORIGIN}/c.pdf"),
            pdfs={
                f"{ORIGIN}/a.pdf": b"%PDF-a",
                f"{ORIGIN}/c.pdf": b"%PDF-cc",
            },
        )
        scraper = make_scraper(site, tmp_path)

        results = await scraper.run()

        assert site.downloads == [f"{ORIGIN}/a.pdf", f"{ORIGIN}/c.pdf"]
        assert [r.status for r in results] == [DownloadStatus.DOWNLOADED] * 2
        assert (tmp_path / "PDFs" / "a.pdf").read_bytes() == b"%PDF-a"
        assert (tmp_path / "PDFs" / "c.pdf").read_bytes() == b"%PDF-cc"
        assert scraper.stats["documents_indexed"] == 4
        assert scraper.stats["pdf_candidates"] == 3
        assert scraper.stats["duplicates_removed"] == 1
        assert scraper.stats["downloaded"] == 2

    @pytest.mark.asyncio
    async def test_second_run_skips_existing(self, tmp_path):
        """Test rerun makes no download requests for files on disk."""
        site = FakeSite(
            index=index_payload("/a.pdf"),
            pdfs={f"{ORIGIN}/a.pdf": b"%PDF-a"},
        )

        await make_scraper(site, tmp_path).run()
        site.requested.clear()

        scraper = make_scraper(site, tmp_path)
        results = await scraper.run()

        assert site.downloads == []
        assert results[0].status == DownloadStatus.SKIPPED
        assert scraper.stats["skipped"] == 1

    @pytest.mark.asyncio
    async def test_failures_do_not_stop_run(self, tmp_path):
        """Test a failing URL is abandoned and the next one still runs."""
        site = FakeSite(
            index=index_payload("/missing.pdf", "/ok.pdf"),
            pdfs={f"{ORIGIN}/ok.pdf": b"%PDF-ok"},
        )
        scraper = make_scraper(site, tmp_path)

        results = await scraper.run()

        assert [r.status for r in results] == [
            DownloadStatus.FAILED,
            DownloadStatus.DOWNLOADED,
        ]
        assert results[0].reason == "http_404"
        assert not (tmp_path / "PDFs" / "missing.pdf").exists()
        assert scraper.stats["failed"] == 1

    @pytest.mark.asyncio
    async def test_bad_port_entry_does_not_stop_run(self, tmp_path):
        """Test an entry with a malformed port is skipped and later entries still download."""
        site = FakeSite(
            index=index_payload(":8x/a.pdf", "/ok.pdf"),
            pdfs={f"{ORIGIN}/ok.pdf": b"%PDF-ok"},
        )
        scraper = make_scraper(site, tmp_path)

        results = await scraper.run()

        assert site.downloads == [f"{ORIGIN}/ok.pdf"]
        assert [r.status for r in results] == [DownloadStatus.DOWNLOADED]
        assert scraper.stats["invalid_urls"] == 1

    @pytest.mark.asyncio
    async def test_space_in_file_name_downloads(self, tmp_path):
        """Test a document whose name contains a space is fetched and saved."""
        site = FakeSite(
            index=index_payload("/docs/my label.pdf"),
            pdfs={f"{ORIGIN}/docs/my%20label.pdf": b"%PDF-label"},
        )

        results = await make_scraper(site, tmp_path).run()

        assert results[0].status == DownloadStatus.DOWNLOADED
        assert (tmp_path / "PDFs" / "my label.pdf").read_bytes() == b"%PDF-label"

    @pytest.mark.asyncio
    async def test_index_fetch_failure_means_no_documents(self, tmp_path):
        """Test unreachable index ends the run with nothing downloaded."""
        site = FakeSite(index=httpx.ConnectError("connection refused"))
        scraper = make_scraper(site, tmp_path)

        results = await scraper.run()

        assert results == []
        assert site.downloads == []
        assert scraper.stats["documents_indexed"] == 0

    @pytest.mark.asyncio
    async def test_malformed_index_means_no_documents(self, tmp_path):
        """Test undecodable index is treated as empty."""
        site = FakeSite(index=b"<html>oops</html>")

        results = await make_scraper(site, tmp_path).run()

        assert results == []
        assert site.downloads == []

    @pytest.mark.asyncio
    async def test_output_dir_created(self, tmp_path):
        """Test the output directory is created when missing."""
        site = FakeSite(index=index_payload())

        await make_scraper(site, tmp_path).run()

        assert (tmp_path / "PDFs").is_dir()

    @pytest.mark.asyncio
    async def test_dry_run_downloads_nothing(self, tmp_path):
        """Test dry run lists URLs without fetching them."""
        site = FakeSite(
            index=index_payload("/a.pdf", "/b.pdf"),
            pdfs={f"{ORIGIN}/a.pdf": b"%PDF-a"},
        )

        results = await make_scraper(site, tmp_path).run(dry_run=True)

        assert results == []
        assert site.downloads == []
        assert not (tmp_path / "PDFs").exists()


class TestCollectDownloadUrls:
    """Tests for the record -> URL stage of the pipeline."""

    def test_other_host_url_is_mangled_but_kept(self, tmp_path):
        """Test absolute URL on another host is prefixed with the origin."""
        scraper = DocumentScraper(config=ScraperConfig(output_dir=str(tmp_path)))
        records = [DocumentRecord(url="https://cdn.example.com/x.pdf")]

        urls = scraper.collect_download_urls(records)

        assert urls == [f"{ORIGIN}https://cdn.example.com/x.pdf"]

    def test_invalid_urls_dropped(self, tmp_path):
        """Test URLs that are not valid after prefixing are skipped."""
        scraper = DocumentScraper(config=ScraperConfig(output_dir=str(tmp_path)))
        records = [
            DocumentRecord(url=":8x/docs/a.pdf"),
            DocumentRecord(url="/docs/label.pdf"),
        ]

        urls = scraper.collect_download_urls(records)

        assert urls == [f"{ORIGIN}/docs/label.pdf"]
        assert scraper.stats["invalid_urls"] == 1

    def test_custom_origin(self, tmp_path):
        """Test origin comes from configuration."""
        config = ScraperConfig(origin="http://localhost:8000", output_dir=str(tmp_path))
        scraper = DocumentScraper(config=config)

        urls = scraper.collect_download_urls([DocumentRecord(url="/a.pdf")])

        assert urls == ["http://localhost:8000/a.pdf"]

    def test_space_in_path_kept(self, tmp_path):
        """Test a space in the file name does not drop the document."""
        scraper = DocumentScraper(config=ScraperConfig(output_dir=str(tmp_path)))

        urls = scraper.collect_download_urls([DocumentRecord(url="/docs/my label.pdf")])

        assert urls == [f"{ORIGIN}/docs/my label.pdf"]
        assert scraper.stats["invalid_urls"] == 0
