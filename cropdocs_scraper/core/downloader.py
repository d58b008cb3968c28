"""
PDF download executor.

Per URL:
1. Resolve target path from the URL's last path segment
2. Skip if a file with that name already exists (no request made)
3. GET with timeout, require HTTP 200 and an application/pdf content type
4. Buffer the whole body, reject empty bodies
5. Write to a temp file in the output directory and promote it onto the
   target path, so a failed transfer never leaves a partial file behind
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import httpx
import structlog

from .http_client import HttpClient
from .models import DownloadResult, DownloadStatus
from .normalizer import file_name_from_url

logger = structlog.get_logger(__name__)


PDF_CONTENT_TYPE = "application/pdf"
DEFAULT_TIMEOUT = 30.0
FILE_MODE = 0o644


class PdfDownloader:
    """
    Guarded fetch-and-persist for single PDF URLs.

    Usage:
        async with HttpClient() as client:
            downloader = PdfDownloader(client)
            result = await downloader.download(url, "PDFs")
            if result.downloaded:
                ...
    """

    def __init__(self, http_client: HttpClient, timeout: Optional[float] = DEFAULT_TIMEOUT):
        """
        Initialize downloader.

        Args:
            http_client: Open HTTP client
            timeout: Per-download timeout in seconds
        """
        self.http_client = http_client
        self.timeout = timeout

    async def download(self, url: str, output_dir: Union[str, Path]) -> DownloadResult:
        """
        Download a PDF into output_dir unless it is already there.

        Never raises for network, validation or filesystem problems;
        those come back as a failed result.

        Args:
            url: Absolute PDF URL
            output_dir: Target directory

        Returns:
            DownloadResult (status downloaded, skipped or failed)
        """
        file_name = file_name_from_url(url)
        if not file_name:
            return self._failed(url, None, "no_file_name")

        file_path = Path(output_dir) / file_name

        if file_path.exists() and not file_path.is_dir():
            logger.info("download_skipped", url=url, path=str(file_path), reason="already_exists")
            return DownloadResult(
                url=url,
                status=DownloadStatus.SKIPPED,
                path=str(file_path),
                reason="already_exists",
            )

        logger.info("downloading", url=url, path=str(file_path))

        try:
            async with self.http_client.stream(url, timeout=self.timeout) as response:
                rejection = self._validate_response(response)
                if rejection:
                    return self._failed(url, file_path, rejection)

                try:
                    content = await response.aread()
                except httpx.HTTPError as e:
                    return self._failed(url, file_path, "read_error", error=str(e))
        except httpx.InvalidURL as e:
            return self._failed(url, file_path, "invalid_url", error=str(e))
        except httpx.HTTPError as e:
            return self._failed(url, file_path, "request_error", error=str(e))

        if not content:
            return self._failed(url, file_path, "empty_body")

        try:
            self._write_file(content, file_path)
        except OSError as e:
            return self._failed(url, file_path, "write_error", error=str(e))

        logger.info(
            "download_complete",
            url=url,
            path=str(file_path),
            bytes=len(content),
        )
        return DownloadResult(
            url=url,
            status=DownloadStatus.DOWNLOADED,
            path=str(file_path),
            bytes_written=len(content),
        )

    def _validate_response(self, response: httpx.Response) -> Optional[str]:
        """
        Check status and content type before reading the body.

        Returns:
            Rejection reason, or None if the response is acceptable
        """
        if response.status_code != 200:
            return f"http_{response.status_code}"

        content_type = response.headers.get("Content-Type", "")
        if PDF_CONTENT_TYPE not in content_type:
            logger.warning(
                "unexpected_content_type",
                url=str(response.url),
                content_type=content_type,
                expected=PDF_CONTENT_TYPE,
            )
            return "invalid_content_type"

        return None

    def _write_file(self, content: bytes, file_path: Path) -> None:
        """Write bytes via a temp file in the same directory, then rename."""
        temp_path: Optional[Path] = None

        try:
            with tempfile.NamedTemporaryFile(
                dir=file_path.parent,
                prefix=".tmp-",
                suffix=".part",
                delete=False,
            ) as tmp_file:
                temp_path = Path(tmp_file.name)
                tmp_file.write(content)

            os.chmod(temp_path, FILE_MODE)
            os.replace(temp_path, file_path)
        except OSError:
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    temp_path.unlink()
            raise

    def _failed(
        self,
        url: str,
        file_path: Optional[Path],
        reason: str,
        error: Optional[str] = None,
    ) -> DownloadResult:
        """Log and build a failed result."""
        logger.error("download_failed", url=url, reason=reason, error=error)
        return DownloadResult(
            url=url,
            status=DownloadStatus.FAILED,
            path=str(file_path) if file_path else None,
            reason=reason,
        )
