"""
Data models for the document scraper.

Records flow downstream only; nothing here holds shared state.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class DownloadStatus(str, Enum):
    """Outcome of a single download attempt."""
    DOWNLOADED = "downloaded"  # New file written
    SKIPPED = "skipped"  # File already on disk, no request made
    FAILED = "failed"  # Request, validation or write failed


@dataclass(frozen=True)
class DocumentRecord:
    """One entry of the remote document index."""
    url: str

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentRecord":
        """Create from a decoded JSON object."""
        url = data.get("url")
        return cls(url=url if isinstance(url, str) else "")


@dataclass
class DownloadResult:
    """
    Result of a download attempt for one URL.

    `downloaded` mirrors the boolean contract of the executor:
    True only when a new file was written.
    """

    url: str
    status: DownloadStatus
    path: Optional[str] = None
    bytes_written: int = 0
    reason: Optional[str] = None

    @property
    def downloaded(self) -> bool:
        """True only when this attempt wrote a new file."""
        return self.status == DownloadStatus.DOWNLOADED

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and JSON serialization."""
        data = {}
        for k, v in asdict(self).items():
            if isinstance(v, Enum):
                data[k] = v.value
            elif v is not None:
                data[k] = v
        return data
