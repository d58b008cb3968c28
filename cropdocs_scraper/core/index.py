"""
Document index fetching and parsing.

Both steps fail soft: a failed fetch or an undecodable payload is logged
and treated the same as an empty index.
"""

import json

import httpx
import structlog

from .http_client import HttpClient
from .models import DocumentRecord

logger = structlog.get_logger(__name__)


async def fetch_index(client: HttpClient, endpoint: str) -> bytes:
    """
    Fetch raw index payload.

    Args:
        client: Open HTTP client
        endpoint: Index endpoint URL

    Returns:
        Response body, or b"" if the request failed
    """
    logger.info("fetching_index", url=endpoint)

    try:
        response = await client.get(endpoint, timeout=client.timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("index_fetch_failed", url=endpoint, error=str(e))
        return b""

    if not response.is_success:
        # Body is still handed to the parser
        logger.warning(
            "index_fetch_bad_status",
            url=endpoint,
            status=response.status_code,
        )

    logger.debug("index_fetched", url=endpoint, bytes=len(response.content))
    return response.content


def parse_index(payload: bytes) -> list[DocumentRecord]:
    """
    Parse index payload into document records.

    Expects a JSON array of objects with a "url" field. Array entries
    that are not objects are skipped.

    Args:
        payload: Raw JSON bytes

    Returns:
        Records in index order ([] on any decode failure)
    """
    if not payload:
        logger.warning("index_empty")
        return []

    try:
        data = json.loads(payload)
    except (ValueError, RecursionError) as e:
        logger.error("index_parse_failed", error=str(e))
        return []

    if not isinstance(data, list):
        logger.error("index_parse_failed", error=f"expected array, got {type(data).__name__}")
        return []

    records = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            logger.debug("index_entry_skipped", index=i)
            continue
        records.append(DocumentRecord.from_dict(item))

    logger.info("index_parsed", documents=len(records))
    return records
