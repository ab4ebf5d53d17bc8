"""
core/data/ip_ranges/fetch.py - Download the published AWS ip-ranges document

Returns the raw response body; parsing is left to the caller so that the
exact published bytes can be written to the cache.
"""

from __future__ import annotations

import logging

import requests

from core.config import AWS_IP_RANGES_URL, DEFAULT_TIMEOUT
from core.exceptions import FetchError

logger = logging.getLogger(__name__)


def fetch_ip_ranges(url: str = AWS_IP_RANGES_URL, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Fetch the ip-ranges document

    Args:
        url: document URL
        timeout: connect/read timeout in seconds

    Returns:
        raw document bytes

    Raises:
        FetchError: network error, timeout, or non-2xx response
    """
    logger.debug("Fetching ip ranges from %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(url, cause=e) from e

    logger.debug("Fetched %d bytes from %s", len(response.content), url)
    return response.content
