"""
core/data/ip_ranges/cache.py - Cached ip-ranges loading

Decides on every load whether the cached document can be used or must be
refreshed from AWS:

- missing / unreadable / undecodable cache → fetch (cache miss)
- never-expire policy → cached document as is
- cached createDate that cannot be parsed → CacheTimestampError, no fetch
- createDate older than the expiration → fetch
- fetch failure → FetchError, no retry
- cache write failure → logged, the fetched document is still returned

Usage:
    from core.data.ip_ranges.cache import load_ip_ranges

    ranges = load_ip_ranges("~/.aws/ip-ranges.json", "720h")
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from core.exceptions import CacheTimestampError, CacheWriteError, FetchError, IPRangesError, MalformedDataError
from core.tools.cache.ttl import ExpirationPolicy

from .fetch import fetch_ip_ranges
from .models import IPRanges

logger = logging.getLogger(__name__)

FetchFn = Callable[[], bytes]


# =============================================================================
# Cache file I/O
# =============================================================================


def _read_cache(path: Path) -> IPRanges | None:
    """Load the cached document (None on cache miss)"""
    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.debug("Cache miss, cannot read %s: %s", path, e)
        return None

    try:
        return IPRanges.from_bytes(raw, source=str(path))
    except MalformedDataError as e:
        logger.debug("Cache miss, cannot parse %s: %s", path, e)
        return None


def _write_cache(path: Path, raw: bytes) -> None:
    """Write the document atomically (write-to-temp-then-rename)

    Raises:
        CacheWriteError: the directory or file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=".ip-ranges_")
        try:
            with open(fd, "wb") as f:
                f.write(raw)
            Path(tmp_path).replace(path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise CacheWriteError(str(path), cause=e) from e


def _fetch(fetch_fn: FetchFn | None) -> bytes:
    if fetch_fn is None:
        return fetch_ip_ranges()

    try:
        return fetch_fn()
    except IPRangesError:
        raise
    except Exception as e:
        raise FetchError(getattr(fetch_fn, "__name__", type(fetch_fn).__name__), cause=e) from e


def _expand(cache_path: str | os.PathLike[str]) -> Path:
    return Path(os.path.expanduser(os.fspath(cache_path)))


# =============================================================================
# Public API
# =============================================================================


def refresh_ip_ranges(
    cache_path: str | os.PathLike[str],
    fetch_fn: FetchFn | None = None,
) -> IPRanges:
    """Fetch the document, persist it (best effort) and parse it

    Raises:
        FetchError: the document could not be fetched
        MalformedDataError: the fetched document is not valid
    """
    path = _expand(cache_path)
    raw = _fetch(fetch_fn)

    try:
        _write_cache(path, raw)
    except CacheWriteError as e:
        logger.warning("Failed to cache ip ranges: %s", e)

    ranges = IPRanges.from_bytes(raw, source="fetch")
    logger.debug("Loaded %d prefixes (createDate=%s) from fetch", len(ranges), ranges.create_date)
    return ranges


def load_ip_ranges(
    cache_path: str | os.PathLike[str],
    expiration: str | ExpirationPolicy = "",
    fetch_fn: FetchFn | None = None,
    now: datetime | None = None,
) -> IPRanges:
    """Return the cached document if fresh, otherwise fetch a new one

    Args:
        cache_path: cache file path ("~" is expanded)
        expiration: duration string ("" = never expire) or policy
        fetch_fn: fetch operation returning raw bytes (default: AWS URL)
        now: current time (for tests)

    Returns:
        loaded document

    Raises:
        CacheTimestampError: cached createDate cannot be parsed
        ExpirationError: expiration duration cannot be parsed
        FetchError: the document could not be fetched
        MalformedDataError: the fetched document is not valid
    """
    path = _expand(cache_path)
    cached = _read_cache(path)

    if cached is not None:
        policy = expiration if isinstance(expiration, ExpirationPolicy) else ExpirationPolicy.parse(expiration)
        if policy.never_expires:
            logger.debug("Using cached ip ranges %s (never expires)", path)
            return cached

        try:
            created_at = cached.created_at
        except ValueError as e:
            raise CacheTimestampError(str(path), cached.create_date, cause=e) from e

        if policy.is_fresh(created_at, now):
            logger.debug("Using cached ip ranges %s (createDate=%s)", path, cached.create_date)
            return cached

        logger.debug("Cached ip ranges %s expired (createDate=%s, expiration=%s)", path, cached.create_date, policy)

    return refresh_ip_ranges(path, fetch_fn)


# =============================================================================
# Cache status
# =============================================================================


@dataclass
class CacheStatus:
    """Cache file status (read only, never fetches)"""

    path: str
    cached: bool = False
    create_date: str = ""
    age_hours: float | None = None
    fresh: bool = False
    count: int = 0
    error: str = ""


def get_cache_status(
    cache_path: str | os.PathLike[str],
    expiration: str | ExpirationPolicy = "",
    now: datetime | None = None,
) -> CacheStatus:
    """Describe the cache file without fetching"""
    path = _expand(cache_path)
    status = CacheStatus(path=str(path))

    cached = _read_cache(path)
    if cached is None:
        return status

    status.cached = True
    status.create_date = cached.create_date
    status.count = len(cached)

    try:
        policy = expiration if isinstance(expiration, ExpirationPolicy) else ExpirationPolicy.parse(expiration)
        try:
            created_at = cached.created_at
        except ValueError as e:
            raise CacheTimestampError(str(path), cached.create_date, cause=e) from e
    except IPRangesError as e:
        status.error = str(e)
        return status

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    status.age_hours = (now - created_at).total_seconds() / 3600
    status.fresh = policy.is_fresh(created_at, now)
    return status
