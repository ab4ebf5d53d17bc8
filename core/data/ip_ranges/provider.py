"""
core/data/ip_ranges/provider.py - Host-facing query surface

The document is loaded once by ``configure`` and then handed, unchanged, to
every query. Query functions never reload or mutate it, so a failed query
leaves the loaded document usable for the next one.

Queries:
    read_ranges   ip prefixes matching a list of {"type", "values"} filters
    contains      whether an IP address is inside any published range

Usage:
    from core.config import get_settings
    from core.data.ip_ranges.provider import configure, contains, read_ranges

    ranges = configure(get_settings())
    result = read_ranges(ranges, [{"type": "region", "values": ["us-east-1"]}])
    if result.error:
        ...
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from core.config import Settings
from core.exceptions import FilterError, FilterValueError

from .cache import FetchFn, load_ip_ranges
from .fetch import fetch_ip_ranges
from .filters import Filter, FilterType, apply_filters
from .models import IPRanges

logger = logging.getLogger(__name__)


@dataclass
class RangesResult:
    """Result of a ranges query

    Attributes:
        ip_prefixes: matching prefixes as dicts, or None when nothing matched
        error: error message when the query failed
    """

    ip_prefixes: list[dict[str, str]] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def configure(settings: Settings, fetch_fn: FetchFn | None = None) -> IPRanges:
    """Load the document for the configured cache file and expiration

    Raises:
        IPRangesError: the document could not be loaded
    """
    if fetch_fn is None:
        fetch_fn = functools.partial(fetch_ip_ranges, url=settings.url, timeout=settings.timeout)

    ranges = load_ip_ranges(settings.cachefile, settings.expiration, fetch_fn)
    logger.debug("Configured with %d prefixes (createDate=%s)", len(ranges), ranges.create_date)
    return ranges


def parse_filters(raw_filters: Sequence[Mapping[str, Any]] | None) -> list[Filter]:
    """Convert {"type": ..., "values": [...]} mappings into filters

    A single "value" key is accepted for the older single-value form.

    Raises:
        FilterValueError: a mapping has no type or no values
    """
    filters: list[Filter] = []
    for raw in raw_filters or ():
        filter_type = raw.get("type")
        if not isinstance(filter_type, str) or not filter_type:
            raise FilterValueError("", raw, "filter type is required")

        if "values" in raw:
            values = raw["values"]
            if not isinstance(values, (list, tuple)):
                raise FilterValueError(filter_type, values, "values must be a list")
            filters.append(Filter(filter_type, list(values)))
        elif "value" in raw:
            filters.append(Filter.single(filter_type, raw["value"]))
        else:
            raise FilterValueError(filter_type, raw, "filter values are required")

    return filters


def read_ranges(ranges: IPRanges, raw_filters: Sequence[Mapping[str, Any]] | None = None) -> RangesResult:
    """Run a ranges query

    Filter errors are returned in ``RangesResult.error`` instead of raised.
    """
    try:
        filters = parse_filters(raw_filters)
        logger.debug("Applying filters: %s", [str(f) for f in filters])
        matches = apply_filters(ranges, filters)
    except FilterError as e:
        logger.debug("Filter error: %s", e)
        return RangesResult(error=str(e))

    if not matches:
        return RangesResult(ip_prefixes=None)
    return RangesResult(ip_prefixes=[entry.to_dict() for entry in matches])


def contains(ranges: IPRanges, ip: str) -> bool:
    """Return True if the IP address is inside any published range

    Raises:
        FilterValueError: ip is not a valid IP address
    """
    return bool(apply_filters(ranges, [Filter.single(FilterType.ADDRESS, ip)]))
