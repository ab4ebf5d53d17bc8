"""
core/data/ip_ranges - AWS Public IP Ranges

Cached loading and filtering of the AWS ``ip-ranges.json`` document.

Usage:
    from core.data.ip_ranges import (
        Filter,
        apply_filters,
        load_ip_ranges,
    )

    ranges = load_ip_ranges("~/.aws/ip-ranges.json", "720h")
    dynamodb = apply_filters(
        ranges,
        [Filter("region", ["us-east-1"]), Filter("service", ["DYNAMODB"])],
    )
"""

from .cache import (
    CacheStatus,
    get_cache_status,
    load_ip_ranges,
    refresh_ip_ranges,
)
from .fetch import fetch_ip_ranges
from .filters import Filter, FilterType, apply_filters
from .models import CREATE_DATE_FORMAT, IPPrefix, IPRanges, parse_create_date
from .provider import RangesResult, configure, contains, parse_filters, read_ranges

__all__ = [
    # Data types
    "IPPrefix",
    "IPRanges",
    "CREATE_DATE_FORMAT",
    "parse_create_date",
    # Cache management
    "CacheStatus",
    "get_cache_status",
    "load_ip_ranges",
    "refresh_ip_ranges",
    "fetch_ip_ranges",
    # Filters
    "Filter",
    "FilterType",
    "apply_filters",
    # Provider queries
    "RangesResult",
    "configure",
    "contains",
    "parse_filters",
    "read_ranges",
]
