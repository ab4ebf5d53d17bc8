# core/__init__.py
"""
core - AWS IP ranges infrastructure

Architecture:
    core/
    ├── data/ip_ranges/  # document model, cache, fetch, filters, provider queries
    ├── tools/cache/     # cache path and expiration policy
    ├── config.py        # settings from environment variables
    └── exceptions.py    # exception hierarchy

Usage:
    # Settings
    from core.config import get_settings
    settings = get_settings()

    # Load and query
    from core.data.ip_ranges import configure, read_ranges
    ranges = configure(settings)
    result = read_ranges(ranges, [{"type": "service", "values": ["S3"]}])

    # Error handling
    from core.exceptions import IPRangesError
"""
