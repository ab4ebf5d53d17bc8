"""
core/tools/cache - Cache path and expiration helpers

Structure:
    ~/.aws/
    └── ip-ranges.json   ← cached AWS ip-ranges document

Usage:
    from core.tools.cache import get_cache_path, ExpirationPolicy

    cache_path = get_cache_path()
    # → /home/user/.aws/ip-ranges.json

    policy = ExpirationPolicy.parse("720h")
    policy.is_fresh(created_at)
"""

__all__ = [
    "get_cache_dir",
    "get_cache_path",
    "CACHE_ROOT",
    "DEFAULT_CACHE_FILENAME",
    "ExpirationPolicy",
    "parse_duration",
]


def __getattr__(name: str):
    """Lazy import - load submodules on first use"""
    if name in ("get_cache_dir", "get_cache_path", "CACHE_ROOT", "DEFAULT_CACHE_FILENAME"):
        from . import path

        return getattr(path, name)

    if name in ("ExpirationPolicy", "parse_duration"):
        from . import ttl

        return getattr(ttl, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
