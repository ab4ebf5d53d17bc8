"""
core/config.py - Central settings

Settings are read from environment variables; CLI options override them.

Environment variables:
    AWSIPRANGES_CACHEFILE   cache file path (default: ~/.aws/ip-ranges.json)
    AWSIPRANGES_EXPIRATION  cache expiration, e.g. "720h" (default: "" = never expire)
    AWSIPRANGES_URL         ip-ranges document URL
    AWSIPRANGES_TIMEOUT     fetch timeout in seconds (default: 15)

Usage:
    from core.config import get_settings

    settings = get_settings()
    ranges = load_ip_ranges(settings.cachefile, settings.expiration)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from core.exceptions import ConfigError
from core.tools.cache.path import get_cache_path

ENV_PREFIX = "AWSIPRANGES_"

AWS_IP_RANGES_URL = "https://ip-ranges.amazonaws.com/ip-ranges.json"
DEFAULT_TIMEOUT = 15.0

_VERSION_FILE = Path(__file__).resolve().parent.parent / "version.txt"
_DEFAULT_VERSION = "0.0.0"


@dataclass(frozen=True)
class Settings:
    """Provider settings

    Attributes:
        cachefile: cache file path
        expiration: expiration duration string ("" = never expire)
        url: ip-ranges document URL
        timeout: fetch timeout in seconds
    """

    cachefile: str
    expiration: str = ""
    url: str = AWS_IP_RANGES_URL
    timeout: float = DEFAULT_TIMEOUT

    def with_overrides(self, **overrides) -> Settings:
        """Return a copy with the non-None overrides applied"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def get_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables

    Raises:
        ConfigError: a variable has an invalid value
    """
    env = os.environ if environ is None else environ

    timeout_raw = env.get(f"{ENV_PREFIX}TIMEOUT")
    timeout = DEFAULT_TIMEOUT
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError as e:
            raise ConfigError(f"invalid timeout {timeout_raw!r}", config_key="timeout", cause=e) from e
        if timeout <= 0:
            raise ConfigError(f"timeout must be positive: {timeout_raw!r}", config_key="timeout")

    return Settings(
        cachefile=env.get(f"{ENV_PREFIX}CACHEFILE") or get_cache_path(),
        expiration=env.get(f"{ENV_PREFIX}EXPIRATION", ""),
        url=env.get(f"{ENV_PREFIX}URL") or AWS_IP_RANGES_URL,
        timeout=timeout,
    )


def get_version() -> str:
    """Read the version from version.txt"""
    try:
        version = _VERSION_FILE.read_text(encoding="utf-8").strip()
    except OSError:
        return _DEFAULT_VERSION
    return version or _DEFAULT_VERSION
