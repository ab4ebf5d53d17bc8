"""
tests/conftest.py - pytest common fixtures

Sample ip-ranges documents and cache file helpers.

Usage:
    def test_something(sample_document, cache_file):
        # sample_document: published document as a dict
        # cache_file: cache path inside tmp_path (not created)
        pass
"""

import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

# Project root on sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


CREATE_DATE_FORMAT = "%Y-%m-%d-%H-%M-%S"

# Fixed "now" used by freshness tests
NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def _prefix(ip_prefix: str, region: str, service: str, nbg: str | None = None) -> Dict[str, str]:
    return {
        "ip_prefix": ip_prefix,
        "region": region,
        "service": service,
        "network_border_group": nbg or region,
    }


def _ipv6_prefix(ipv6_prefix: str, region: str, service: str, nbg: str | None = None) -> Dict[str, str]:
    return {
        "ipv6_prefix": ipv6_prefix,
        "region": region,
        "service": service,
        "network_border_group": nbg or region,
    }


SAMPLE_PREFIXES: List[Dict[str, str]] = [
    _prefix("3.5.0.0/19", "us-east-1", "AMAZON"),
    _prefix("3.5.0.0/19", "us-east-1", "S3"),
    _prefix("3.5.12.0/22", "us-east-1", "EC2"),
    _prefix("52.94.0.0/22", "us-east-1", "DYNAMODB"),
    _prefix("52.94.24.0/23", "eu-west-1", "DYNAMODB"),
    _prefix("13.34.0.0/27", "ap-northeast-2", "AMAZON"),
    _prefix("15.230.39.0/24", "us-east-1", "AMAZON", nbg="us-east-1-bos-1"),
]

SAMPLE_IPV6_PREFIXES: List[Dict[str, str]] = [
    _ipv6_prefix("2600:1f18::/33", "us-east-1", "EC2"),
    _ipv6_prefix("2a05:d07a:a000::/40", "eu-west-1", "S3"),
]


def make_document(create_date: str = "2024-03-05-22-13-10", **overrides: Any) -> Dict[str, Any]:
    """Build an ip-ranges document"""
    document: Dict[str, Any] = {
        "syncToken": "1709676790",
        "createDate": create_date,
        "prefixes": [dict(p) for p in SAMPLE_PREFIXES],
        "ipv6_prefixes": [dict(p) for p in SAMPLE_IPV6_PREFIXES],
    }
    document.update(overrides)
    return document


def create_date_for(age: timedelta, now: datetime = NOW) -> str:
    """createDate string for a document of the given age"""
    return (now - age).strftime(CREATE_DATE_FORMAT)


def to_bytes(document: Dict[str, Any]) -> bytes:
    return json.dumps(document).encode("utf-8")


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove AWSIPRANGES_* variables from the test environment"""
    for key in ("CACHEFILE", "EXPIRATION", "URL", "TIMEOUT"):
        monkeypatch.delenv(f"AWSIPRANGES_{key}", raising=False)
    yield


# =============================================================================
# Documents
# =============================================================================


@pytest.fixture
def docs() -> SimpleNamespace:
    """Document helpers: make, to_bytes, create_date_for, now"""
    return SimpleNamespace(make=make_document, to_bytes=to_bytes, create_date_for=create_date_for, now=NOW)


@pytest.fixture
def sample_document() -> Dict[str, Any]:
    """Published document as a dict"""
    return make_document()


@pytest.fixture
def sample_bytes(sample_document) -> bytes:
    """Published document as raw bytes"""
    return to_bytes(sample_document)


@pytest.fixture
def sample_ranges(sample_bytes):
    """Loaded IPRanges"""
    from core.data.ip_ranges.models import IPRanges

    return IPRanges.from_bytes(sample_bytes)


# =============================================================================
# Cache
# =============================================================================


@pytest.fixture
def cache_file(tmp_path) -> Path:
    """Cache file path inside a temporary directory (not created)"""
    return tmp_path / ".aws" / "ip-ranges.json"


@pytest.fixture
def write_cache(cache_file):
    """Write a document (dict or bytes) to the cache file"""

    def _write(document: Any) -> Path:
        cache_file.parent.mkdir(parents=True, exist_ok=True)
        raw = document if isinstance(document, bytes) else to_bytes(document)
        cache_file.write_bytes(raw)
        return cache_file

    return _write


@pytest.fixture
def fetch_fn():
    """Fetch operation returning a fresh document"""
    fresh = make_document(create_date=create_date_for(timedelta(hours=1)), syncToken="fresh")
    return Mock(return_value=to_bytes(fresh))
