"""
tests/core/data/ip_ranges/test_ip_ranges_models.py - IP Ranges Model Tests

Tests for document deserialization and createDate parsing.
"""

import ipaddress
import json
from datetime import datetime, timezone

import pytest

from core.data.ip_ranges.models import IPPrefix, IPRanges, parse_create_date
from core.exceptions import MalformedDataError


class TestParseCreateDate:
    """Tests for createDate parsing"""

    def test_valid(self) -> None:
        """Published layout parses as UTC"""
        assert parse_create_date("2024-03-05-22-13-10") == datetime(2024, 3, 5, 22, 13, 10, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value",
        [
            "2024-3-5-22-13-10",  # not zero padded
            "2024-03-05T22:13:10",
            "2024-03-05 22:13:10",
            "24-03-05-22-13-10",
            "2024-13-05-22-13-10",  # month out of range
            "2024-03-05-22-13-10Z",
            "",
            "yesterday",
            "\uff12\uff10\uff12\uff14-03-05-22-13-10",  # fullwidth digits
        ],
    )
    def test_invalid(self, value: str) -> None:
        """Anything else is rejected"""
        with pytest.raises(ValueError):
            parse_create_date(value)


class TestIPRangesFromBytes:
    """Tests for IPRanges.from_bytes"""

    def test_loads_document(self, sample_bytes: bytes) -> None:
        """Valid document"""
        ranges = IPRanges.from_bytes(sample_bytes)

        assert ranges.sync_token == "1709676790"
        assert ranges.create_date == "2024-03-05-22-13-10"
        assert len(ranges) == 9
        assert ranges.created_at == datetime(2024, 3, 5, 22, 13, 10, tzinfo=timezone.utc)

    def test_ipv4_then_ipv6_in_document_order(self, sample_bytes: bytes) -> None:
        """IPv4 entries come first, then IPv6, each in document order"""
        ranges = IPRanges.from_bytes(sample_bytes)
        prefixes = [p.ip_prefix for p in ranges]

        assert prefixes[:3] == ["3.5.0.0/19", "3.5.0.0/19", "3.5.12.0/22"]
        assert prefixes[-2:] == ["2600:1f18::/33", "2a05:d07a:a000::/40"]

    def test_entry_attributes(self, sample_ranges: IPRanges) -> None:
        """Entry attributes are copied from the document"""
        entry = sample_ranges.prefixes[6]

        assert entry == IPPrefix(
            ip_prefix="15.230.39.0/24",
            region="us-east-1",
            network_border_group="us-east-1-bos-1",
            service="AMAZON",
        )

    def test_ipv6_prefixes_optional(self, docs) -> None:
        """Documents without ipv6_prefixes load"""
        document = docs.make()
        del document["ipv6_prefixes"]

        assert len(IPRanges.from_bytes(docs.to_bytes(document))) == 7

    def test_create_date_not_validated_on_load(self, docs) -> None:
        """createDate is parsed lazily"""
        ranges = IPRanges.from_bytes(docs.to_bytes(docs.make(create_date="yesterday")))

        assert ranges.create_date == "yesterday"
        with pytest.raises(ValueError):
            ranges.created_at

    def test_accepts_str(self, sample_document) -> None:
        """JSON text is accepted too"""
        assert len(IPRanges.from_bytes(json.dumps(sample_document))) == 9

    @pytest.mark.parametrize(
        "raw",
        [
            b"",
            b"not json",
            b"\xff\xfe",
            b"[]",
            b'{"prefixes": []}',
            b'{"createDate": 20240305}',
            b'{"createDate": "2024-03-05-22-13-10"}',
            b'{"createDate": "2024-03-05-22-13-10", "prefixes": {}}',
            b'{"createDate": "2024-03-05-22-13-10", "prefixes": ["3.5.0.0/19"]}',
            b'{"createDate": "2024-03-05-22-13-10", "prefixes": [{"ip_prefix": "3.5.0.0/19"}]}',
        ],
    )
    def test_malformed(self, raw: bytes) -> None:
        """Malformed documents raise MalformedDataError"""
        with pytest.raises(MalformedDataError):
            IPRanges.from_bytes(raw, source="test")

    def test_malformed_message_names_source(self) -> None:
        """Error message names the source"""
        with pytest.raises(MalformedDataError) as exc_info:
            IPRanges.from_bytes(b"not json", source="fetch")

        assert str(exc_info.value).startswith("parse ip ranges [fetch]: invalid JSON")

    def test_ipv6_entry_requires_ipv6_prefix_key(self, docs) -> None:
        """ipv6_prefixes entries use the ipv6_prefix key"""
        entry = {"ip_prefix": "2600:1f18::/33", "region": "x", "service": "y", "network_border_group": "x"}
        document = docs.make(ipv6_prefixes=[entry])

        with pytest.raises(MalformedDataError) as exc_info:
            IPRanges.from_bytes(docs.to_bytes(document))

        assert "ipv6_prefixes[0] missing ipv6_prefix" in str(exc_info.value)


class TestIPPrefix:
    """Tests for IPPrefix"""

    def test_network(self) -> None:
        """Parsed network"""
        entry = IPPrefix("3.5.0.0/19", "us-east-1", "us-east-1", "S3")

        assert entry.network == ipaddress.ip_network("3.5.0.0/19")

    def test_invalid_network(self) -> None:
        """Invalid prefix raises ValueError on access"""
        entry = IPPrefix("not-a-prefix", "us-east-1", "us-east-1", "S3")

        with pytest.raises(ValueError):
            entry.network

    def test_to_dict(self) -> None:
        """Dict with the four attributes"""
        entry = IPPrefix("3.5.0.0/19", "us-east-1", "us-east-1", "S3")

        assert entry.to_dict() == {
            "ip_prefix": "3.5.0.0/19",
            "region": "us-east-1",
            "network_border_group": "us-east-1",
            "service": "S3",
        }

    def test_immutable(self) -> None:
        """Entries are frozen"""
        entry = IPPrefix("3.5.0.0/19", "us-east-1", "us-east-1", "S3")

        with pytest.raises(AttributeError):
            entry.region = "eu-west-1"  # type: ignore[misc]
