"""
core/data/ip_ranges/models.py - AWS IP Ranges data model

Immutable representation of the published ``ip-ranges.json`` document:

    {
      "syncToken": "1709676790",
      "createDate": "2024-03-05-22-13-10",
      "prefixes": [{"ip_prefix": ..., "region": ..., "service": ..., "network_border_group": ...}],
      "ipv6_prefixes": [{"ipv6_prefix": ..., "region": ..., "service": ..., "network_border_group": ...}]
    }
"""

from __future__ import annotations

import ipaddress
import json
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from functools import cached_property
from typing import Any

from core.exceptions import MalformedDataError

# createDate layout as published by AWS (UTC, zero padded)
CREATE_DATE_FORMAT = "%Y-%m-%d-%H-%M-%S"
_CREATE_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}-[0-9]{2}-[0-9]{2}-[0-9]{2}")

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network

_ENTRY_FIELDS = ("region", "network_border_group", "service")


def parse_create_date(value: str) -> datetime:
    """Parse a createDate string (``YYYY-MM-DD-hh-mm-ss``) as UTC

    Raises:
        ValueError: value does not match the fixed layout exactly
    """
    if not isinstance(value, str) or not _CREATE_DATE_PATTERN.fullmatch(value):
        raise ValueError(f"createDate {value!r} does not match {CREATE_DATE_FORMAT}")
    return datetime.strptime(value, CREATE_DATE_FORMAT).replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class IPPrefix:
    """One published address range"""

    ip_prefix: str
    region: str
    network_border_group: str
    service: str

    @cached_property
    def network(self) -> IPNetwork:
        """Parsed network (raises ValueError for an invalid prefix)"""
        return ipaddress.ip_network(self.ip_prefix, strict=False)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class IPRanges:
    """A loaded ip-ranges snapshot

    Attributes:
        sync_token: publication sync token
        create_date: raw createDate string (parsed lazily, see ``created_at``)
        prefixes: IPv4 entries followed by IPv6 entries, in document order
    """

    sync_token: str
    create_date: str
    prefixes: tuple[IPPrefix, ...]

    @property
    def created_at(self) -> datetime:
        """Creation time in UTC

        Raises:
            ValueError: createDate does not match the fixed layout
        """
        return parse_create_date(self.create_date)

    def __len__(self) -> int:
        return len(self.prefixes)

    def __iter__(self):
        return iter(self.prefixes)

    @classmethod
    def from_bytes(cls, raw: bytes | str, source: str = "") -> IPRanges:
        """Deserialize a published document

        Args:
            raw: document bytes
            source: where the bytes came from (used in error messages)

        Raises:
            MalformedDataError: not JSON, or required fields are missing
        """
        try:
            data = json.loads(raw)
        except (UnicodeDecodeError, ValueError) as e:
            raise MalformedDataError("invalid JSON", source, cause=e) from e

        return cls.from_dict(data, source)

    @classmethod
    def from_dict(cls, data: Any, source: str = "") -> IPRanges:
        """Build from an already decoded document"""
        if not isinstance(data, dict):
            raise MalformedDataError("document is not an object", source)

        create_date = data.get("createDate")
        if not isinstance(create_date, str):
            raise MalformedDataError("missing createDate", source)

        sync_token = data.get("syncToken", "")
        if not isinstance(sync_token, str):
            sync_token = str(sync_token)

        prefixes = _parse_entries(data.get("prefixes"), "prefixes", "ip_prefix", source, required=True)
        ipv6_prefixes = _parse_entries(data.get("ipv6_prefixes"), "ipv6_prefixes", "ipv6_prefix", source)

        return cls(
            sync_token=sync_token,
            create_date=create_date,
            prefixes=tuple(prefixes + ipv6_prefixes),
        )


def _parse_entries(
    items: Any,
    section: str,
    prefix_key: str,
    source: str,
    required: bool = False,
) -> list[IPPrefix]:
    if items is None:
        if required:
            raise MalformedDataError(f"missing {section}", source)
        return []
    if not isinstance(items, list):
        raise MalformedDataError(f"{section} is not a list", source)

    entries: list[IPPrefix] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise MalformedDataError(f"{section}[{index}] is not an object", source)

        values = {}
        for key in (prefix_key, *_ENTRY_FIELDS):
            value = item.get(key)
            if not isinstance(value, str):
                raise MalformedDataError(f"{section}[{index}] missing {key}", source)
            values[key] = value

        entries.append(
            IPPrefix(
                ip_prefix=values[prefix_key],
                region=values["region"],
                network_border_group=values["network_border_group"],
                service=values["service"],
            )
        )

    return entries
