"""
core/data/ip_ranges/filters.py - Filter evaluation

Selects entries of a loaded ip-ranges document:

- values of one filter are OR-ed (match any value)
- different filters are AND-ed (must match every filter)
- comparisons are case-insensitive
- results keep document order

Filter types:
    address               IP address (or CIDR) contained in the entry prefix ("ip" alias)
    region                AWS region, e.g. "us-east-1"
    network-border-group  network border group ("network_border_group" alias)
    service               service name, e.g. "DYNAMODB"

Usage:
    from core.data.ip_ranges.filters import Filter, apply_filters

    matches = apply_filters(
        ranges,
        [Filter("region", ["us-east-1"]), Filter("service", ["DYNAMODB", "S3"])],
    )
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from core.exceptions import FilterValueError, UnknownFilterTypeError

from .models import IPPrefix, IPRanges

logger = logging.getLogger(__name__)

Matcher = Callable[[IPPrefix], bool]


class FilterType(str, Enum):
    """Supported filter types"""

    ADDRESS = "address"
    REGION = "region"
    NETWORK_BORDER_GROUP = "network-border-group"
    SERVICE = "service"

    @classmethod
    def parse(cls, value: str | FilterType) -> FilterType:
        """Resolve a type name (case-insensitive, aliases allowed)

        Raises:
            UnknownFilterTypeError: the name is not a supported type
        """
        if isinstance(value, FilterType):
            return value

        name = value.strip().lower() if isinstance(value, str) else ""
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise UnknownFilterTypeError(str(value), [t.value for t in cls]) from None


_ALIASES = {
    "ip": FilterType.ADDRESS.value,
    "network_border_group": FilterType.NETWORK_BORDER_GROUP.value,
}

# Entry attribute compared by each text filter
_ATTRIBUTES = {
    FilterType.REGION: "region",
    FilterType.NETWORK_BORDER_GROUP: "network_border_group",
    FilterType.SERVICE: "service",
}


@dataclass(frozen=True)
class Filter:
    """One filter criterion: a type and the values to match

    The type is kept as given and validated when the filter is applied.
    """

    type: str | FilterType
    values: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if isinstance(self.values, str):
            object.__setattr__(self, "values", (self.values,))
        else:
            object.__setattr__(self, "values", tuple(self.values))

    @classmethod
    def single(cls, type: str | FilterType, value: str) -> Filter:
        """Single-value filter (same as a one-element value list)"""
        return cls(type, (value,))

    def __str__(self) -> str:
        type_name = self.type.value if isinstance(self.type, FilterType) else self.type
        return f"{type_name}={','.join(self.values)}"


# =============================================================================
# Matchers
# =============================================================================


def _address_matcher(values: Iterable[str]) -> Matcher:
    networks: list[ipaddress.IPv4Network | ipaddress.IPv6Network] = []
    for value in values:
        text = value.strip() if isinstance(value, str) else value
        try:
            networks.append(ipaddress.ip_network(text, strict=False))
        except (TypeError, ValueError) as e:
            raise FilterValueError(FilterType.ADDRESS.value, value, "invalid IP address", cause=e) from e

    def match(entry: IPPrefix) -> bool:
        try:
            prefix = entry.network
        except ValueError:
            logger.debug("Skipping invalid prefix %s", entry.ip_prefix)
            return False
        return any(net.version == prefix.version and net.subnet_of(prefix) for net in networks)

    return match


def _attribute_matcher(attribute: str, values: Iterable[str]) -> Matcher:
    wanted = {value.casefold() for value in values}

    def match(entry: IPPrefix) -> bool:
        return getattr(entry, attribute).casefold() in wanted

    return match


def _build_matcher(flt: Filter) -> Matcher:
    filter_type = FilterType.parse(flt.type)

    if not flt.values:
        raise FilterValueError(filter_type.value, list(flt.values), "at least one value is required")
    for value in flt.values:
        if not isinstance(value, str):
            raise FilterValueError(filter_type.value, value, "value must be a string")

    if filter_type is FilterType.ADDRESS:
        return _address_matcher(flt.values)
    return _attribute_matcher(_ATTRIBUTES[filter_type], flt.values)


# =============================================================================
# Public API
# =============================================================================


def apply_filters(ranges: IPRanges | Iterable[IPPrefix], filters: Sequence[Filter] | None = None) -> list[IPPrefix]:
    """Return the entries matching every filter

    Args:
        ranges: loaded document (or any iterable of entries)
        filters: filter criteria (empty → every entry)

    Returns:
        matching entries in document order (may be empty)

    Raises:
        UnknownFilterTypeError: a filter type is not supported
        FilterValueError: a filter has no values or an invalid value
    """
    matchers = [_build_matcher(f) for f in filters or ()]

    if not matchers:
        return list(ranges)

    return [entry for entry in ranges if all(match(entry) for match in matchers)]
