"""Cache expiration (Time To Live) management.

The expiration policy is given as a duration string in the format used by
the Terraform provider configuration (``"720h"``, ``"1h30m"``, ``"90s"``).
An empty string means the cached document never expires.

Freshness is measured against the ``createDate`` embedded in the cached
document, not against the file mtime, so copying a cache file around does
not make it look newer than it is.

Attributes:
    DURATION_UNITS: unit suffix -> seconds.

Example:
    ::

        from core.tools.cache.ttl import ExpirationPolicy

        policy = ExpirationPolicy.parse("720h")
        if policy.is_fresh(ranges.created_at):
            return ranges
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from core.exceptions import ExpirationError

# Unit suffix -> seconds
DURATION_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

# "ms" must be tried before "m"
_DURATION_PART = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration string into a timedelta

    A duration is an optionally signed sequence of decimal numbers, each with
    an optional fraction and a unit suffix, e.g. "300ms", "-1.5h" or "2h45m".
    A bare "0" is also accepted.

    Args:
        value: duration string

    Returns:
        parsed duration

    Raises:
        ExpirationError: value is not a valid duration
    """
    text = value
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ExpirationError(value)

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            raise ExpirationError(value)
        number, unit = match.groups()
        total += float(number) * DURATION_UNITS[unit]
        pos = match.end()

    if pos != len(text):
        raise ExpirationError(value)

    try:
        return timedelta(seconds=sign * total)
    except OverflowError as e:
        raise ExpirationError(value, cause=e) from e


@dataclass(frozen=True)
class ExpirationPolicy:
    """How long a cached document stays fresh

    Attributes:
        duration: maximum document age, or None for "never expire"
    """

    duration: timedelta | None = None

    @classmethod
    def parse(cls, value: str | None) -> ExpirationPolicy:
        """Build a policy from a duration string ("" or None → never expire)

        Raises:
            ExpirationError: value is not a valid duration
        """
        if value is None or not value.strip():
            return cls(None)
        return cls(parse_duration(value.strip()))

    @property
    def never_expires(self) -> bool:
        return self.duration is None

    def is_fresh(self, created_at: datetime, now: datetime | None = None) -> bool:
        """Return True when ``now - created_at`` is below the duration

        Naive datetimes are treated as UTC.
        """
        if self.duration is None:
            return True

        if now is None:
            now = datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return now - created_at < self.duration

    def __str__(self) -> str:
        if self.duration is None:
            return "never"
        return str(self.duration)


# Sentinel policy
NEVER_EXPIRE = ExpirationPolicy(None)
