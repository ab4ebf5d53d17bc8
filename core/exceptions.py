"""
core/exceptions.py - Exception hierarchy

Exception classes shared across the ip-ranges cache and query layers.
Every error carries a human readable message naming the failing stage
(read, parse, fetch, filter) plus optional cause and details.

Hierarchy:
    IPRangesError (base)
    ├── CacheTimestampError (cached createDate cannot be parsed)
    ├── CacheWriteError (cache persistence failed, logged only)
    ├── FetchError (authoritative source unreachable)
    ├── MalformedDataError (document cannot be deserialized)
    ├── FilterError (query evaluation)
    │   ├── UnknownFilterTypeError
    │   └── FilterValueError
    └── ConfigError (settings)
        └── ExpirationError

Usage:
    from core.exceptions import FetchError, IPRangesError

    try:
        ranges = load_ip_ranges(cache_path, "720h")
    except IPRangesError as e:
        print(e.to_dict())
"""

from typing import Any, Dict, List, Optional

# =============================================================================
# Base exception
# =============================================================================


class IPRangesError(Exception):
    """Base class for every error raised by this project

    Attributes:
        message: error message
        cause: originating exception (for chaining)
        details: extra context
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Return the error as a dictionary"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# Cache
# =============================================================================


class CacheTimestampError(IPRangesError):
    """The cached document has a createDate that does not match the fixed format"""

    def __init__(
        self,
        path: str,
        value: Any,
        cause: Optional[Exception] = None,
    ):
        message = f"read cache [{path}]: invalid createDate {value!r}"
        super().__init__(message, cause)
        self.path = path
        self.value = value
        self.details.update({"path": path, "value": value})


class CacheWriteError(IPRangesError):
    """Writing the cache file failed

    Never raised out of a load; the cache is an optimization only.
    """

    def __init__(self, path: str, cause: Optional[Exception] = None):
        super().__init__(f"write cache [{path}]", cause)
        self.path = path
        self.details["path"] = path


# =============================================================================
# Source
# =============================================================================


class FetchError(IPRangesError):
    """The authoritative ip-ranges document could not be fetched"""

    def __init__(self, source: str, cause: Optional[Exception] = None):
        super().__init__(f"fetch ip ranges [{source}]", cause)
        self.source = source
        self.details["source"] = source


class MalformedDataError(IPRangesError):
    """The ip-ranges document could not be deserialized"""

    def __init__(
        self,
        reason: str,
        source: str = "",
        cause: Optional[Exception] = None,
    ):
        message = f"parse ip ranges [{source}]: {reason}" if source else f"parse ip ranges: {reason}"
        super().__init__(message, cause)
        self.reason = reason
        self.source = source
        if source:
            self.details["source"] = source


# =============================================================================
# Filters
# =============================================================================


class FilterError(IPRangesError):
    """Query evaluation error"""

    def __init__(
        self,
        filter_type: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"filter [{filter_type}]: {message}"
        super().__init__(full_message, cause)
        self.filter_type = filter_type
        self.details["filter_type"] = filter_type


class UnknownFilterTypeError(FilterError):
    """The filter type is not one of the supported types"""

    def __init__(self, filter_type: str, valid_types: List[str]):
        message = f"unknown filter type, valid types are: {', '.join(valid_types)}"
        super().__init__(filter_type, message)
        self.valid_types = valid_types
        self.details["valid_types"] = valid_types


class FilterValueError(FilterError):
    """A filter value cannot be used for matching"""

    def __init__(
        self,
        filter_type: str,
        value: Any,
        reason: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(filter_type, f"{reason} ({value!r})", cause)
        self.value = value
        self.details["value"] = value


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(IPRangesError):
    """Invalid configuration value"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class ExpirationError(ConfigError):
    """The expiration duration string cannot be parsed"""

    def __init__(self, value: str, cause: Optional[Exception] = None):
        super().__init__(f"invalid expiration duration {value!r}", config_key="expiration", cause=cause)
        self.value = value
