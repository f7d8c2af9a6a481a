"""
SafePath - Exception Hierarchy

Provides:
    • ProviderError: a single external data source failed (non-fatal,
      contained by the orchestrator)
    • InvalidInputError: caller supplied unusable coordinates (fatal,
      raised before any network call)

Usage:
    from safepath.core.exceptions import ProviderError, ProviderErrorKind

    raise ProviderError("usgs", ProviderErrorKind.TIMEOUT, "no answer in 10s")
"""

from enum import Enum
from typing import Any, Dict, Optional


class ProviderErrorKind(str, Enum):
    """Why a provider call failed."""
    NETWORK = "network"
    TIMEOUT = "timeout"
    BAD_STATUS = "bad_status"
    UNPARSEABLE = "unparseable"


class SafePathError(Exception):
    """Base exception for all engine errors."""

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProviderError(SafePathError):
    """An external provider call failed."""

    def __init__(
        self,
        provider: str,
        kind: ProviderErrorKind,
        message: str = "",
        *,
        status_code: Optional[int] = None,
    ):
        details: Dict[str, Any] = {"provider": provider, "kind": kind.value}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            f"Provider '{provider}' failed ({kind.value}): {message}",
            details=details,
        )
        self.provider = provider
        self.kind = kind
        self.status_code = status_code


class InvalidInputError(SafePathError):
    """Coordinates or radius are non-finite or out of range."""

    def __init__(self, message: str, *, field: Optional[str] = None, **details: Any):
        d = {**details}
        if field:
            d["field"] = field
        super().__init__(message, details=d)
        self.field = field
