"""Application exception classes."""

from __future__ import annotations

from typing import Literal

FetchErrorKind = Literal["unreachable", "upstream_status", "invalid_shape"]


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class FetchError(Exception):
    """Raised when the forecast provider cannot produce a usable payload."""

    kind: FetchErrorKind = "unreachable"

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class UnreachableError(FetchError):
    """Raised on connection failures and request timeouts."""

    kind: FetchErrorKind = "unreachable"


class UpstreamStatusError(FetchError):
    """Raised when the provider answers with a non-2xx status."""

    kind: FetchErrorKind = "upstream_status"

    def __init__(self, message: str, *, status_code: int, url: str | None = None) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code


class InvalidShapeError(FetchError):
    """Raised when the provider payload is not the expected forecast document."""

    kind: FetchErrorKind = "invalid_shape"
