"""Typed errors of the HSDS client.

Every failure surfaces as a subclass of `HsdsError`, so callers can catch the
whole family or a single variant. Status-derived errors keep the HTTP status
and the server message.
"""

from __future__ import annotations


class HsdsError(Exception):
    """Base class for every error raised by the client."""


class TransportError(HsdsError):
    """The HTTP request could not be completed (connection, timeout, protocol)."""


class SerializationError(HsdsError):
    """A payload could not be encoded to or decoded from JSON."""


class UrlError(HsdsError):
    """The endpoint URL could not be parsed."""


class InvalidResponseError(HsdsError):
    """The server answered 2xx but the body does not match the expected schema."""


class OperationFailedError(HsdsError):
    """A multi-step operation could not be completed."""


class StatusError(HsdsError):
    """Error derived from a non-2xx HTTP status."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class AuthenticationError(StatusError):
    def __init__(self, message: str, *, status: int | None = 401) -> None:
        super().__init__(message, status=status)

    def __str__(self) -> str:
        return f"Authentication failed: {self.message}"


class PermissionDeniedError(StatusError):
    def __init__(self, message: str, *, status: int | None = 403) -> None:
        super().__init__(message, status=status)

    def __str__(self) -> str:
        return f"Permission denied: {self.message}"


class NotFoundError(StatusError):
    def __init__(self, message: str, *, status: int | None = 404) -> None:
        super().__init__(message, status=status)


class DomainNotFoundError(NotFoundError):
    def __str__(self) -> str:
        return f"Domain not found: {self.message}"


class ObjectNotFoundError(NotFoundError):
    def __str__(self) -> str:
        return f"Object not found: {self.message}"


class InvalidParameterError(StatusError):
    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message, status=status)

    def __str__(self) -> str:
        return f"Invalid parameter: {self.message}"


class ApiError(StatusError):
    """Any other non-2xx answer."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message, status=status)

    def __str__(self) -> str:
        return f"API error: {self.status} - {self.message}"
