"""Custom exceptions for the cart client."""
from __future__ import annotations

from typing import Any


class CartfoxException(Exception):
    """Base exception for all cart client errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class InvalidInputException(CartfoxException):
    """Caller passed something the cart cannot act on."""

    pass


class ConfigurationException(CartfoxException):
    """Configuration errors."""

    pass


class TransportFailure(CartfoxException):
    """Remote call failed: network error or non-2xx status."""

    def __init__(self, message: str, status: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


class HttpError(TransportFailure):
    """Cart endpoint answered with an error status."""

    def __init__(self, status: int, payload: Any = None, path: str | None = None) -> None:
        where = f" for {path}" if path else ""
        super().__init__(f"HTTP {status}{where}", status=status, payload=payload)
        self.path = path


class ResourceRejected(HttpError):
    """Cart refused the mutation (HTTP 422, e.g. not enough stock)."""

    STATUS = 422

    def __init__(self, payload: Any = None, path: str | None = None) -> None:
        super().__init__(self.STATUS, payload=payload, path=path)

    @property
    def description(self) -> str:
        """Human-readable reason sent by the cart, if any."""
        if isinstance(self.payload, dict):
            return str(self.payload.get("description") or self.payload.get("message") or "")
        if isinstance(self.payload, str):
            return self.payload
        return ""
