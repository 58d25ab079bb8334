"""Custom exceptions for logship."""

from __future__ import annotations

from typing import Any


class LogshipError(Exception):
    """Base exception for all logship errors."""

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        return self.message


class ConfigurationError(LogshipError):
    """Raised when the integration is wired or configured incorrectly."""

    pass


class UnregisteredFieldError(ConfigurationError):
    """Raised when a field map names a resolver that was never registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        super().__init__(
            f"Field resolver '{name}' is not registered.",
            detail={"available": self.available},
        )


class UnknownEventFamilyError(ConfigurationError):
    """Raised when a version strategy is requested for an unknown event family."""

    def __init__(self, family: Any) -> None:
        self.family = family
        super().__init__(f"No version strategy for event family '{family}'.")


class TransportError(LogshipError):
    """Raised when a transport is misconfigured."""

    pass
