from __future__ import annotations


class MiddlewareError(Exception):
    """Base class for failures that abort processing of a single object."""


class ParseError(MiddlewareError):
    """Raised when a config payload or quantity cannot be parsed."""


class CapacityError(MiddlewareError):
    """Raised when a volume override would shrink an existing claim."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"cannot shrink volume override size from {current} to {requested}")
        self.current = current
        self.requested = requested


class DerivationError(MiddlewareError):
    """Raised when the managed field groups cannot be derived from the intent."""


__all__ = ["CapacityError", "DerivationError", "MiddlewareError", "ParseError"]
