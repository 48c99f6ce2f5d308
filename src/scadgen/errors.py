"""Exception types raised by scadgen."""

from __future__ import annotations


class ScadgenError(Exception):
    """Base class for all scadgen errors."""


class ValidationError(ScadgenError, ValueError):
    """Raised when a shape, profile or node is constructed with bad parameters.

    Attributes:
        field: Name of the offending parameter
        shape: Name of the shape, operation or generator being built
    """

    def __init__(self, message: str, field: str | None = None, shape: str | None = None) -> None:
        self.message = message
        self.field = field
        self.shape = shape
        super().__init__(self._format())

    def _format(self) -> str:
        location = ".".join(part for part in (self.shape, self.field) if part)
        if location:
            return f"{location}: {self.message}"
        return self.message


class DegenerateGeometry(ScadgenError, ArithmeticError):
    """Raised for zero-length normalization and singular matrix inversion."""
