"""Exceptions raised at the edges of the screening engine."""

from __future__ import annotations


class ForensicsError(Exception):
    """Base class for configuration problems detected before an analysis run."""


class UnknownColumnError(ForensicsError):
    """Raised when a manual configuration names a column the rows do not have."""

    def __init__(self, role: str, column: str) -> None:
        super().__init__(f"{role} column '{column}' does not exist in the dataset.")
        self.role = role
        self.column = column


class NoAmountColumnError(ForensicsError):
    """Raised when no numeric column is available to act as the amount column."""


__all__ = ["ForensicsError", "NoAmountColumnError", "UnknownColumnError"]
