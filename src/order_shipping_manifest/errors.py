# src/order_shipping_manifest/errors.py
from __future__ import annotations

from typing import Any, Sequence


class ManifestError(RuntimeError):
    """Base class for errors raised by the export/reconcile core."""


class InvalidInputError(ManifestError, ValueError, TypeError):
    """Raised synchronously for inputs the core refuses to work with
    (non-text phone values, missing tag or selection)."""


class TagUpdateError(ManifestError):
    """A single backend tag update failed (HTTP failure or userErrors)."""

    def __init__(self, message: str, *, record_id: str | None = None, field: Any = None) -> None:
        super().__init__(message)
        self.record_id = record_id
        self.field = field


class TagBatchError(ManifestError):
    """
    One or more calls in a tag batch failed.

    The message is the first failure's message (submission order). Calls that
    succeeded are NOT rolled back; `results` holds every per-record outcome.
    """

    def __init__(self, message: str, *, results: Sequence[Any] = ()) -> None:
        super().__init__(message)
        self.results = list(results)

    @property
    def failed(self) -> list[Any]:
        return [r for r in self.results if not r.ok]


__all__ = [
    "ManifestError",
    "InvalidInputError",
    "TagUpdateError",
    "TagBatchError",
]
