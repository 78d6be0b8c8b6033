"""Exception hierarchy raised by the document engine.

Every error is synchronous and reported to the immediate caller; the engine
never retries. A failed call always leaves the document exactly as it was.

Recovery hints
--------------
- :class:`ValidationError`: fix the input and retry.
- :class:`ConcurrencyError`: re-read the current version and retry
  (classic optimistic-lock loop).
- :class:`RateLimitError`: wait ``min_time_gap`` and retry.
- :class:`SizeLimitError`: trim data or drop fields.
- :class:`VersionNotFoundError`: not retryable; pick a retained version.
"""

from __future__ import annotations


class DocumentError(Exception):
    """Base class for all revdoc errors."""


class SchemaError(DocumentError):
    """The schema passed to the engine is malformed."""


class ValidationError(DocumentError):
    """A schema field is missing, has the wrong kind, or is too long."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field} {reason}")


class ConcurrencyError(DocumentError):
    """The caller's expected version is stale."""

    def __init__(self, current_version: int, expected_version: int) -> None:
        self.current_version = current_version
        self.expected_version = expected_version
        super().__init__(
            f"Concurrency error: current v{current_version}, sent v{expected_version}."
        )


class RateLimitError(DocumentError):
    """An update arrived before the minimum time gap elapsed."""

    def __init__(self, elapsed_ms: float, min_time_gap: int) -> None:
        self.elapsed_ms = elapsed_ms
        self.min_time_gap = min_time_gap
        super().__init__(
            f"Rate limit: {elapsed_ms:g}ms since last update, minimum gap is {min_time_gap}ms."
        )


class SizeLimitError(DocumentError):
    """The prospective document exceeds the character budget."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Size limit error: {size}/{limit} chars.")


class VersionNotFoundError(DocumentError):
    """The requested version was evicted from the archive or never existed."""

    def __init__(self, target_version: int) -> None:
        self.target_version = target_version
        super().__init__(f"Version {target_version} not found.")


__all__ = [
    "ConcurrencyError",
    "DocumentError",
    "RateLimitError",
    "SchemaError",
    "SizeLimitError",
    "ValidationError",
    "VersionNotFoundError",
]
