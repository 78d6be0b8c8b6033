"""revdoc: an in-memory versioned document.

Schema validation, optimistic concurrency, rate-limited updates, a size
budget and a bounded change history that can rebuild recent versions.

>>> from revdoc import VersionedDocument
>>> schema = {"minTimeGap": 0, "fields": {"title": {"type": "string", "required": True}}}
>>> doc = VersionedDocument({"title": "Start"}, schema)
>>> _ = doc.update({"title": "Next"}, expected_version=1)
>>> doc.get_snapshot(1)
{'title': 'Start'}
"""

from __future__ import annotations

from .core.contracts import ArchiveEntry, DocumentSchema, FieldDiff
from .core.document import ManualClock, SystemClock, VersionedDocument
from .core.errors import (
    ConcurrencyError,
    DocumentError,
    RateLimitError,
    SchemaError,
    SizeLimitError,
    ValidationError,
    VersionNotFoundError,
)

__all__ = [
    "ArchiveEntry",
    "ConcurrencyError",
    "DocumentError",
    "DocumentSchema",
    "FieldDiff",
    "ManualClock",
    "RateLimitError",
    "SchemaError",
    "SizeLimitError",
    "SystemClock",
    "ValidationError",
    "VersionNotFoundError",
    "VersionedDocument",
    "__version__",
]
__version__ = "0.1.0"
