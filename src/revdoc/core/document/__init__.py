"""Document engine: validation, history and the update transaction."""

from __future__ import annotations

from .clock import Clock, ManualClock, SystemClock
from .engine import DocumentState, VersionedDocument

__all__ = ["Clock", "DocumentState", "ManualClock", "SystemClock", "VersionedDocument"]
