"""Core package initializer for revdoc.

Submodules:
    revdoc.core.settings   -> settings, load_settings, Settings, get_logger
    revdoc.core.errors     -> exception hierarchy
    revdoc.core.contracts  -> schema and archive models
    revdoc.core.document   -> VersionedDocument and its helpers
"""

from __future__ import annotations

__all__ = ["__doc__"]
