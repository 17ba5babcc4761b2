"""Server route handlers."""

from __future__ import annotations

from .lookup_routes import LookupRoutes

__all__ = ["LookupRoutes"]
