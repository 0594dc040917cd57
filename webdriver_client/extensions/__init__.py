"""Vendor command catalogs layered on WebDriverSession.execute."""

from __future__ import annotations

from .base import ExtensionCatalog

__all__ = ["ExtensionCatalog"]
