"""Static resource, survival tip and language tables."""

from app.core.resources.catalog import (
    CatalogError,
    LanguageEntry,
    ResourceCatalog,
    ResourceEntry,
    get_catalog,
)

__all__ = [
    "CatalogError",
    "LanguageEntry",
    "ResourceCatalog",
    "ResourceEntry",
    "get_catalog",
]
