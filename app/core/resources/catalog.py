"""
Resource Catalog

Read-only lookup tables for local aid resources, survival tips and
per-language emergency messages. Loaded once from JSON files at startup
and shared across requests without locking.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.config import settings

logger = logging.getLogger(__name__)

RESOURCES_FILE = "resources.json"
TIPS_FILE = "survival_tips.json"
LANGUAGES_FILE = "languages.json"

DEFAULT_LANGUAGE = "en"


class CatalogError(Exception):
    """Raised when the static data files are missing or malformed."""
    pass


class ResourceEntry(BaseModel):
    """A place or service that can help."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    text: Optional[str] = None
    hours: Optional[str] = None
    distance: Optional[str] = None
    services: tuple[str, ...] = Field(default_factory=tuple)


class LanguageEntry(BaseModel):
    """Display name and emergency message for one language code."""

    model_config = ConfigDict(frozen=True)

    name: str
    emergency_message: str


class ResourceCatalog:
    """
    Immutable lookup tables.

    Usage:
        catalog = ResourceCatalog.from_directory(Path("app/data"))
        shelters = catalog.lookup_resources("shelters")
        tips = catalog.lookup_tips("warmth")
    """

    def __init__(
        self,
        resources: Mapping[str, tuple[ResourceEntry, ...]],
        tips: Mapping[str, tuple[str, ...]],
        languages: Mapping[str, LanguageEntry],
    ):
        if DEFAULT_LANGUAGE not in languages:
            raise CatalogError(f"Language table must define '{DEFAULT_LANGUAGE}'")

        self._resources = MappingProxyType(dict(resources))
        self._tips = MappingProxyType(dict(tips))
        self._languages = MappingProxyType(dict(languages))
        self._language_names = MappingProxyType(
            {code: entry.name for code, entry in languages.items()}
        )

    @classmethod
    def from_directory(cls, data_dir: Path) -> "ResourceCatalog":
        """
        Load the catalog from a data directory.

        Args:
            data_dir: Directory containing the three JSON tables

        Returns:
            ResourceCatalog

        Raises:
            CatalogError: If a file is missing or does not match the schema
        """
        raw_resources = _read_json(data_dir / RESOURCES_FILE)
        raw_tips = _read_json(data_dir / TIPS_FILE)
        raw_languages = _read_json(data_dir / LANGUAGES_FILE)

        try:
            resources = {
                category: tuple(ResourceEntry.model_validate(item) for item in items)
                for category, items in raw_resources.items()
            }
            tips = {
                category: tuple(str(tip) for tip in items)
                for category, items in raw_tips.items()
            }
            languages = {
                code.lower(): LanguageEntry.model_validate(entry)
                for code, entry in raw_languages.items()
            }
        except (ValidationError, AttributeError, TypeError) as e:
            raise CatalogError(f"Invalid catalog data in {data_dir}: {e}") from e

        catalog = cls(resources=resources, tips=tips, languages=languages)
        logger.info(
            f"ResourceCatalog loaded from {data_dir}: "
            f"resource_categories={len(resources)}, "
            f"tip_categories={len(tips)}, languages={len(languages)}"
        )
        return catalog

    @property
    def resource_categories(self) -> tuple[str, ...]:
        return tuple(self._resources)

    @property
    def tip_categories(self) -> tuple[str, ...]:
        return tuple(self._tips)

    @property
    def language_names(self) -> Mapping[str, str]:
        """Language code -> language name."""
        return self._language_names

    def lookup_resources(self, category: str) -> tuple[ResourceEntry, ...]:
        """Resources for a category, empty for unknown categories."""
        return self._resources.get(category, ())

    def lookup_tips(self, category: str) -> tuple[str, ...]:
        """Survival tips for a category, empty for unknown categories."""
        return self._tips.get(category, ())

    def emergency_message(self, language: str) -> str:
        """Emergency message for a language code, English if unknown."""
        entry = self._languages.get((language or "").strip().lower()) or self._languages[DEFAULT_LANGUAGE]
        return entry.emergency_message


def _read_json(path: Path) -> dict[str, Any]:
    """Read one JSON object from disk."""
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog file is not valid JSON: {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file must contain a JSON object: {path}")
    return data


def get_catalog(data_dir: Optional[Path] = None) -> ResourceCatalog:
    """Get the cached catalog for a data directory (defaults to settings)."""
    return _load_catalog(Path(data_dir or settings.data_dir).resolve())


@lru_cache
def _load_catalog(data_dir: Path) -> ResourceCatalog:
    return ResourceCatalog.from_directory(data_dir)
