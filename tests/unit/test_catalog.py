"""Tests for the resource catalog."""

import json

import pytest

from app.core.resources.catalog import (
    CatalogError,
    LanguageEntry,
    ResourceCatalog,
    ResourceEntry,
    get_catalog,
)


class TestDefaultCatalog:
    """Test the bundled data files."""

    @pytest.fixture
    def catalog(self):
        return get_catalog()

    def test_resource_categories(self, catalog):
        assert set(catalog.resource_categories) == {
            "shelters",
            "mental_health",
            "food",
            "medical",
            "tech",
            "warmth",
        }

    def test_lookup_shelters(self, catalog):
        shelters = catalog.lookup_resources("shelters")

        assert shelters
        assert shelters[0].name == "The Bowery Mission"
        assert "Shelter" in shelters[0].services

    def test_every_resource_category_has_entries(self, catalog):
        for category in catalog.resource_categories:
            assert catalog.lookup_resources(category), category

    def test_unknown_resource_category(self, catalog):
        assert catalog.lookup_resources("unknown_type") == ()

    def test_lookup_tips(self, catalog):
        tips = catalog.lookup_tips("warmth")
        assert tips
        assert all(isinstance(tip, str) for tip in tips)

    def test_unknown_tip_category(self, catalog):
        assert catalog.lookup_tips("unknown_category") == ()

    def test_language_names(self, catalog):
        assert catalog.language_names["es"] == "Spanish"
        assert catalog.language_names["zh"] == "Mandarin Chinese"
        assert catalog.language_names["ar"] == "Arabic"
        assert catalog.language_names["ru"] == "Russian"
        assert catalog.language_names["en"] == "English"

    def test_emergency_message_per_language(self, catalog):
        messages = {code: catalog.emergency_message(code) for code in catalog.language_names}

        assert len(set(messages.values())) == len(messages)
        assert all("988" in text for text in messages.values())

    def test_emergency_message_fallback(self, catalog):
        assert catalog.emergency_message("xx") == catalog.emergency_message("en")

    def test_emergency_message_case_insensitive(self, catalog):
        assert catalog.emergency_message("ES") == catalog.emergency_message("es")

    def test_tables_are_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.language_names["fr"] = "French"

    def test_entries_are_frozen(self, catalog):
        entry = catalog.lookup_resources("shelters")[0]
        with pytest.raises(Exception):
            entry.name = "Somewhere else"

    def test_cached(self):
        assert get_catalog() is get_catalog()


class TestCatalogLoading:
    """Test loading from a data directory."""

    def _write(self, path, resources=None, tips=None, languages=None):
        (path / "resources.json").write_text(
            json.dumps(resources if resources is not None else {"food": [{"name": "Kitchen"}]}),
            encoding="utf-8",
        )
        (path / "survival_tips.json").write_text(
            json.dumps(tips if tips is not None else {"food": ["Eat"]}),
            encoding="utf-8",
        )
        (path / "languages.json").write_text(
            json.dumps(
                languages
                if languages is not None
                else {"en": {"name": "English", "emergency_message": "Call 988"}}
            ),
            encoding="utf-8",
        )

    def test_from_directory(self, tmp_path):
        self._write(tmp_path)

        catalog = ResourceCatalog.from_directory(tmp_path)

        assert catalog.lookup_resources("food") == (ResourceEntry(name="Kitchen"),)
        assert catalog.lookup_tips("food") == ("Eat",)
        assert catalog.emergency_message("es") == "Call 988"

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            ResourceCatalog.from_directory(tmp_path)

    def test_invalid_json(self, tmp_path):
        self._write(tmp_path)
        (tmp_path / "resources.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogError, match="not valid JSON"):
            ResourceCatalog.from_directory(tmp_path)

    def test_invalid_entry(self, tmp_path):
        self._write(tmp_path, resources={"food": [{"phone": "311"}]})

        with pytest.raises(CatalogError, match="Invalid catalog data"):
            ResourceCatalog.from_directory(tmp_path)

    def test_english_required(self, tmp_path):
        self._write(tmp_path, languages={"es": {"name": "Spanish", "emergency_message": "Llama"}})

        with pytest.raises(CatalogError, match="'en'"):
            ResourceCatalog.from_directory(tmp_path)

    def test_direct_construction(self):
        catalog = ResourceCatalog(
            resources={},
            tips={},
            languages={"en": LanguageEntry(name="English", emergency_message="Call 988")},
        )
        assert catalog.lookup_resources("shelters") == ()
        assert catalog.lookup_tips("warmth") == ()
