"""Tests for language selection and override loading."""

from pathlib import Path

from nendocatalog.services.localization import load_language_overrides, normalize_language


class TestNormalizeLanguage:
    def test_supported_code(self) -> None:
        assert normalize_language("ja") == "ja"
        assert normalize_language("zh_TW") == "zh_TW"

    def test_browser_tags(self) -> None:
        assert normalize_language("ja-JP") == "ja"
        assert normalize_language("zh-TW") == "zh_TW"
        assert normalize_language("en-US") == "en"

    def test_unsupported_falls_back_to_english(self) -> None:
        assert normalize_language("fr") == "en"
        assert normalize_language(None) == "en"
        assert normalize_language("") == "en"


class TestLoadLanguageOverrides:
    def test_loads_overrides(self, data_dir: Path) -> None:
        overrides = load_language_overrides("ja", data_dir)

        assert overrides["1200"]["name"] == "レム"

    def test_drops_non_object_entries(self, data_dir: Path) -> None:
        overrides = load_language_overrides("ja", data_dir)

        assert "1580" not in overrides

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_language_overrides("zh", tmp_path) == {}

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "inventory-zh.json").write_text("{not json", encoding="utf-8")

        assert load_language_overrides("zh", tmp_path) == {}

    def test_not_an_object(self, tmp_path: Path) -> None:
        (tmp_path / "inventory-zh.json").write_text("[1, 2]", encoding="utf-8")

        assert load_language_overrides("zh", tmp_path) == {}
