"""Tests for domain models."""

from nendocatalog.config import DEFAULT_BOX_COLOR
from nendocatalog.models.app_state import AppState
from nendocatalog.models.criteria import DisplayMode, FilterCriteria, parse_bound
from nendocatalog.models.failure import (
    CatalogIntegrityError,
    ExportEncodingError,
    ExportInProgressError,
    FailureKind,
    NothingToExportError,
)
from nendocatalog.models.localization import localize, translated_fandom
from nendocatalog.models.record import Record


class TestRecord:
    def test_from_dict_maps_camel_case(self, raw_catalog) -> None:
        record = Record.from_dict(raw_catalog[0])

        assert record.id == "1580"
        assert record.linked_id == "1580DX"
        assert record.is_dx is False
        assert record.hair_color == ("Teal",)
        assert record.parts == ("Leek", "Microphone")
        assert record.box_color == "#39c5bb"
        assert record.official_photo == "photos/1580.png"

    def test_defaults_for_missing_fields(self) -> None:
        record = Record.from_dict({"id": 42})

        assert record.id == "42"
        assert record.linked_id is None
        assert record.box_color == DEFAULT_BOX_COLOR
        assert record.parts == ()

    def test_to_dict_uses_catalog_keys(self, raw_catalog) -> None:
        data = Record.from_dict(raw_catalog[1]).to_dict()

        assert data["isDX"] is True
        assert data["linkedId"] == "1580"
        assert data["boxColor"] == "#2a9d8f"


class TestParseBound:
    def test_integer(self) -> None:
        assert parse_bound(5) == 5

    def test_leading_integer_of_string(self) -> None:
        assert parse_bound("12abc") == 12
        assert parse_bound(" 7") == 7

    def test_unparseable_is_unset(self) -> None:
        assert parse_bound("abc") is None
        assert parse_bound("") is None
        assert parse_bound(None) is None

    def test_bool_is_unset(self) -> None:
        assert parse_bound(True) is None


class TestFilterCriteria:
    def test_default_is_inactive(self) -> None:
        assert not FilterCriteria().is_active()

    def test_whitespace_search_is_inactive(self) -> None:
        assert not FilterCriteria.build(search="   ").is_active()

    def test_build_coerces_input(self) -> None:
        criteria = FilterCriteria.build(
            search=None, hair_colors=["Pink", "Pink"], id_min="1500", id_max="oops"
        )

        assert criteria.search == ""
        assert criteria.hair_colors == frozenset({"Pink"})
        assert criteria.id_min == 1500
        assert criteria.id_max is None
        assert criteria.is_active()

    def test_id_range_alone_is_active(self) -> None:
        assert FilterCriteria(id_max=10).is_active()


class TestDisplayMode:
    def test_parse_linked(self) -> None:
        assert DisplayMode.parse("linked") is DisplayMode.LINKED

    def test_parse_legacy_variant(self) -> None:
        assert DisplayMode.parse("variant") is DisplayMode.LINKED

    def test_parse_unknown_is_separate(self) -> None:
        assert DisplayMode.parse("bogus") is DisplayMode.SEPARATE
        assert DisplayMode.parse(None) is DisplayMode.SEPARATE


class TestAppState:
    def test_language_change_keeps_filters(self) -> None:
        state = AppState().with_criteria(FilterCriteria(fandom="Re:Zero"))

        changed = state.with_language("ja")

        assert changed.language == "ja"
        assert changed.criteria.fandom == "Re:Zero"

    def test_cleared_resets_only_criteria(self) -> None:
        state = AppState(mode=DisplayMode.LINKED, show_variant=True).with_criteria(
            FilterCriteria(search="miku")
        )

        cleared = state.cleared()

        assert cleared.criteria == FilterCriteria()
        assert cleared.mode is DisplayMode.LINKED
        assert cleared.show_variant

    def test_updates_return_new_state(self) -> None:
        state = AppState()

        state.with_mode(DisplayMode.LINKED)

        assert state.mode is DisplayMode.SEPARATE


class TestLocalize:
    def test_without_overrides(self, by_id) -> None:
        view = localize(by_id["1200"], None)

        assert view.name == "Rem"
        assert view.parts == ("Morning Star",)

    def test_overrides_replace_fields(self, by_id, ja_overrides) -> None:
        view = localize(by_id["1200"], ja_overrides)

        assert view.name == "レム"
        assert view.fandom == "Re:ゼロから始める異世界生活"
        assert view.parts == ("モーニングスター",)
        assert view.record is by_id["1200"]

    def test_empty_override_falls_back(self, by_id) -> None:
        overrides = {"1201": {"name": "ラム", "description": "", "parts": "Besen"}}

        view = localize(by_id["1201"], overrides)

        assert view.name == "ラム"
        assert view.description == by_id["1201"].description
        assert view.parts == ("Broom",)

    def test_translated_fandom(self, records, ja_overrides) -> None:
        label = translated_fandom("Re:Zero", records, ja_overrides)

        assert label == "Re:ゼロから始める異世界生活"
        assert translated_fandom("Spy x Family", records, ja_overrides) == "Spy x Family"
        assert translated_fandom("Re:Zero", records, None) == "Re:Zero"


class TestKnownErrors:
    def test_nothing_to_export_response(self) -> None:
        response = NothingToExportError().to_response()

        assert response.outcome == "known_failure"
        assert response.failure.kind == FailureKind.EMPTY_RESULT

    def test_status_follows_kind(self) -> None:
        assert NothingToExportError().status_code == 422
        assert ExportInProgressError().status_code == 409
        assert ExportEncodingError().status_code == 500

    def test_catalog_integrity_error(self) -> None:
        error = CatalogIntegrityError("1580", True, ["1580DX", "1580DX2"])

        assert error.kind == FailureKind.VALIDATION_FAILED
        assert error.record_ids == ["1580DX", "1580DX2"]
        assert "DX" in error.message
