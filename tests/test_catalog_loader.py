"""Tests for catalog loading and link validation."""

import json
from pathlib import Path

import httpx
import pytest
import respx

from nendocatalog.models.failure import CatalogIntegrityError
from nendocatalog.models.record import Record
from nendocatalog.services.catalog_loader import (
    fetch_catalog,
    load_catalog,
    load_catalog_source,
    parse_catalog,
    validate_links,
)


class TestParseCatalog:
    def test_parses_records(self, raw_catalog) -> None:
        records = parse_catalog(raw_catalog)

        assert len(records) == 6
        assert records[0].id == "1580"

    def test_skips_entries_without_id(self) -> None:
        records = parse_catalog([{"id": "1"}, {"name": "No id"}, {"id": ""}, "junk"])

        assert [r.id for r in records] == ["1"]

    def test_rejects_two_dx_records_for_one_base(self) -> None:
        raw = [
            {"id": "10", "linkedId": "10DX"},
            {"id": "10DX", "linkedId": "10", "isDX": True},
            {"id": "10DX2", "linkedId": "10", "isDX": True},
        ]

        with pytest.raises(CatalogIntegrityError) as exc_info:
            parse_catalog(raw)

        assert exc_info.value.linked_id == "10"
        assert exc_info.value.record_ids == ["10DX", "10DX2"]

    def test_rejects_two_base_records_for_one_dx(self) -> None:
        records = [
            Record(id="10", linked_id="10DX"),
            Record(id="11", linked_id="10DX"),
        ]

        with pytest.raises(CatalogIntegrityError):
            validate_links(records)

    def test_base_and_dx_may_share_link(self) -> None:
        records = [
            Record(id="10", linked_id="X"),
            Record(id="10DX", linked_id="X", is_dx=True),
        ]

        validate_links(records)


class TestLoadCatalog:
    def test_loads_file(self, data_dir: Path) -> None:
        records = load_catalog(data_dir / "nendoroids.json")

        assert len(records) == 6

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="NENDOCATALOG_CATALOG_PATH"):
            load_catalog(tmp_path / "missing.json")

    def test_not_an_array(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"id": "1"}), encoding="utf-8")

        with pytest.raises(ValueError, match="JSON array"):
            load_catalog(path)

    async def test_source_dispatches_to_path(self, data_dir: Path) -> None:
        records = await load_catalog_source(str(data_dir / "nendoroids.json"))

        assert len(records) == 6


class TestFetchCatalog:
    @respx.mock
    async def test_fetches_url(self, raw_catalog) -> None:
        respx.get("https://example.com/nendoroids.json").mock(
            return_value=httpx.Response(200, json=raw_catalog)
        )

        records = await fetch_catalog("https://example.com/nendoroids.json")

        assert len(records) == 6

    @respx.mock
    async def test_http_error(self) -> None:
        respx.get("https://example.com/nendoroids.json").mock(return_value=httpx.Response(500))

        with pytest.raises(httpx.HTTPStatusError):
            await fetch_catalog("https://example.com/nendoroids.json")

    @respx.mock
    async def test_source_dispatches_to_url(self, raw_catalog) -> None:
        respx.get("https://example.com/nendoroids.json").mock(
            return_value=httpx.Response(200, json=raw_catalog[:2])
        )

        records = await load_catalog_source("https://example.com/nendoroids.json")

        assert [r.id for r in records] == ["1580", "1580DX"]
