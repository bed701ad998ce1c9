"""
Catalog loader.

Reads the record list from a JSON file or URL and checks the base/DX
pairing invariant before anything else sees the data.
"""

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any

import httpx

from nendocatalog.models.failure import CatalogIntegrityError
from nendocatalog.models.record import Record

logger = logging.getLogger(__name__)


def parse_catalog(raw: list[dict[str, Any]]) -> list[Record]:
    """
    Build records from raw catalog entries and validate links.

    Entries without an id are skipped with a warning.

    Raises:
        CatalogIntegrityError: If two DX or two base records share a linkedId
    """
    records: list[Record] = []
    skipped = 0
    for entry in raw:
        if not isinstance(entry, dict) or entry.get("id") in (None, ""):
            skipped += 1
            continue
        records.append(Record.from_dict(entry))

    if skipped:
        logger.warning("Skipped %d catalog entries without an id", skipped)

    validate_links(records)
    return records


def validate_links(records: list[Record]) -> None:
    """
    Reject catalogs where a linkedId is shared by more than one base or
    more than one DX record.
    """
    groups: dict[tuple[str, bool], list[str]] = defaultdict(list)
    for record in records:
        if record.linked_id:
            groups[(record.linked_id, record.is_dx)].append(record.id)

    for (linked_id, is_dx), ids in groups.items():
        if len(ids) > 1:
            raise CatalogIntegrityError(linked_id, is_dx, ids)


def load_catalog(path: Path) -> list[Record]:
    """
    Load catalog from a JSON file.

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        ValueError: If the file is not a JSON array
        CatalogIntegrityError: If records violate the linking invariant
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Catalog not found at {path}. "
            "Set NENDOCATALOG_CATALOG_PATH or place nendoroids.json in the data directory."
        )

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"Catalog at {path} must be a JSON array of records")

    records = parse_catalog(raw)
    logger.info("Loaded %d catalog records from %s", len(records), path)
    return records


async def fetch_catalog(url: str, client: httpx.AsyncClient | None = None) -> list[Record]:
    """
    Fetch catalog JSON over HTTP.

    Raises:
        httpx.HTTPError: If the request fails
        ValueError: If the payload is not a JSON array
    """
    if client is None:
        async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as own_client:
            response = await own_client.get(url)
    else:
        response = await client.get(url)
    response.raise_for_status()

    raw = response.json()
    if not isinstance(raw, list):
        raise ValueError(f"Catalog at {url} must be a JSON array of records")

    records = parse_catalog(raw)
    logger.info("Fetched %d catalog records from %s", len(records), url)
    return records


async def load_catalog_source(source: str) -> list[Record]:
    """Load from an http(s) URL or a local path."""
    if source.startswith(("http://", "https://")):
        return await fetch_catalog(source)
    return load_catalog(Path(source))
