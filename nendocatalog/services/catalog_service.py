"""
Catalog service.

Owns the loaded catalog, the user's collections and the session state, and
sequences every mutation (state change, persistence, export). The query
functions it calls are pure; this is the only place state changes.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from nendocatalog.config import Settings
from nendocatalog.db import operations as store
from nendocatalog.db.database import store_session
from nendocatalog.models.app_state import AppState
from nendocatalog.models.criteria import DisplayMode, FilterCriteria
from nendocatalog.models.failure import ExportInProgressError, FailureKind, KnownError
from nendocatalog.models.localization import LocalizedView, localize
from nendocatalog.models.record import Record
from nendocatalog.models.user_collections import CollectionKind, UserCollections
from nendocatalog.rendering.grid import PhotoSource, render_grid
from nendocatalog.services.catalog_filter import FilterOptions, filter_records, get_filter_options
from nendocatalog.services.catalog_loader import load_catalog_source
from nendocatalog.services.export_presets import ExportPresetName, get_preset
from nendocatalog.services.localization import load_language_overrides, normalize_language
from nendocatalog.services.stats import CatalogStats, compute_stats
from nendocatalog.services.variant_resolver import VariantIndex, VariantLinks, get_displayed_set

logger = logging.getLogger(__name__)


@dataclass
class RecordDetail:
    """Everything a detail view shows for one record."""

    view: LocalizedView
    links: VariantLinks
    owned: bool
    wishlisted: bool
    dx_version_id: str | None
    plain_version_id: str | None
    # Linked mode lets the user flip between base and DX here
    show_variant_toggle: bool


@dataclass
class ExportResult:
    filename: str
    data: bytes
    item_count: int


class CatalogService:
    """Single-user catalog session."""

    def __init__(
        self,
        records: Sequence[Record],
        data_dir: Path,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        collections: UserCollections | None = None,
        state: AppState | None = None,
        overrides: dict[str, dict[str, Any]] | None = None,
        image_timeout: float = 4.0,
        photo_loader: PhotoSource | None = None,
    ) -> None:
        self.records: list[Record] = list(records)
        self.index = VariantIndex.build(self.records)
        self._by_id = {r.id: r for r in self.records}
        self.data_dir = data_dir
        self.collections = collections or UserCollections()
        self.state = state or AppState()
        self.overrides = overrides if overrides is not None else {}
        self.image_timeout = image_timeout
        self.photo_loader = photo_loader
        self._session_factory = session_factory
        self._export_lock = asyncio.Lock()

    @classmethod
    async def load(
        cls,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> "CatalogService":
        """Load catalog, stored preferences, collections and language overrides."""
        records = await load_catalog_source(settings.resolved_catalog_path())
        if not records:
            logger.warning("Catalog is empty. Nothing will be listed.")

        collections = UserCollections()
        state = AppState(language=normalize_language(settings.default_language))

        if session_factory is not None:
            async with session_factory() as session:
                collections = await store.load_user_collections(session)
                mode = await store.load_display_mode(session)
                show_variant = await store.load_show_variant(session)
                language = await store.load_language(session)
            if mode is not None:
                state = state.with_mode(mode)
            if show_variant is not None:
                state = state.with_show_variant(show_variant)
            if language:
                state = state.with_language(normalize_language(language))

        overrides = load_language_overrides(state.language, settings.data_dir)
        return cls(
            records,
            data_dir=settings.data_dir,
            session_factory=session_factory,
            collections=collections,
            state=state,
            overrides=overrides,
            image_timeout=settings.image_timeout_seconds,
        )

    # --- Queries ---

    def displayed(self) -> list[Record]:
        return get_displayed_set(self.records, self.state.mode)

    def filtered(self, criteria: FilterCriteria | None = None) -> list[Record]:
        """Displayed records matching criteria, or the session filter if none given."""
        return filter_records(self.displayed(), self._criteria(criteria), self.overrides)

    def stats(self, criteria: FilterCriteria | None = None) -> CatalogStats:
        displayed = self.displayed()
        filtered = filter_records(displayed, self._criteria(criteria), self.overrides)
        return compute_stats(filtered, self.collections, displayed)

    def _criteria(self, criteria: FilterCriteria | None) -> FilterCriteria:
        return criteria if criteria is not None else self.state.criteria

    def filter_options(self) -> FilterOptions:
        return get_filter_options(self.records, self.overrides)

    def localized(self, record: Record) -> LocalizedView:
        return localize(record, self.overrides)

    def get_record(self, record_id: str) -> Record:
        """
        Raises:
            KnownError: If no record has this id
        """
        record = self._by_id.get(record_id)
        if record is None:
            raise KnownError(
                kind=FailureKind.NOT_FOUND,
                message=f"No figure with id '{record_id}'.",
            )
        return record

    def detail(self, record_id: str, resolve_variant: bool = True) -> RecordDetail:
        """
        Detail for a record.

        With resolve_variant, a base record listed in linked mode opens as
        its DX version when show_variant is on.
        """
        record = self.get_record(record_id)
        if resolve_variant:
            record = self.index.resolve_shown(record, self.state.mode, self.state.show_variant)

        links = self.index.links_for(record, self.state.mode)
        dx = self.index.get_dx_version(record.id) if links.has_dx else None
        plain = self.index.get_plain_version(record.id) if record.is_dx else None
        return RecordDetail(
            view=self.localized(record),
            links=links,
            owned=self.collections.is_owned(record.id),
            wishlisted=self.collections.is_wishlisted(record.id),
            dx_version_id=dx.id if dx else None,
            plain_version_id=plain.id if plain else None,
            show_variant_toggle=(
                self.state.mode is DisplayMode.LINKED and (links.has_dx or record.is_dx)
            ),
        )

    # --- Mutations ---

    def set_criteria(self, criteria: FilterCriteria) -> AppState:
        self.state = self.state.with_criteria(criteria)
        return self.state

    def clear_criteria(self) -> AppState:
        self.state = self.state.cleared()
        return self.state

    async def set_mode(self, mode: DisplayMode) -> AppState:
        self.state = self.state.with_mode(mode)
        await self._persist(store.save_display_mode, mode)
        return self.state

    async def set_show_variant(self, show_variant: bool) -> AppState:
        self.state = self.state.with_show_variant(show_variant)
        await self._persist(store.save_show_variant, show_variant)
        return self.state

    async def set_language(self, language: str) -> AppState:
        """Switch language and reload overrides. Filters are kept."""
        language = normalize_language(language)
        self.overrides = load_language_overrides(language, self.data_dir)
        self.state = self.state.with_language(language)
        await self._persist(store.save_language, language)
        return self.state

    async def toggle(self, record_id: str, kind: CollectionKind) -> bool:
        """
        Toggle an id in owned or wishlist and persist.

        Returns:
            True if the id is now in `kind`
        """
        added = self.collections.toggle(record_id, kind)
        await self._persist(store.save_user_collections, self.collections)
        return added

    async def _persist(self, save: Any, value: Any) -> None:
        if self._session_factory is None:
            return
        async with store_session(self._session_factory) as session:
            await save(session, value)

    # --- Export ---

    async def export(self, preset_name: str | ExportPresetName) -> ExportResult:
        """
        Render an export preset over the current filtered set.

        Only one export runs at a time.

        Raises:
            ExportInProgressError: If another export is running
            NothingToExportError: If the preset selects no records
            ExportEncodingError: If encoding fails
        """
        preset = get_preset(preset_name)
        if self._export_lock.locked():
            raise ExportInProgressError()

        async with self._export_lock:
            items = preset.select(self.filtered(), self.collections)
            data = await render_grid(
                items,
                self.collections,
                preset.options(self.image_timeout),
                loader=self.photo_loader,
                photo_dir=self.data_dir,
            )
            return ExportResult(filename=preset.filename(), data=data, item_count=len(items))
