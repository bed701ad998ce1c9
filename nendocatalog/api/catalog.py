"""
Catalog API endpoints.

Lists the filtered catalog with header statistics, filter choices, record
detail, the session filter used by exports, and display/language
preferences.
"""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from nendocatalog.api.deps import get_catalog_service
from nendocatalog.models.criteria import DisplayMode, FilterCriteria
from nendocatalog.models.record import Record
from nendocatalog.services.catalog_service import CatalogService, RecordDetail

router = APIRouter(tags=["catalog"])

Service = Annotated[CatalogService, Depends(get_catalog_service)]


class RecordSummary(BaseModel):
    """One entry of the catalog listing."""

    id: str
    name: str
    fandom: str
    gender: str
    hair_color: list[str] = Field(default_factory=list)
    box_color: str
    official_photo: str | None = None
    is_dx: bool = False
    linked_id: str | None = Field(
        default=None,
        description="Linked record id; omitted in linked mode",
    )
    show_dx_indicator: bool = False
    owned: bool = False
    wishlisted: bool = False


class StatsModel(BaseModel):
    total: int
    owned: int
    wishlist: int
    unfiltered_total: int
    unfiltered_owned: int
    unfiltered_wishlist: int


class CatalogResponse(BaseModel):
    """Filtered listing plus header counts."""

    mode: DisplayMode
    show_variant: bool
    language: str
    filters_active: bool = Field(
        ...,
        description="True when any filter is set; the total is then a match count",
    )
    stats: StatsModel
    items: list[RecordSummary] = Field(default_factory=list)


class FandomOptionModel(BaseModel):
    value: str
    label: str


class FilterOptionsResponse(BaseModel):
    fandoms: list[FandomOptionModel]
    genders: list[str]
    hair_colors: list[str]
    clothes_colors: list[str]
    parts: list[str]


class RecordDetailResponse(BaseModel):
    """Localized record detail with base/DX link info."""

    id: str
    name: str
    fandom: str
    gender: str
    description: str
    parts: list[str]
    box_color: str
    official_photo: str | None = None
    release_date: str | None = None
    price: float | None = None
    is_dx: bool
    linked_id: str | None = None
    has_dx: bool
    is_standalone_dx: bool
    dx_version_id: str | None = None
    plain_version_id: str | None = None
    show_variant_toggle: bool
    owned: bool
    wishlisted: bool


class FiltersRequest(BaseModel):
    """Session filter used by later exports."""

    search: str = ""
    fandom: str = ""
    gender: str = ""
    hair_colors: list[str] = Field(default_factory=list)
    clothes_colors: list[str] = Field(default_factory=list)
    parts: list[str] = Field(default_factory=list)
    id_min: str | None = Field(default=None, examples=["1200"])
    id_max: str | None = None

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria.build(
            search=self.search,
            fandom=self.fandom,
            gender=self.gender,
            hair_colors=self.hair_colors,
            clothes_colors=self.clothes_colors,
            parts=self.parts,
            id_min=self.id_min,
            id_max=self.id_max,
        )


class PreferencesRequest(BaseModel):
    mode: DisplayMode | None = None
    show_variant: bool | None = None
    language: str | None = Field(default=None, examples=["ja"])


class PreferencesResponse(BaseModel):
    mode: DisplayMode
    show_variant: bool
    language: str


def _summarize(service: CatalogService, record: Record) -> RecordSummary:
    view = service.localized(record)
    links = service.index.links_for(record, service.state.mode)
    return RecordSummary(
        id=record.id,
        name=view.name,
        fandom=view.fandom,
        gender=record.gender,
        hair_color=list(record.hair_color[:2]),
        box_color=record.box_color,
        official_photo=record.official_photo,
        is_dx=record.is_dx,
        linked_id=links.linked_id,
        show_dx_indicator=links.show_dx_indicator,
        owned=service.collections.is_owned(record.id),
        wishlisted=service.collections.is_wishlisted(record.id),
    )


def _detail_response(detail: RecordDetail) -> RecordDetailResponse:
    record = detail.view.record
    return RecordDetailResponse(
        id=record.id,
        name=detail.view.name,
        fandom=detail.view.fandom,
        gender=record.gender,
        description=detail.view.description,
        parts=list(detail.view.parts),
        box_color=record.box_color,
        official_photo=record.official_photo,
        release_date=record.release_date,
        price=record.price,
        is_dx=record.is_dx,
        linked_id=record.linked_id,
        has_dx=detail.links.has_dx,
        is_standalone_dx=detail.links.is_standalone_dx,
        dx_version_id=detail.dx_version_id,
        plain_version_id=detail.plain_version_id,
        show_variant_toggle=detail.show_variant_toggle,
        owned=detail.owned,
        wishlisted=detail.wishlisted,
    )


def _catalog_response(service: CatalogService, criteria: FilterCriteria) -> CatalogResponse:
    state = service.state
    return CatalogResponse(
        mode=state.mode,
        show_variant=state.show_variant,
        language=state.language,
        filters_active=criteria.is_active(),
        stats=StatsModel(**asdict(service.stats(criteria))),
        items=[_summarize(service, r) for r in service.filtered(criteria)],
    )


@router.get("/catalog", response_model=CatalogResponse)
async def list_catalog(
    service: Service,
    search: str | None = None,
    fandom: str | None = None,
    gender: str | None = None,
    hair_color: Annotated[list[str] | None, Query()] = None,
    clothes_color: Annotated[list[str] | None, Query()] = None,
    part: Annotated[list[str] | None, Query()] = None,
    id_min: str | None = None,
    id_max: str | None = None,
) -> CatalogResponse:
    """
    List the catalog for the current display mode and language.

    Filters come from the query string only. The session filter used by
    exports is set through PUT /filters.
    """
    criteria = FilterCriteria.build(
        search=search,
        fandom=fandom,
        gender=gender,
        hair_colors=hair_color,
        clothes_colors=clothes_color,
        parts=part,
        id_min=id_min,
        id_max=id_max,
    )
    return _catalog_response(service, criteria)


@router.put("/filters", response_model=CatalogResponse)
async def set_filters(request: FiltersRequest, service: Service) -> CatalogResponse:
    """Replace the session filter and list what it matches."""
    state = service.set_criteria(request.to_criteria())
    return _catalog_response(service, state.criteria)


@router.delete("/filters", response_model=CatalogResponse)
async def clear_filters(service: Service) -> CatalogResponse:
    """Clear the session filter."""
    state = service.clear_criteria()
    return _catalog_response(service, state.criteria)


@router.get("/catalog/options", response_model=FilterOptionsResponse)
async def filter_options(service: Service) -> FilterOptionsResponse:
    """Choices for the filter controls, labelled in the current language."""
    options = service.filter_options()
    return FilterOptionsResponse(
        fandoms=[FandomOptionModel(value=f.value, label=f.label) for f in options.fandoms],
        genders=options.genders,
        hair_colors=options.hair_colors,
        clothes_colors=options.clothes_colors,
        parts=options.parts,
    )


@router.get("/catalog/{record_id}", response_model=RecordDetailResponse)
async def get_record_detail(
    record_id: str,
    service: Service,
    resolve_variant: bool = True,
) -> RecordDetailResponse:
    """
    Detail for one record.

    In linked mode with show_variant on, a base record resolves to its DX
    version unless resolve_variant is false.
    """
    return _detail_response(service.detail(record_id, resolve_variant=resolve_variant))


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(request: PreferencesRequest, service: Service) -> PreferencesResponse:
    """Change display mode, variant toggle or language. Filters are kept."""
    if request.mode is not None:
        await service.set_mode(request.mode)
    if request.show_variant is not None:
        await service.set_show_variant(request.show_variant)
    if request.language is not None:
        await service.set_language(request.language)

    state = service.state
    return PreferencesResponse(
        mode=state.mode, show_variant=state.show_variant, language=state.language
    )
