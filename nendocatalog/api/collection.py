"""
Collection API endpoints.

Reads and toggles the owned and wishlist lists.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from nendocatalog.api.deps import get_catalog_service
from nendocatalog.models.user_collections import CollectionKind
from nendocatalog.services.catalog_service import CatalogService

router = APIRouter(prefix="/collection", tags=["collection"])


class CollectionResponse(BaseModel):
    """Response model for the user's lists."""

    owned: list[str] = Field(default_factory=list)
    wishlist: list[str] = Field(default_factory=list)


class ToggleRequest(BaseModel):
    """Request model for toggling one figure."""

    id: str = Field(..., description="Catalog id of the figure", examples=["1580DX"])
    kind: CollectionKind = Field(
        ...,
        description="List to toggle. Adding to one list removes the id from the other.",
    )


class ToggleResponse(CollectionResponse):
    id: str
    kind: CollectionKind
    added: bool = Field(
        ...,
        description="True if the id is now in the list, False if it was removed",
    )


@router.get("", response_model=CollectionResponse)
async def get_user_collection(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> CollectionResponse:
    """Get the owned and wishlist ids, in the order they were added."""
    return CollectionResponse(
        owned=list(service.collections.owned),
        wishlist=list(service.collections.wishlist),
    )


@router.post("/toggle", response_model=ToggleResponse)
async def toggle_collection(
    request: ToggleRequest,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ToggleResponse:
    """
    Toggle a figure in owned or wishlist.

    The change is persisted before the response is sent.
    """
    # 404 for ids the catalog does not know
    service.get_record(request.id)

    added = await service.toggle(request.id, request.kind)
    return ToggleResponse(
        id=request.id,
        kind=request.kind,
        added=added,
        owned=list(service.collections.owned),
        wishlist=list(service.collections.wishlist),
    )
