"""
Export API endpoints.

Renders the catalog, narrowed by the session filter (PUT /filters), as a
PNG grid.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from nendocatalog.api.deps import get_catalog_service
from nendocatalog.services.catalog_service import CatalogService
from nendocatalog.services.export_presets import ExportPresetName

router = APIRouter(prefix="/export", tags=["export"])


@router.get(
    "/{preset}",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def export_grid(
    preset: ExportPresetName,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> Response:
    """
    Render an export preset.

    - all: every filtered figure, coloured by ownership
    - owned_wishlist: filtered figures that are owned or wishlisted
    - owned_catalog: filtered owned figures with photos

    Returns 422 when the preset selects nothing and 409 while another
    export is running.
    """
    result = await service.export(preset)
    return Response(
        content=result.data,
        media_type="image/png",
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "X-Item-Count": str(result.item_count),
        },
    )
