from fastapi import HTTPException, Request, status

from nendocatalog.services.catalog_service import CatalogService


def get_catalog_service(request: Request) -> CatalogService:
    """
    Dependency that provides the loaded catalog service.

    Returns 503 until startup has finished loading the catalog.
    """
    service: CatalogService | None = getattr(request.app.state, "catalog_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog not loaded",
        )
    return service
