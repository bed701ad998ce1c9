from nendocatalog.api.catalog import router as catalog_router
from nendocatalog.api.collection import router as collection_router
from nendocatalog.api.export import router as export_router
from nendocatalog.api.health import router as health_router

__all__ = [
    "catalog_router",
    "collection_router",
    "export_router",
    "health_router",
]
