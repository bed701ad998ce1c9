import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nendocatalog.api import (
    catalog_router,
    collection_router,
    export_router,
    health_router,
)
from nendocatalog.config import settings
from nendocatalog.db.database import async_session_factory, init_db
from nendocatalog.models.failure import KnownError
from nendocatalog.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

try:
    __version__ = pkg_version("nendocatalog")
except PackageNotFoundError:
    __version__ = "0.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    app.state.catalog_service = await CatalogService.load(settings, async_session_factory)
    yield


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    lifespan=lifespan,
)

app.include_router(catalog_router)
app.include_router(collection_router)
app.include_router(export_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Known failures become a classified envelope with the error's status code."""
    logger.info("Request failed: %s (%s)", exc.message, exc.kind.value)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )

