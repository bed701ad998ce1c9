"""
Health check endpoints.

/health is a liveness probe. /ready additionally requires the catalog to
be loaded and the key-value store to answer a trivial query.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nendocatalog.db.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str | None = None
    records: int | None = Field(default=None, description="Catalog records loaded at startup")


async def _store_reachable(session: AsyncSession) -> bool:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Key-value store unavailable: %s", e)
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Touches neither the catalog nor the store."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    request: Request,
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """Readiness probe. 503 until the catalog is loaded, or while the store is down."""
    service = getattr(request.app.state, "catalog_service", None)
    records = len(service.records) if service is not None else None
    database = "connected" if await _store_reachable(session) else "disconnected"

    if service is None or database != "connected":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database=database, records=records)
    return HealthResponse(status="ready", database=database, records=records)
