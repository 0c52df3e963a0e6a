"""Liveness endpoint with a database reachability probe."""

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from learnpass.config import get_settings
from learnpass.infrastructure.database import engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _database_status() -> str:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health probe could not reach the database: %s", exc)
        return "unavailable"
    return "ok"


@router.get("/health")
async def health_check() -> dict:
    """Always 200 while the process serves requests; ``database`` reports the store."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "identity_resolver": settings.identity_resolver_version,
        "payment_idempotency": settings.enforce_payment_idempotency,
        "database": await _database_status(),
    }
