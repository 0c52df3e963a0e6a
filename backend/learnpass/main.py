"""FastAPI application factory and startup tasks."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import make_url

from learnpass.config import Settings, get_settings
from learnpass.domain.entities import CredentialTemplate
from learnpass.domain.exceptions import DuplicateEntityError
from learnpass.infrastructure.database import Base, async_session_factory, engine
from learnpass.infrastructure.database.repositories import SQLAlchemyCredentialTemplateRepository
from learnpass.infrastructure.logging.log_config import setup_logging
from learnpass.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _ensure_database_exists(settings: Settings) -> None:
    """On PostgreSQL, create the configured database when it is missing."""
    url = make_url(settings.database_url)
    if not url.drivername.startswith("postgres") or not url.database:
        return

    admin_dsn = url.set(drivername="postgresql", database="postgres").render_as_string(hide_password=False)
    try:
        conn = await asyncpg.connect(admin_dsn)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Cannot reach PostgreSQL to check database '%s': %s", url.database, exc)
        return
    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", url.database):
            return
        # CREATE DATABASE cannot run inside a transaction block
        await conn.execute(f'CREATE DATABASE "{url.database}"')
        logger.info("Created database '%s'", url.database)
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", url.database, exc)
    finally:
        await conn.close()


async def _create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _seed_default_certificate_template(settings: Settings) -> None:
    """Make sure one active default certificate template exists.

    Several workers may start at once; the partial unique index on the
    default flag lets exactly one insert win.
    """
    async with async_session_factory() as session:
        templates = SQLAlchemyCredentialTemplateRepository(session)
        if await templates.get_default() is not None:
            return
        try:
            await templates.create(CredentialTemplate.default(settings.passing_score))
        except DuplicateEntityError:
            logger.debug("Default certificate template created by another worker")
            return
        await session.commit()
        logger.info("Seeded default certificate template (min score %d)", settings.passing_score)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting %s %s [%s], identity resolver %s, payment idempotency %s",
        settings.app_title, settings.app_version, settings.app_env,
        settings.identity_resolver_version,
        "on" if settings.enforce_payment_idempotency else "off",
    )

    await _ensure_database_exists(settings)
    await _create_tables()
    await _seed_default_certificate_template(settings)

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("learnpass.main:app", host="0.0.0.0", port=8020, reload=True)
