from .base import Base
from .session import (
    async_session_factory,
    build_engine,
    build_session_factory,
    engine,
    get_async_url,
    get_db_session,
    request_scope,
)

__all__ = [
    "Base",
    "async_session_factory",
    "build_engine",
    "build_session_factory",
    "engine",
    "get_async_url",
    "get_db_session",
    "request_scope",
]
