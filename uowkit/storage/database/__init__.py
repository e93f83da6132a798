from .db_connector import (
    build_async_engine,
    build_session_factory,
    engine_from_settings,
    normalize_url,
)

__all__ = [
    "build_async_engine",
    "build_session_factory",
    "engine_from_settings",
    "normalize_url",
]
