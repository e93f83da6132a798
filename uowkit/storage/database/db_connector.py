from typing import Any, Dict, Optional
from sqlalchemy.engine.url import make_url, URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool
from uowkit.core.settings import Settings

def normalize_url(raw: str) -> URL:
    """
    Pick the async driver for the URL's backend.

    PostgreSQL URLs are rebuilt without their query string so options such as
    sslmode/channel_binding never reach asyncpg.
    """
    u = make_url(raw)
    backend = u.get_backend_name()

    if backend == "postgresql":
        return URL.create(
            drivername="postgresql+asyncpg",
            username=u.username,
            password=u.password,
            host=u.host,
            port=u.port,
            database=u.database,
        )
    if backend == "sqlite":
        return u.set(drivername="sqlite+aiosqlite")
    return u


def build_async_engine(
    url: str,
    *,
    echo: bool = False,
    isolation_level: Optional[str] = None,
) -> AsyncEngine:
    clean_url = normalize_url(url)
    kwargs: Dict[str, Any] = {"echo": echo}
    if isolation_level:
        kwargs["execution_options"] = {"isolation_level": isolation_level}

    if clean_url.get_backend_name() == "postgresql":
        kwargs.update(
            poolclass=NullPool,
            pool_pre_ping=True,
            connect_args={
                "ssl": True,
                "statement_cache_size": 0,  # prepared stmts break behind PgBouncer
            },
        )
    elif clean_url.get_backend_name() == "sqlite" and clean_url.database in (None, "", ":memory:"):
        # one shared connection, otherwise each checkout sees a new empty db
        kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

    return create_async_engine(clean_url.render_as_string(hide_password=False), **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False, class_=AsyncSession)


def engine_from_settings(settings: Settings) -> AsyncEngine:
    return build_async_engine(
        settings.DATABASE_URL_STR,
        echo=settings.ENGINE_ECHO,
        isolation_level=settings.DB_ISOLATION_LEVEL,
    )
