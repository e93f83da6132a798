from contextlib import asynccontextmanager
from typing import AsyncIterator

from dependency_injector import containers, providers

from uowkit.core.settings import Settings
from uowkit.storage.database import build_session_factory, engine_from_settings
from uowkit.unit_of_work import UnitOfWork


def _open_unit_of_work(session_factory, repositories, read_only_repositories) -> UnitOfWork:
    return UnitOfWork(
        session_factory(),
        repositories=repositories,
        read_only_repositories=read_only_repositories,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    engine = providers.Singleton(engine_from_settings, settings=settings)
    session_factory = providers.Singleton(build_session_factory, engine=engine)

    # entity type -> callable(session) returning a custom repository
    repositories = providers.Dict()
    read_only_repositories = providers.Dict()

    unit_of_work = providers.Factory(
        _open_unit_of_work,
        session_factory=session_factory,
        repositories=repositories,
        read_only_repositories=read_only_repositories,
    )


@asynccontextmanager
async def uow_scope(container: ApplicationContainer) -> AsyncIterator[UnitOfWork]:
    """Yield a fresh unit of work from the container and close it afterwards."""
    uow: UnitOfWork = container.unit_of_work()
    try:
        yield uow
    finally:
        await uow.close()
