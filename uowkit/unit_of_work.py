from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, TypeVar
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from uowkit.core.logger import logger
from uowkit.repositories import ReadOnlyRepository, Repository
from uowkit.utils.tx import commit_all, flush_all, maybe_begin, rollback_all

ModelT = TypeVar("ModelT")

RepositoryFactory = Callable[[AsyncSession], Any]


class UnitOfWork:
    """
    One ``AsyncSession`` plus the repositories bound to it.

    Repositories are resolved per entity type: an instance already created by
    this unit of work, then a registered factory, then the generic
    implementation. Staged changes reach the database on ``save_changes``.
    """

    def __init__(
        self,
        session: AsyncSession,
        repositories: Optional[Mapping[type, RepositoryFactory]] = None,
        read_only_repositories: Optional[Mapping[type, RepositoryFactory]] = None,
    ) -> None:
        self.session = session
        self._repository_factories: Dict[type, RepositoryFactory] = dict(repositories or {})
        self._read_only_factories: Dict[type, RepositoryFactory] = dict(read_only_repositories or {})
        self._repositories: Dict[type, Repository] = {}
        self._read_only_repositories: Dict[type, ReadOnlyRepository] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_changes(self) -> int:
        s = self.session
        return len(s.new) + len(s.dirty) + len(s.deleted)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("UnitOfWork is closed")

    def _resolve(
        self,
        model: type,
        cache: Dict[type, Any],
        factories: Dict[type, RepositoryFactory],
        default: Type[ReadOnlyRepository],
    ) -> Any:
        self._ensure_open()
        kind = default.__name__
        if model in cache:
            logger.debug("[UnitOfWork] Get existing %s for entity %s", kind, model.__name__)
            return cache[model]

        factory = factories.get(model)
        if factory is not None:
            logger.debug("[UnitOfWork] Get %s for entity %s from registry", kind, model.__name__)
            try:
                custom = factory(self.session)
            except Exception as e:
                logger.debug("[UnitOfWork] Can't build %s from registry: %s", kind, e)
                custom = None
            if custom is not None:
                cache[model] = custom
                return custom

        logger.debug("[UnitOfWork] Creating new %s for entity %s", kind, model.__name__)
        repo = default(self.session, model)
        cache[model] = repo
        return repo

    def get_repository(self, model: Type[ModelT]) -> Repository[ModelT]:
        return self._resolve(model, self._repositories, self._repository_factories, Repository)

    def get_read_only_repository(self, model: Type[ModelT]) -> ReadOnlyRepository[ModelT]:
        return self._resolve(
            model, self._read_only_repositories, self._read_only_factories, ReadOnlyRepository
        )

    # -------- raw SQL --------
    async def execute_sql(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """
        Execute a raw statement and return the affected row count.

        Runs inside the session's open transaction when there is one (and is
        then committed by ``save_changes``), otherwise in its own transaction.
        """
        self._ensure_open()
        async with maybe_begin(self.session):
            result = await self.session.execute(text(sql), dict(params or {}))
        return result.rowcount

    async def from_sql(self, model: Type[ModelT], sql: str, params: Optional[Mapping[str, Any]] = None) -> List[ModelT]:
        return await self.get_repository(model).from_sql(sql, params)

    # -------- save --------
    async def save_changes(self) -> int:
        """Flush and commit the session; returns the number of staged objects."""
        self._ensure_open()
        name = type(self).__name__
        changes = self.pending_changes
        try:
            logger.debug("[UnitOfWork] Saving changes in %s", name)
            await self.session.flush()
            await self.session.commit()
            logger.debug("[UnitOfWork] Saved %s changes in %s", changes, name)
            return changes
        except Exception as e:
            await rollback_all([self.session])
            logger.error("[UnitOfWork] save_changes failed: %s", e, exc_info=True)
            raise

    async def save_changes_across(self, others: Iterable["UnitOfWork"]) -> int:
        """
        Save this unit of work together with ``others``.

        Every session is flushed before any is committed; a failed flush rolls
        all of them back. A failure while committing leaves the sessions
        committed so far as they are.
        """
        self._ensure_open()
        units = [*others, self]
        for unit in units:
            unit._ensure_open()

        counts = [unit.pending_changes for unit in units]
        sessions = [unit.session for unit in units]
        logger.debug("[UnitOfWork] Beginning save across %s units of work", len(units))
        try:
            await flush_all(sessions)
        except Exception as e:
            logger.error("[UnitOfWork] save_changes_across failed while flushing: %s", e, exc_info=True)
            raise

        try:
            await commit_all(sessions)
        except Exception as e:
            logger.error("[UnitOfWork] save_changes_across failed while committing: %s", e, exc_info=True)
            raise
        logger.debug("[UnitOfWork] Finalized save across %s units of work", len(units))
        return sum(counts)

    # -------- lifecycle --------
    async def close(self) -> None:
        if self._closed:
            return
        logger.debug("[UnitOfWork] Disposing %s", type(self).__name__)
        self._repositories.clear()
        self._read_only_repositories.clear()
        await self.session.close()
        self._closed = True

    async def __aenter__(self) -> "UnitOfWork":
        self._ensure_open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
