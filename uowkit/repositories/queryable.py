from typing import Any, Callable, Generic, Iterable, List, Optional, Protocol, Set, TypeVar, Union, runtime_checkable
from sqlalchemy import Select, func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

AnySession = Union[Session, AsyncSession]


@runtime_checkable
class Queryable(Protocol[T_co]):
    """
    Lazily evaluated source of entities.

    Only ``count`` and ``to_list`` (and their async duals) touch the backing
    store; ``skip`` and ``take`` return new queryables.
    """

    def count(self) -> int: ...

    def skip(self, n: int) -> "Queryable[T_co]": ...

    def take(self, n: int) -> "Queryable[T_co]": ...

    def to_list(self) -> List[T_co]: ...

    async def count_async(self) -> int: ...

    async def to_list_async(self) -> List[T_co]: ...


class SequenceQueryable(Generic[T]):
    """Queryable over an in-memory sequence."""

    def __init__(self, items: Iterable[T]) -> None:
        self._items: List[T] = list(items)

    def where(self, predicate: Callable[[T], bool]) -> "SequenceQueryable[T]":
        return SequenceQueryable(i for i in self._items if predicate(i))

    def order_by(self, key: Callable[[T], Any], *, descending: bool = False) -> "SequenceQueryable[T]":
        return SequenceQueryable(sorted(self._items, key=key, reverse=descending))

    def count(self) -> int:
        return len(self._items)

    def skip(self, n: int) -> "SequenceQueryable[T]":
        return SequenceQueryable(self._items[max(n, 0):])

    def take(self, n: int) -> "SequenceQueryable[T]":
        return SequenceQueryable(self._items[:max(n, 0)])

    def to_list(self) -> List[T]:
        return list(self._items)

    async def count_async(self) -> int:
        return self.count()

    async def to_list_async(self) -> List[T]:
        return self.to_list()

    def __repr__(self) -> str:
        return f"SequenceQueryable(count={len(self._items)})"


class SelectQueryable(Generic[T]):
    """
    Queryable over a SQLAlchemy ``Select`` bound to a session.

    Sync methods need a ``Session`` and async methods an ``AsyncSession``.
    Offset and limit are tracked here and applied at execution time so that
    ``count`` always sees the unpaged statement.
    """

    def __init__(
        self,
        stmt: Select,
        session: AnySession,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
        detach: bool = False,
    ) -> None:
        self.stmt = stmt
        self.session = session
        self.offset = offset
        self.limit = limit
        self.detach = detach

    def _copy(self, **changes: Any) -> "SelectQueryable[T]":
        params = dict(
            stmt=self.stmt,
            session=self.session,
            offset=self.offset,
            limit=self.limit,
            detach=self.detach,
        )
        params.update(changes)
        stmt = params.pop("stmt")
        session = params.pop("session")
        return SelectQueryable(stmt, session, **params)

    def where(self, *criteria: Any) -> "SelectQueryable[T]":
        return self._copy(stmt=self.stmt.where(*criteria))

    def order_by(self, *clauses: Any) -> "SelectQueryable[T]":
        return self._copy(stmt=self.stmt.order_by(*clauses))

    def skip(self, n: int) -> "SelectQueryable[T]":
        n = max(n, 0)
        limit = None if self.limit is None else max(self.limit - n, 0)
        return self._copy(offset=self.offset + n, limit=limit)

    def take(self, n: int) -> "SelectQueryable[T]":
        n = max(n, 0)
        limit = n if self.limit is None else min(self.limit, n)
        return self._copy(limit=limit)

    # -------- statements --------
    def _paged_stmt(self) -> Select:
        stmt = self.stmt
        if self.offset:
            stmt = stmt.offset(self.offset)
        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        return stmt

    def count_stmt(self) -> Select:
        sub = self._paged_stmt().order_by(None).subquery()
        return select(func.count()).select_from(sub)

    def _sync_session(self) -> Session:
        if isinstance(self.session, AsyncSession):
            raise TypeError("SelectQueryable is bound to an AsyncSession; use the *_async methods")
        return self.session

    def _async_session(self) -> AsyncSession:
        if not isinstance(self.session, AsyncSession):
            raise TypeError("SelectQueryable is bound to a synchronous Session; use the blocking methods")
        return self.session

    def _identity_keys(self) -> Set[Any]:
        if not self.detach:
            return set()
        session = self.session
        if isinstance(session, AsyncSession):
            session = session.sync_session
        return set(session.identity_map.keys())

    def _detach(self, rows: List[T], tracked_before: Set[Any]) -> List[T]:
        """Expunge rows this fetch loaded; entities tracked before it stay attached."""
        if not self.detach:
            return rows
        session = self.session
        for row in rows:
            state = sa_inspect(row, raiseerr=False)
            # column selects yield plain values
            if state is None or not hasattr(state, "key"):
                continue
            if state.key in tracked_before:
                continue
            if row in session and not session.is_modified(row):
                session.expunge(row)
        return rows

    # -------- blocking --------
    def count(self) -> int:
        return int(self._sync_session().scalar(self.count_stmt()) or 0)

    def to_list(self) -> List[T]:
        session = self._sync_session()
        tracked_before = self._identity_keys()
        rows = list(session.execute(self._paged_stmt()).scalars().all())
        return self._detach(rows, tracked_before)

    # -------- async --------
    async def count_async(self) -> int:
        return int(await self._async_session().scalar(self.count_stmt()) or 0)

    async def to_list_async(self) -> List[T]:
        session = self._async_session()
        tracked_before = self._identity_keys()
        rows = list((await session.execute(self._paged_stmt())).scalars().all())
        return self._detach(rows, tracked_before)

    def __repr__(self) -> str:
        return f"SelectQueryable(offset={self.offset}, limit={self.limit})"
