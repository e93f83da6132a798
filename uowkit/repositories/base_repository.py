from typing import Any, Callable, Generic, Hashable, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar, Union
from sqlalchemy import Select, select, text, func
from sqlalchemy.sql.elements import ClauseElement, ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from uowkit.entities.page import PagedArray, PagedDictionary, PagedList
from .paginated import to_paged_array_async, to_paged_dictionary_async, to_paged_list_async
from .queryable import SelectQueryable

ModelT = TypeVar("ModelT")
K = TypeVar("K", bound=Hashable)

WhereExpr = Union[ColumnElement[bool], Sequence[ColumnElement[bool]]]
OrderBy = Union[Callable[[Select], Select], Any, Sequence[Any]]


def _apply_where(stmt: Select, predicate: Optional[WhereExpr]) -> Select:
    if predicate is None:
        return stmt
    if isinstance(predicate, (list, tuple)):
        return stmt.where(*predicate)
    return stmt.where(predicate)


def _apply_order(stmt: Select, order_by: Optional[OrderBy]) -> Select:
    if order_by is None:
        return stmt
    if isinstance(order_by, (list, tuple)):
        return stmt.order_by(*order_by)
    if callable(order_by) and not isinstance(order_by, ClauseElement) and not hasattr(order_by, "__clause_element__"):
        return order_by(stmt)
    return stmt.order_by(order_by)


class ReadOnlyRepository(Generic[ModelT]):
    """Read access to one mapped entity type through a bound ``AsyncSession``."""

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        self.session = session
        self.model = model

    def _select(self, predicate: Optional[WhereExpr] = None, order_by: Optional[OrderBy] = None) -> Select:
        return _apply_order(_apply_where(select(self.model), predicate), order_by)

    def get_all(
        self,
        predicate: Optional[WhereExpr] = None,
        order_by: Optional[OrderBy] = None,
        *,
        disable_tracking: bool = True,
    ) -> SelectQueryable[ModelT]:
        """
        Lazily evaluated query over the entity table.

        Nothing is executed until the returned queryable is counted or
        materialized. With ``disable_tracking`` entities newly loaded by the fetch are
        detached; entities the session already tracks stay attached.
        """
        return SelectQueryable(self._select(predicate, order_by), self.session, detach=disable_tracking)

    async def get_first_or_default(
        self,
        predicate: Optional[WhereExpr] = None,
        order_by: Optional[OrderBy] = None,
        *,
        selector: Optional[Any] = None,
        disable_tracking: bool = True,
    ) -> Optional[Any]:
        """
        First matching entity, or the first value of ``selector`` when given.

        Returns None when nothing matches.
        """
        stmt: Select = select(selector) if selector is not None else select(self.model)
        stmt = _apply_order(_apply_where(stmt, predicate), order_by).limit(1)
        rows = await SelectQueryable(stmt, self.session, detach=disable_tracking).to_list_async()
        return rows[0] if rows else None

    async def from_sql(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[ModelT]:
        """Run a raw SELECT and map its rows onto the entity."""
        stmt = select(self.model).from_statement(text(sql))
        res = await self.session.execute(stmt, dict(params or {}))
        return list(res.scalars().all())

    async def find(self, *key_values: Any) -> Optional[ModelT]:
        if not key_values:
            return None
        ident = key_values[0] if len(key_values) == 1 else tuple(key_values)
        return await self.session.get(self.model, ident)

    async def count(self, predicate: Optional[WhereExpr] = None) -> int:
        stmt = _apply_where(select(func.count()).select_from(self.model), predicate)
        return int(await self.session.scalar(stmt) or 0)

    async def any(self, predicate: Optional[WhereExpr] = None) -> bool:
        stmt = _apply_where(select(self.model), predicate).limit(1)
        found = await self.session.scalar(select(stmt.exists()))
        return bool(found)

    # -------- paged reads --------
    async def get_paged_array(
        self,
        page_size: int,
        page_number: int = 0,
        predicate: Optional[WhereExpr] = None,
        order_by: Optional[OrderBy] = None,
    ) -> PagedArray[ModelT]:
        return await to_paged_array_async(self.get_all(predicate, order_by), page_size, page_number)

    async def get_paged_list(
        self,
        page_size: int,
        page_number: int = 0,
        predicate: Optional[WhereExpr] = None,
        order_by: Optional[OrderBy] = None,
    ) -> PagedList[ModelT]:
        return await to_paged_list_async(self.get_all(predicate, order_by), page_size, page_number)

    async def get_paged_dictionary(
        self,
        key_selector: Callable[[ModelT], K],
        page_size: int,
        page_number: int = 0,
        predicate: Optional[WhereExpr] = None,
        order_by: Optional[OrderBy] = None,
    ) -> PagedDictionary[K, ModelT]:
        return await to_paged_dictionary_async(
            self.get_all(predicate, order_by), key_selector, page_size, page_number
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model.__name__})"


class Repository(ReadOnlyRepository[ModelT]):
    """
    Read/write access to one entity type.

    Writes only stage changes in the session; they reach the database when
    the owning unit of work saves.
    """

    def insert(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        return entity

    def insert_many(self, entities: Iterable[ModelT]) -> List[ModelT]:
        items = list(entities)
        self.session.add_all(items)
        return items

    async def update(self, *entities: ModelT) -> List[ModelT]:
        merged = []
        for entity in entities:
            merged.append(await self.session.merge(entity))
        return merged

    async def delete(self, entity: ModelT) -> None:
        await self.session.delete(entity)

    async def delete_many(self, entities: Iterable[ModelT]) -> None:
        for entity in list(entities):
            await self.session.delete(entity)

    async def delete_by_key(self, *key_values: Any) -> bool:
        entity = await self.find(*key_values)
        if entity is None:
            return False
        await self.session.delete(entity)
        return True
