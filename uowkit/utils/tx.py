from contextlib import asynccontextmanager
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from uowkit.core.logger import logger


@asynccontextmanager
async def maybe_begin(session: AsyncSession):
    """
    Join the session's open transaction, or run the block in a new one that
    commits on exit.
    """
    if session.in_transaction():
        yield
        return
    async with session.begin():
        yield


async def flush_all(sessions: Iterable[AsyncSession]) -> None:
    """Flush every session; on the first failure roll all of them back and re-raise."""
    sessions = list(sessions)
    try:
        for session in sessions:
            await session.flush()
    except Exception:
        await rollback_all(sessions)
        raise


async def rollback_all(sessions: Iterable[AsyncSession]) -> None:
    for session in sessions:
        try:
            await session.rollback()
        except Exception as e:
            logger.warning("[Tx] rollback failed: %s", e)


async def commit_all(sessions: Iterable[AsyncSession]) -> None:
    # sessions committed before a failure stay committed
    for session in sessions:
        await session.commit()
