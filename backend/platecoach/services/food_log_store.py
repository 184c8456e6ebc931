import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from platecoach.core.errors import StoreFailure
from platecoach.models.food_log import FoodLog

logger = logging.getLogger(__name__)


def _naive_utc(dt: datetime) -> datetime:
    # created_at is stored as naive UTC
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


class FoodLogStore:
    """Append-only access to the food_logs table."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]]):
        self._session_factory = session_factory

    def _session(self) -> AsyncSession:
        if self._session_factory is None:
            raise StoreFailure(details="Database not initialised")
        return self._session_factory()

    async def insert(
        self,
        *,
        calories: float,
        carbs: float,
        sugar: float,
        user_id: str,
        food_name: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> FoodLog:
        row = FoodLog(
            user_id=user_id,
            food_name=food_name,
            calories=calories,
            carbs=carbs,
            sugar=sugar,
            created_at=_naive_utc(created_at or datetime.now(timezone.utc)),
        )
        async with self._session() as session:
            try:
                session.add(row)
                await session.commit()
                await session.refresh(row)
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Failed to insert food log for user=%s", user_id, exc_info=True)
                raise StoreFailure(details=str(exc)) from exc
        return row

    async def query_day(self, user_id: str, day_start: datetime, day_end: datetime) -> list[FoodLog]:
        """Rows for ``user_id`` with day_start <= created_at < day_end, newest first."""
        stmt = (
            select(FoodLog)
            .where(FoodLog.user_id == user_id)
            .where(FoodLog.created_at >= _naive_utc(day_start))
            .where(FoodLog.created_at < _naive_utc(day_end))
            .order_by(FoodLog.created_at.desc(), FoodLog.id.desc())
        )
        async with self._session() as session:
            try:
                result = await session.execute(stmt)
                return list(result.scalars().all())
            except SQLAlchemyError as exc:
                logger.error("Failed to fetch food logs for user=%s", user_id, exc_info=True)
                raise StoreFailure(details=str(exc)) from exc
