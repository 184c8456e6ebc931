from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from platecoach.core.db import Base


class FoodLog(Base):
    __tablename__ = "food_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    food_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    calories: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    carbs: Mapped[Optional[float]] = mapped_column(Float, nullable=True, comment="grams")
    sugar: Mapped[Optional[float]] = mapped_column(Float, nullable=True, comment="grams")

    # Naive UTC
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
