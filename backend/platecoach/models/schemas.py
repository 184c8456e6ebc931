from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SaveFoodLogRequest(BaseModel):
    # Raw values, validated by the route
    cal: Any = None
    sugar: Any = None
    carbs: Any = None
    userId: Optional[Any] = None
    foodName: Optional[Any] = None


class FoodLogEntry(BaseModel):
    id: int
    user_id: str
    food_name: Optional[str] = None
    calories: Optional[float] = None
    carbs: Optional[float] = None
    sugar: Optional[float] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class DailyTotals(BaseModel):
    totalCalories: float = 0.0
    totalCarbs: float = 0.0
    totalSugar: float = 0.0


class SaveFoodLogResponse(BaseModel):
    success: bool = True
    message: str = "saved successfully!"
    data: FoodLogEntry


class FoodLogsResponse(BaseModel):
    data: list[FoodLogEntry] = Field(default_factory=list)
    totals: DailyTotals
