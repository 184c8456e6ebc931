from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

NO_FOOD_SENTINEL = "No food detected"


class FallbackResult(BaseModel):
    fallback: str


class FoodResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    coachAdvice: str
    food: str = Field(min_length=1)
    benefits: list[str]
    calories: float = Field(ge=0, allow_inf_nan=False)
    carbs: float = Field(ge=0, allow_inf_nan=False)
    sugar: float = Field(ge=0, allow_inf_nan=False)
    drawbacks: list[str]
    nutrients: list[str]

    # Returned to the client as "coach", not inside "analysis"
    persona: str = Field(exclude=True)

    @field_validator("calories", "carbs", "sugar", mode="before")
    def _reject_booleans(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("boolean is not a number")
        return v


AnalysisResult = Union[FallbackResult, FoodResult]
