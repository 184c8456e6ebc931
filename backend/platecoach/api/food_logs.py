import logging
import math
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from platecoach.core.db import get_session_factory
from platecoach.core.errors import (
    InvalidNumericField,
    MissingRequiredField,
    MissingUserId,
    PlateCoachError,
    StoreFailure,
)
from platecoach.core.settings import Settings, get_settings
from platecoach.models.schemas import (
    FoodLogEntry,
    FoodLogsResponse,
    SaveFoodLogRequest,
    SaveFoodLogResponse,
)
from platecoach.services.food_log_store import FoodLogStore
from platecoach.services.totals import reduce_daily_totals
from platecoach.utils.timezone import Clock, day_bounds, get_clock, resolve_timezone

router = APIRouter()
logger = logging.getLogger(__name__)


def get_food_log_store() -> FoodLogStore:
    return FoodLogStore(get_session_factory())


def _to_amount(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidNumericField()
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidNumericField() from exc
    if not math.isfinite(amount) or amount < 0:
        raise InvalidNumericField()
    return amount


def _error_response(exc: PlateCoachError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@router.post("/save", response_model=SaveFoodLogResponse, summary="Persist an analyzed meal")
async def save_food_log(
    body: Any = Body(None),
    store: FoodLogStore = Depends(get_food_log_store),
    clock: Clock = Depends(get_clock),
):
    # A missing or non-object body has no amounts at all
    payload = SaveFoodLogRequest.model_validate(body if isinstance(body, dict) else {})
    try:
        # Falsy amounts (0 included) count as missing
        if not payload.cal or not payload.sugar or not payload.carbs:
            raise MissingRequiredField()
        calories = _to_amount(payload.cal)
        sugar = _to_amount(payload.sugar)
        carbs = _to_amount(payload.carbs)

        user_id = str(payload.userId).strip() if payload.userId is not None else ""
        if not user_id:
            raise MissingUserId("userId is required")

        row = await store.insert(
            calories=calories,
            carbs=carbs,
            sugar=sugar,
            user_id=user_id,
            food_name=str(payload.foodName) if payload.foodName is not None else None,
            created_at=clock(),
        )
    except StoreFailure as exc:
        return _error_response(StoreFailure("Failed to save food log", details=exc.details))
    except PlateCoachError as exc:
        return _error_response(exc)

    logger.info("Food log saved: user=%s, id=%s, calories=%s", row.user_id, row.id, row.calories)
    return SaveFoodLogResponse(data=FoodLogEntry.model_validate(row))


@router.get("/getFoodLogs", response_model=FoodLogsResponse, summary="Today's food logs and totals")
async def get_food_logs(
    userId: Optional[str] = Query(None),
    store: FoodLogStore = Depends(get_food_log_store),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
):
    """
    Entries for the server-local calendar day, newest first, with their totals.
    """
    if not userId:
        return _error_response(MissingUserId())

    day_start, day_end = day_bounds(clock(), resolve_timezone(settings.server.timezone))
    try:
        rows = await store.query_day(userId, day_start, day_end)
    except StoreFailure as exc:
        logger.error("error fetching data from food logs: %s", exc.details)
        return _error_response(StoreFailure("Failed to fetch food logs", details=exc.details))

    entries = [FoodLogEntry.model_validate(row) for row in rows]
    return FoodLogsResponse(data=entries, totals=reduce_daily_totals(entries))
