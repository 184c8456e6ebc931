import math
from collections.abc import Mapping
from typing import Any, Iterable

from platecoach.models.schemas import DailyTotals


def _amount(entry: Any, key: str) -> float:
    if isinstance(entry, Mapping):
        value = entry.get(key)
    else:
        value = getattr(entry, key, None)
    return float(value) if value else 0.0


def reduce_daily_totals(entries: Iterable[Any]) -> DailyTotals:
    """
    Folds food log rows (ORM rows, pydantic models or dicts) into day totals.
    Missing or null amounts count as zero. fsum keeps the result independent
    of row order.
    """
    rows = list(entries)
    return DailyTotals(
        totalCalories=math.fsum(_amount(row, "calories") for row in rows),
        totalCarbs=math.fsum(_amount(row, "carbs") for row in rows),
        totalSugar=math.fsum(_amount(row, "sugar") for row in rows),
    )
