import logging
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """FastAPI dependency, overridden in tests to pin the current instant."""
    return utc_now


def resolve_timezone(name: Optional[str] = None) -> Optional[tzinfo]:
    """
    Zone used for day boundaries. ``None`` means the server's local zone,
    returned when no name is configured or the name is unknown.
    """
    if name:
        try:
            return ZoneInfo(name)
        except ZoneInfoNotFoundError:
            logger.warning("Unknown timezone %r, using server local time", name)
    return None


def day_bounds(now: datetime, tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
    """
    Returns [local midnight, next local midnight) for the day containing ``now``.
    Naive ``now`` is taken as UTC. Without ``tz`` the system local zone is used,
    resolving each midnight's own UTC offset so DST changes are honoured.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if tz is None:
        local_day = now.astimezone().date()
        start = datetime.combine(local_day, time.min).astimezone()
        end = datetime.combine(local_day + timedelta(days=1), time.min).astimezone()
        return start, end
    local_day = now.astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end
