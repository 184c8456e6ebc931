from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response

from platecoach import __version__
from platecoach.core.db import check_db_health
from platecoach.core.settings import Settings, get_settings

router = APIRouter()

_start_time = datetime.now(timezone.utc)


def _uptime_seconds() -> float:
    return (datetime.now(timezone.utc) - _start_time).total_seconds()


@router.api_route("/", methods=["GET", "HEAD"], summary="Liveness probe", response_model=None)
async def health(request: Request):
    if request.method == "HEAD":
        return Response(status_code=200)
    return {"ok": True}


@router.get("/full", summary="Full health check")
async def full_health(
    settings: Settings = Depends(get_settings),
) -> dict:
    database = await check_db_health()
    return {
        "ok": database["ok"],
        "uptime_seconds": _uptime_seconds(),
        "version": __version__,
        "database": database,
        "vision": {
            "provider": "gemini",
            "model": settings.vision.gemini_model,
            "configured": bool(settings.vision.google_api_key),
        },
        "coach": {"personas": len(settings.coach.personas)},
    }
