import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from platecoach import __version__
from platecoach.api import api_router
from platecoach.core.logging import configure_logging
from platecoach.core.settings import get_settings

configure_logging(get_settings().server.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="PlateCoach", version=__version__)


def _collect_cors_origins() -> list[str]:
    default_origins = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    configured_origins = get_settings().security.cors_origins
    env_origins = [
        origin.strip()
        for origin in os.environ.get("FRONTEND_ORIGIN", "").split(",")
        if origin.strip()
    ]

    collected: list[str] = []
    for origin in (*default_origins, *configured_origins, *env_origins):
        if origin and origin not in collected:
            collected.append(origin)

    return collected


app.add_middleware(
    CORSMiddleware,
    allow_origins=_collect_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
# Same routes under /api for clients that mount the backend behind a prefix
app.include_router(api_router, prefix="/api", include_in_schema=False)


@app.on_event("startup")
async def startup_event() -> None:
    settings = get_settings()
    data_dir = Path(settings.data.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Using data directory: %s", data_dir)

    from platecoach.core.db import create_tables, init_db

    init_db()
    await create_tables()

    if not settings.vision.google_api_key:
        logger.warning("GOOGLE_API_KEY/GEMINI_API_KEY not set: /analyze will fail until configured")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    from platecoach.core.db import dispose_db

    await dispose_db()
