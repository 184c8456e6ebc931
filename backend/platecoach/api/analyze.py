import logging
import random
import time
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from platecoach.core.errors import ImageTooLarge, ModelUnavailable, NoImageProvided, PlateCoachError
from platecoach.core.settings import Settings, get_settings
from platecoach.models.analysis import FallbackResult
from platecoach.services.prompt import build_analysis_request
from platecoach.services.resolver import resolve_analysis
from platecoach.services.vision import invoke_model

router = APIRouter()
logger = logging.getLogger(__name__)


def get_persona_rng() -> random.Random:
    return random.Random()


async def _read_image(image: Optional[UploadFile], settings: Settings) -> tuple[bytes, str]:
    if image is None:
        raise NoImageProvided()

    max_bytes = settings.vision.max_image_bytes
    too_large = ImageTooLarge(f"Image too large (> {settings.vision.max_image_mb}MB)")
    if image.size and image.size > max_bytes:
        raise too_large

    content = await image.read()
    if not content:
        raise NoImageProvided()
    if len(content) > max_bytes:
        raise too_large

    return content, image.content_type or "application/octet-stream"


@router.post("/analyze", summary="Analyze a food photo")
async def analyze_food(
    image: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    rng: random.Random = Depends(get_persona_rng),
):
    """
    Classifies the uploaded photo as food or not and, for food, returns the
    nutrition breakdown plus advice from a randomly drawn celebrity coach.
    """
    start_ts = time.time()
    try:
        content, mime_type = await _read_image(image, settings)
        request = build_analysis_request(settings.coach.personas, rng)
        logger.info(
            "Vision Analysis Start: size=%.2fMB, mime=%s, coach=%s",
            len(content) / (1024 * 1024), mime_type, request.persona,
        )

        raw_text = await invoke_model(content, mime_type, request.instruction, request.schema, settings)
        result = resolve_analysis(raw_text, request.persona)
    except PlateCoachError as exc:
        if exc.details is not None:
            logger.error("Vision Analysis Error: %s (%s)", exc.message, exc.details)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    except Exception:
        logger.exception("Unexpected error in vision analysis")
        return JSONResponse(status_code=500, content={"error": ModelUnavailable.message})

    duration = (time.time() - start_ts) * 1000
    if isinstance(result, FallbackResult):
        logger.info("Vision Analysis: no food detected, time=%.0fms", duration)
        return {"analysis": result.model_dump()}

    logger.info(
        "Vision Analysis Success: food=%r, calories=%s, time=%.0fms",
        result.food, result.calories, duration,
    )
    return {"analysis": result.model_dump(), "coach": result.persona}
