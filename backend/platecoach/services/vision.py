import asyncio
import logging
from typing import Any

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from platecoach.core.errors import ModelUnavailable
from platecoach.core.settings import Settings

logger = logging.getLogger(__name__)

RETRY_BACKOFF_SECONDS = 0.5

# Food photos sometimes trip the default filters
SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_ONLY_HIGH,
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
}


async def invoke_model(
    image_bytes: bytes,
    mime_type: str,
    instruction: str,
    schema: dict[str, Any],
    settings: Settings,
) -> str:
    """
    Sends one image plus the analysis instruction to Gemini and returns the raw
    reply text. Transport, timeout and empty-reply failures are retried up to
    ``settings.vision.max_retries`` times, then surface as ModelUnavailable.
    """
    api_key = settings.vision.google_api_key
    if not api_key:
        raise ModelUnavailable(details="Google API Key not configured")

    attempts = settings.vision.max_retries + 1
    attempt = 1
    while True:
        try:
            return await _generate(image_bytes, mime_type, instruction, schema, settings)
        except ModelUnavailable as exc:
            logger.warning("Gemini attempt %s/%s failed: %s", attempt, attempts, exc.details)
            if attempt >= attempts:
                raise
        await asyncio.sleep(RETRY_BACKOFF_SECONDS * attempt)
        attempt += 1


async def _generate(
    image_bytes: bytes,
    mime_type: str,
    instruction: str,
    schema: dict[str, Any],
    settings: Settings,
) -> str:
    vision = settings.vision
    genai.configure(api_key=vision.google_api_key)

    generation_config = {
        "temperature": vision.temperature,
        "top_p": vision.top_p,
        "response_mime_type": "application/json",
        "response_schema": schema,
    }
    model = genai.GenerativeModel(
        vision.gemini_model,
        generation_config=generation_config,
        safety_settings=SAFETY_SETTINGS,
    )

    prompt_parts = [
        instruction,
        {"mime_type": mime_type, "data": image_bytes},
    ]

    try:
        response = await asyncio.wait_for(
            model.generate_content_async(prompt_parts),
            timeout=vision.timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        raise ModelUnavailable(details=f"Gemini timed out after {vision.timeout_seconds}s") from exc
    except Exception as exc:
        logger.error("Gemini error", exc_info=True)
        raise ModelUnavailable(details=f"Gemini error: {exc}") from exc

    # .text raises when the candidate was blocked or carries no parts
    try:
        text = response.text
    except ValueError as exc:
        raise ModelUnavailable(details=f"Gemini returned no text: {exc}") from exc

    if not text:
        raise ModelUnavailable(details="Empty response from vision provider")
    return text
