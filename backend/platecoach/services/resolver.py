import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from platecoach.core.errors import InvalidFormat
from platecoach.models.analysis import NO_FOOD_SENTINEL, AnalysisResult, FallbackResult, FoodResult

logger = logging.getLogger(__name__)

# Only a reply wrapped in a markdown fence as a whole is unwrapped
_FENCE_RE = re.compile(r"```(?:\w+)?\s*(.*?)\s*```", re.DOTALL)


def _log_raw(content: str) -> None:
    log_content = content[:1000] + "..." if len(content) > 1000 else content
    logger.error("JSON Parse Error. Raw content: %r", log_content)


def _load_json_object(content: str) -> dict[str, Any]:
    if not content or not content.strip():
        raise InvalidFormat(details="Empty response from vision provider")

    cleaned = content.strip()
    match = _FENCE_RE.fullmatch(cleaned)
    if match:
        cleaned = match.group(1)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        _log_raw(content)
        raise InvalidFormat(details=f"Syntax error: {exc.msg}") from exc

    if not isinstance(data, dict):
        _log_raw(content)
        raise InvalidFormat(details="Expected a JSON object")
    return data


def is_no_food(fallback: Any) -> bool:
    return isinstance(fallback, str) and NO_FOOD_SENTINEL.lower() in fallback.lower()


def resolve_analysis(raw_text: str, persona: str) -> AnalysisResult:
    """
    Turns the model's raw reply into exactly one of FallbackResult or FoodResult.

    The fallback sentinel wins over anything else in the payload. Without it,
    every required field must be present and well typed; nothing is defaulted.
    """
    data = _load_json_object(raw_text)

    fallback = data.get("fallback")
    if is_no_food(fallback):
        return FallbackResult(fallback=fallback)

    try:
        return FoodResult.model_validate({**data, "persona": persona})
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        logger.warning("Model reply failed validation: %s", "; ".join(problems))
        raise InvalidFormat(details=problems) from exc
