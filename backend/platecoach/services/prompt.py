import random
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from platecoach.models.analysis import NO_FOOD_SENTINEL
from platecoach.services.personas import pick_persona

PROMPT_INSTRUCTION = """
You are an expert nutrition analyst.
Carefully analyze the provided image.
- If it clearly contains food (fruits, vegetables, meals, snacks, drinks, ingredients), return structured nutrition data as JSON.
- If no food is detected (people, objects, landscapes, screenshots), set "fallback" to "{sentinel}" and leave every other field minimal or empty.
- Numbers are plain numeric values for the whole visible portion, never ranges or strings.

The resurrected celebrity coach is: {persona}
"""

NUTRIENT_EXAMPLE = "Vitamin C: boosts immunity - Health score: 85"


@dataclass(frozen=True)
class AnalysisRequest:
    persona: str
    instruction: str
    schema: dict[str, Any] = field(repr=False)


def _string_list(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _number(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}


def build_response_schema(persona: str) -> dict[str, Any]:
    """
    Structured-output schema for the analysis reply. Only the coachAdvice
    description depends on the persona.
    """
    return {
        "type": "object",
        "properties": {
            "fallback": {
                "type": "string",
                "description": f"If no food is detected, put '{NO_FOOD_SENTINEL}'. Otherwise, leave empty.",
            },
            "coachAdvice": {
                "type": "string",
                "description": (
                    f"{persona}, you are a resurrected AI nutrition coach. Give humorous, witty, "
                    "yet insightful advice about this food in under 30 words."
                ),
            },
            "food": {
                "type": "string",
                "description": "Name of the food in the image. If multiple foods, summarize briefly.",
            },
            "benefits": _string_list(
                "2-3 health benefits (e.g., 'Improves skin glow', 'Boosts brain function')"
            ),
            "calories": _number("Estimated total calories (non-negative numerical value only)"),
            "carbs": _number("Estimated total carbs in grams (non-negative numerical value only)"),
            "sugar": _number("Estimated total sugar in grams (non-negative numerical value only)"),
            "drawbacks": _string_list(
                "2-3 possible negative effects if over-consumed + suggest healthier alternatives"
            ),
            "nutrients": _string_list(
                f"2-3 key nutrients with benefits + a health score 1-100 (e.g., '{NUTRIENT_EXAMPLE}')"
            ),
        },
        "required": [
            "coachAdvice",
            "food",
            "benefits",
            "calories",
            "carbs",
            "sugar",
            "drawbacks",
            "nutrients",
        ],
    }


def build_instruction(persona: str) -> str:
    return PROMPT_INSTRUCTION.format(sentinel=NO_FOOD_SENTINEL, persona=persona).strip()


def build_analysis_request(
    persona_pool: Sequence[str],
    rng: Optional[random.Random] = None,
) -> AnalysisRequest:
    persona = pick_persona(persona_pool, rng)
    return AnalysisRequest(
        persona=persona,
        instruction=build_instruction(persona),
        schema=build_response_schema(persona),
    )
