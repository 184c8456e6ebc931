import random
from typing import Optional, Sequence


def pick_persona(pool: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """Uniform draw of one coach persona from ``pool``."""
    if not pool:
        raise ValueError("Persona pool must not be empty")
    rng = rng or random.Random()
    return pool[rng.randrange(len(pool))]
