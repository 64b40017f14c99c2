"""Prompt assembly for portrait variation requests.

This module is intentionally narrow: it only builds prompt strings. Nothing a caller
sends can reach the prompt; the only parameter is the number of variations.

Design constraints:
    - Deterministic construction for identical inputs.
    - No hidden side effects (no I/O, no global state mutation).
"""


# =========================================================
# STYLE PROMPT
# =========================================================
# Stored verbatim on every generation record as `prompt`.

STYLE_PROMPT = (
    "Transform this portrait into a realistic Instagram travel/lifestyle photo. "
    "High quality, natural lighting, professional photography style."
)


# =========================================================
# GENERATION INSTRUCTION
# =========================================================
# Sent to the model. Component order:
#   1) count-parameterized scene instruction
#   2) blank line
#   3) `STYLE_PROMPT`

SCENE_TEMPLATE = (
    "Generate {count} different high-quality Instagram-ready travel/lifestyle photos "
    "using this portrait as the main subject. Each photo should place the person in a "
    "different realistic scene (beach, city, mountains, cafe, road trip, etc.). Keep the "
    "person's face, pose, and clothing consistent but change the background and lighting "
    "naturally. Professional photography quality."
)


def build_generation_text(count: int, prompt: str = STYLE_PROMPT) -> str:
    """Build the text part of the multimodal generation request.

    Args:
        count: Number of variations requested from the model.
        prompt: Style prompt appended after the scene instruction.

    Returns:
        Final instruction text.
    """
    return f"{SCENE_TEMPLATE.format(count=count)}\n\n{prompt}"
