"""Section markers and the fixed instruction sent with every scan.

The markers are the wire format between the pipeline and the model: the
parser looks for exactly these strings, so renaming any of them breaks
parsing of replies produced under the old template.
"""

FOUND_INGREDIENTS = "FOUND_INGREDIENTS:"
RECIPES_START = "RECIPES_START"
RECIPES_END = "RECIPES_END"
RECIPE_PREFIX = "RECIPE_"
RECIPE_END = "RECIPE_END"
NAME = "NAME:"
TIME = "TIME:"
INGREDIENTS = "INGREDIENTS:"
INSTRUCTIONS = "INSTRUCTIONS:"

INSTRUCTION_TEMPLATE = (
    "Analyze this image and respond in EXACTLY this format:\n\n"
    f"{FOUND_INGREDIENTS}\n"
    "- ingredient1\n"
    "- ingredient2\n\n"
    f"{RECIPES_START}\n"
    f"{RECIPE_PREFIX}1\n"
    f"{NAME} Recipe Name\n"
    f"{TIME} X minutes\n"
    f"{INGREDIENTS}\n"
    "- ingredient1\n"
    "- ingredient2\n"
    f"{INSTRUCTIONS}\n"
    "- First step\n"
    "- Second step\n"
    f"{RECIPE_END}\n\n"
    f"{RECIPE_PREFIX}2\n"
    "... (repeat format)\n"
    f"{RECIPES_END}"
)
