"""Parse the model's sectioned free-text reply into a ScanResult.

Pure functions, no I/O. Malformed or missing sections never raise: they
degrade to empty fields and are logged for diagnostics.
"""

from __future__ import annotations

import logging
import re

from . import prompt
from .models import Recipe, ScanResult

logger = logging.getLogger(__name__)

_RECIPE_MARKER = re.compile(rf"(?m)^[ \t]*{prompt.RECIPE_PREFIX}\d+[ \t]*\r?\n")
_NAME_LINE = re.compile(rf"(?m)^[ \t]*{prompt.NAME}[ \t]*(.*)\r?\n")
_TIME_LINE = re.compile(rf"(?m)^[ \t]*{prompt.TIME}[ \t]*(.*)\r?\n")


def parse_response(text: str) -> ScanResult:
    """Convert raw model text into found ingredients and recipes."""
    text = text or ""

    found_section = _between(text, prompt.FOUND_INGREDIENTS, prompt.RECIPES_START)
    if found_section is None:
        logger.debug("reply has no %s section", prompt.FOUND_INGREDIENTS)
        found: list[str] = []
    else:
        found = _dash_items(found_section)

    recipes: list[Recipe] = []
    recipes_section = _between(text, prompt.RECIPES_START, prompt.RECIPES_END)
    if recipes_section is None:
        logger.debug("reply has no %s section", prompt.RECIPES_START)
    else:
        for block in split_recipe_blocks(recipes_section):
            recipe = parse_recipe_block(block)
            if recipe is not None:
                recipes.append(recipe)

    return ScanResult(found_ingredients=tuple(found), recipes=tuple(recipes))


def split_recipe_blocks(section: str) -> list[str]:
    """Split the recipes section on ``RECIPE_<n>`` lines, dropping empty blocks."""
    return [block for block in _RECIPE_MARKER.split(section) if block]


def parse_recipe_block(block: str) -> Recipe | None:
    """Parse one recipe block.

    Returns None for a block without a NAME, or one that was cut off before
    its RECIPE_END marker (e.g. by the output token cap).
    """
    title = _first_line_value(_NAME_LINE, block)
    if not title:
        if block.strip():
            logger.debug("dropping recipe block without a name: %r", block[:80])
        return None
    if prompt.RECIPE_END not in block:
        logger.warning("dropping unterminated recipe block %r", title)
        return None

    ingredients_section = _between(block, prompt.INGREDIENTS, prompt.INSTRUCTIONS)
    instructions_section = _between(block, prompt.INSTRUCTIONS, prompt.RECIPE_END)

    return Recipe(
        title=title,
        cook_time=_first_line_value(_TIME_LINE, block),
        ingredients=tuple(_dash_items(ingredients_section or "")),
        instructions=tuple(
            step for step in _dash_items(instructions_section or "") if step
        ),
    )


def _between(text: str, start: str, end: str) -> str | None:
    """Text after the first ``start`` up to the next ``end`` (or end of text).

    Returns None when ``start`` does not occur.
    """
    _, sep, rest = text.partition(start)
    if not sep:
        return None
    return rest.split(end, 1)[0]


def _dash_items(section: str) -> list[str]:
    items: list[str] = []
    for line in section.splitlines():
        stripped = line.strip()
        if stripped.startswith("-"):
            items.append(stripped[1:].strip())
    return items


def _first_line_value(pattern: re.Pattern[str], block: str) -> str:
    m = pattern.search(block)
    return m.group(1).strip() if m else ""
