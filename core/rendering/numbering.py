"""
List numbering schemes.

Two fixed, process-wide definitions referenced by name from list
paragraphs:

    bullet-list   •  ◦  –  (repeating every 3 levels)
    ordered-list  1.  a)  i.  (decimal, lowerLetter, lowerRoman, repeating)

Each of the 9 levels indents 0.5in per level with a 0.25in hanging indent.
The definitions are built once at import time from immutable dataclasses and
are shared by every conversion.
"""

from typing import Tuple

from config.constants import (
    BULLET_GLYPHS,
    BULLET_REFERENCE,
    LIST_HANGING_INDENT,
    LIST_INDENT_STEP,
    NUMBERING_LEVEL_COUNT,
    ORDERED_FORMATS,
    ORDERED_REFERENCE,
    ORDERED_SUFFIXES,
)
from core.rendering.document_model import NumberingDefinition, NumberingLevel

MAX_LEVEL = NUMBERING_LEVEL_COUNT - 1

LEVEL_OVERFLOW_POLICIES = ("clamp", "cycle")


def _level_indent(level: int) -> int:
    return LIST_INDENT_STEP * (level + 1)


def build_bullet_definition() -> NumberingDefinition:
    levels = tuple(
        NumberingLevel(
            level=i,
            format="bullet",
            text=BULLET_GLYPHS[i % len(BULLET_GLYPHS)],
            indent_left=_level_indent(i),
            hanging=LIST_HANGING_INDENT,
        )
        for i in range(NUMBERING_LEVEL_COUNT)
    )
    return NumberingDefinition(reference=BULLET_REFERENCE, levels=levels)


def build_ordered_definition() -> NumberingDefinition:
    levels = tuple(
        NumberingLevel(
            level=i,
            format=ORDERED_FORMATS[i % len(ORDERED_FORMATS)],
            text=f"%{i + 1}{ORDERED_SUFFIXES[i % len(ORDERED_SUFFIXES)]}",
            indent_left=_level_indent(i),
            hanging=LIST_HANGING_INDENT,
        )
        for i in range(NUMBERING_LEVEL_COUNT)
    )
    return NumberingDefinition(reference=ORDERED_REFERENCE, levels=levels)


BULLET_LIST = build_bullet_definition()
ORDERED_LIST = build_ordered_definition()

NUMBERING_DEFINITIONS: Tuple[NumberingDefinition, ...] = (BULLET_LIST, ORDERED_LIST)


def list_reference(ordered: bool) -> str:
    """Name of the scheme a list paragraph points at."""
    return ORDERED_REFERENCE if ordered else BULLET_REFERENCE


def resolve_level(level: int, policy: str = "clamp") -> int:
    """
    Map a nesting depth onto one of the defined levels.

    Args:
        level: Nesting depth (0 = top-level list)
        policy: "clamp" keeps deeper lists on the last level,
                "cycle" wraps around to level 0

    Returns:
        Level index in [0, 8]
    """
    if level < 0:
        return 0
    if level <= MAX_LEVEL:
        return level
    if policy == "cycle":
        return level % NUMBERING_LEVEL_COUNT
    return MAX_LEVEL
