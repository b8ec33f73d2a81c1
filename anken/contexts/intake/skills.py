"""
Skill list splitting for the Intake context.

Skill blocks arrive as anything from "Java、Spring, AWS" to bulleted lines.
split_skills() turns them into a deduplicated, order-preserving list.
"""

import re

from anken.contexts.intake.normalizer import clean_str, to_half_width

# Item delimiters: 、 , ; / ／ newline plus middle dots and bullet glyphs
SKILL_DELIMITERS = re.compile(r"[、,;/／\n\u30fb\uff65\u2022\u25cf\u25a0\u25aa\u00b7]")

# Bullet/dash markers left at the start of an item
LEADING_MARKER = re.compile(r"^[\-‐–—・●◆■◇▶>\s]+")

# Parenthetical annotations: "AWS(EC2, S3)" -> "AWS"
PARENTHETICAL = re.compile(r"[（(][^)）]*[)）]")


def split_skills(block: str | None) -> list[str] | None:
    """
    Split a skill block into unique, trimmed items.

    Args:
        block: Raw skill block text

    Returns:
        Skills in first-seen order, or None when the block is missing or blank

    Examples:
        >>> split_skills("React、React, Vue・Vue")
        ['React', 'Vue']
    """
    if not block or not block.strip():
        return None

    # Annotations are dropped before splitting so "AWS(EC2, S3)" stays one item
    text = PARENTHETICAL.sub("", to_half_width(block))

    skills = []
    for piece in SKILL_DELIMITERS.split(text):
        item = clean_str(LEADING_MARKER.sub("", piece))
        if item and item not in skills:
            skills.append(item)
    return skills
