"""
Heading-tolerant section extraction for the Intake context.

Postings label their blocks in many ways:

    【業務内容】                業務内容：要件定義〜設計
    ・要件定義                  ■開発環境
    ・詳細設計                  Java / Spring Boot

pick_section() finds a block by any synonym of its heading, tolerating
bullet glyphs, bracket pairs and an optional colon.
"""

from functools import lru_cache

from anken.contexts.intake.normalizer import clean_str, prepare_posting_text, trim_leading_label
from anken.contexts.intake.section_patterns import (
    NEXT_HEADING_PATTERN,
    block_heading_pattern,
    inline_heading_pattern,
)


@lru_cache(maxsize=64)
def _patterns_for(labels: tuple):
    return inline_heading_pattern(labels), block_heading_pattern(labels)


def pick_section(text: str, labels) -> str | None:
    """
    Extract the body of the first section whose heading matches one of labels.

    Two passes:
    1. Inline form - "label: body" on one line; returns the trailing body.
    2. Block form - a heading-only line followed by body lines up to the next
       known heading (any label group) or the end of the text.

    The inline form wins when both exist, since it is unambiguous.

    Args:
        text: Posting text (raw or already prepared)
        labels: Synonyms for the heading

    Returns:
        Cleaned section body, or None if no matching heading is found
    """
    if not text:
        return None

    prepared = prepare_posting_text(text)
    inline, block = _patterns_for(tuple(labels))

    inline_match = inline.search(prepared)
    if inline_match:
        body = trim_leading_label(clean_str(inline_match.group(1)) or "")
        if body:
            return body

    block_match = block.search(prepared)
    if block_match is None:
        return None

    after = prepared[block_match.end() :]
    # Body starts on the line after the heading
    after = after[1:] if after.startswith("\n") else after

    next_heading = NEXT_HEADING_PATTERN.search(after)
    body = after[: next_heading.start()] if next_heading else after

    lines = [trim_leading_label(clean_str(line) or "") for line in body.split("\n")]
    cleaned = "\n".join(line for line in lines if line)
    return cleaned or None

