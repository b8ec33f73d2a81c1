"""
Text normalizer for the Intake context.

Canonicalizes mixed-width Japanese/Latin posting text before any pattern
matching. Job postings pasted from PDFs and chat tools mix full-width
alphanumerics (ＰＨＰ, ８０万), ideographic spaces and stray NBSPs, so every
extractor works on half-width text.

Design principle: Normalize BEFORE parsing. The parser keeps line structure
(to_half_width), field values are fully collapsed (normalize_text).
"""

import re

# Full-width ASCII block: U+FF01 (！) .. U+FF5E (～) maps onto U+0021 .. U+007E
FULL_WIDTH_START = 0xFF01
FULL_WIDTH_END = 0xFF5E
FULL_WIDTH_OFFSET = 0xFEE0

# Unicode replacements: problematic char → plain equivalent
UNICODE_REPLACEMENTS = {
    "\u3000": " ",  # ideographic space
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    # Zero-width characters → remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM
}

_FULL_WIDTH_TABLE = {
    code: code - FULL_WIDTH_OFFSET for code in range(FULL_WIDTH_START, FULL_WIDTH_END + 1)
}
_FULL_WIDTH_TABLE.update({ord(char): repl for char, repl in UNICODE_REPLACEMENTS.items()})

_WHITESPACE_RUN = re.compile(r"\s+")

# Residue left in front of a value after cutting off its label, e.g. "】：" or "> -"
_LEADING_LABEL_RESIDUE = re.compile(r"^[\s:：\]】＞>\-・]+")


def to_half_width(text: str) -> str:
    """
    Convert full-width alphanumerics and punctuation to half-width.

    Shifts every code point in the full-width ASCII block down by a fixed
    offset and turns the ideographic space into an ordinary space. Line
    breaks and all other characters (kana, kanji, 〜) are left untouched.

    Args:
        text: Raw posting text

    Returns:
        Text with half-width ASCII forms
    """
    if not text:
        return ""
    return text.translate(_FULL_WIDTH_TABLE)


def normalize_text(text: str) -> str:
    """
    Fully canonicalize text: half-width forms, single spaces, trimmed ends.

    Tabs, CR, NBSP, newlines and any run of whitespace collapse to one space.
    Total over all strings and idempotent.

    Examples:
        >>> normalize_text("　ＪａｖａＳｃｒｉｐｔ\\t３年  ")
        'JavaScript 3年'
    """
    if not text:
        return ""
    return _WHITESPACE_RUN.sub(" ", to_half_width(text)).strip()


def clean_str(text: str | None) -> str | None:
    """normalize_text, but None for missing or blank input."""
    if not text:
        return None
    value = normalize_text(text)
    return value or None


def normalize_lines(text: str | None) -> str | None:
    """
    Normalize each line separately, keeping line breaks.

    Empty lines are dropped. Used for blocks that are stored verbatim
    (skill blocks, NG conditions) where the line structure carries meaning.
    """
    if not text:
        return None
    lines = [normalize_text(line) for line in to_half_width(text).replace("\r", "").split("\n")]
    value = "\n".join(line for line in lines if line)
    return value or None


def trim_leading_label(text: str | None) -> str | None:
    """Strip colon/bracket/bullet residue left at the start of an extracted value."""
    if text is None:
        return None
    return _LEADING_LABEL_RESIDUE.sub("", text)


def prepare_posting_text(text: str) -> str:
    """
    Normalize a whole posting once for parsing.

    Width normalization plus CR removal; line structure is preserved so that
    heading and line-scoped extractors keep working.
    """
    if not text:
        return ""
    return to_half_width(text).replace("\r\n", "\n").replace("\r", "\n")
