"""
Programming language + experience years extraction.

Postings state language requirements in many shapes:

    Java 3年以上 / Java(3年) / Java：3年 / Java 経験 3年
    3年のJava / 3 years of Python / TypeScript, Go

extract_language_years() collects them into an ordered list of LanguagePair,
keyed by canonical language name (js / node.js -> JavaScript).

Two passes:
1. Segment pass - split on commas, newlines, middle dots, slashes and
   semicolons, then look for years next to every alias occurrence.
2. Whole-text pass - three explicit (lang, years) regexes catch pairs that
   segmenting split apart or missed.

A value with years always replaces a value without; never the reverse.
"""

import re
from dataclasses import dataclass

from anken.contexts.intake.language_codec import LanguagePair, format_years
from anken.contexts.intake.normalizer import to_half_width

# =============================================================================
# ALIAS TABLE
# =============================================================================

# Lowercase alias -> canonical name
LANGUAGE_ALIASES = {
    "javascript": "JavaScript",
    "js": "JavaScript",
    "node.js": "JavaScript",
    "nodejs": "JavaScript",
    "node": "JavaScript",
    "typescript": "TypeScript",
    "ts": "TypeScript",
    "python": "Python",
    "py": "Python",
    "java": "Java",
    "kotlin": "Kotlin",
    "scala": "Scala",
    "c#": "C#",
    "csharp": "C#",
    "c++": "C++",
    "cpp": "C++",
    "go": "Go",
    "golang": "Go",
    "rust": "Rust",
    "php": "PHP",
    "ruby": "Ruby",
    "swift": "Swift",
    "dart": "Dart",
    "objective-c": "Objective-C",
    "objc": "Objective-C",
}

_ALIAS_ALTERNATION = "|".join(
    re.escape(alias) for alias in sorted(LANGUAGE_ALIASES, key=len, reverse=True)
)

# An alias standing on its own: "java" never inside "javascript", "go" never inside "google"
_ALIAS_GROUP = rf"(?<![a-z0-9+#.])({_ALIAS_ALTERNATION})(?![a-z0-9+#])"

# 3年 / 2.5年以上 / 3 years / 3yrs (never a calendar year like 2024年)
YEARS = r"(?<![\d.])(\d{1,2}(?:\.\d+)?)\s*(?:年|years?|yrs?)(以上)?"

# Segment boundaries for pass 1
SEGMENT_SPLIT = re.compile(r"[\n,、・/;；]+")


# =============================================================================
# PATTERNS
# =============================================================================


@dataclass(frozen=True)
class SegmentPatterns:
    """Patterns applied to a single lowercased segment."""

    ALIAS_OCCURRENCE: re.Pattern = re.compile(_ALIAS_GROUP, re.IGNORECASE)

    # Applied to the text following an alias occurrence
    YEARS_AFTER_LABEL: re.Pattern = re.compile(rf"^\s*:?\s*{YEARS}", re.IGNORECASE)
    YEARS_IN_PARENS: re.Pattern = re.compile(rf"^\s*\(\s*{YEARS}", re.IGNORECASE)
    YEARS_AFTER_EXPERIENCE: re.Pattern = re.compile(
        rf"^[^\d]{{0,10}}?(?:経験|experience|exp)[^\d]{{0,4}}{YEARS}", re.IGNORECASE
    )

    # Applied to the text preceding an alias occurrence: "3年のjava", "3 years of java",
    # or years opening the segment ("3年 java")
    YEARS_BEFORE_JOINED: re.Pattern = re.compile(rf"{YEARS}\s*(?:の|of)\s*$", re.IGNORECASE)
    YEARS_BEFORE_AT_START: re.Pattern = re.compile(rf"^\s*{YEARS}\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class WholeTextPatterns:
    """Explicit pair patterns run over the whole normalized text."""

    LANG_THEN_YEARS: re.Pattern = re.compile(rf"{_ALIAS_GROUP}\s*[:(]?\s*{YEARS}", re.IGNORECASE)
    YEARS_THEN_LANG: re.Pattern = re.compile(rf"{YEARS}\s*(?:の|of)\s*{_ALIAS_GROUP}", re.IGNORECASE)
    LANG_EXPERIENCE_YEARS: re.Pattern = re.compile(
        rf"{_ALIAS_GROUP}\s*(?:経験|experience|exp)\s*{YEARS}", re.IGNORECASE
    )


# =============================================================================
# EXTRACTION
# =============================================================================


def canonical_language(raw: str) -> str:
    """Canonical name for an alias; unknown names are returned trimmed."""
    key = raw.strip().lower()
    return LANGUAGE_ALIASES.get(key, raw.strip())


def _remember(found: dict, name: str, years: str) -> None:
    previous = found.get(name)
    if previous is None or (years and not previous):
        found[name] = years


def _years_near(segment: str, start: int, end: int) -> str:
    """Years belonging to the alias at segment[start:end], or ""."""
    # Only look up to the next alias so "java 3年 python 2年" keeps them apart
    following = segment[end:]
    next_alias = SegmentPatterns.ALIAS_OCCURRENCE.search(following)
    if next_alias:
        following = following[: next_alias.start()]

    for pattern in (
        SegmentPatterns.YEARS_AFTER_LABEL,
        SegmentPatterns.YEARS_IN_PARENS,
        SegmentPatterns.YEARS_AFTER_EXPERIENCE,
    ):
        match = pattern.search(following)
        if match:
            return format_years(match.group(1), bool(match.group(2)))

    preceding = segment[:start]
    for pattern in (SegmentPatterns.YEARS_BEFORE_JOINED, SegmentPatterns.YEARS_BEFORE_AT_START):
        match = pattern.search(preceding)
        if match:
            return format_years(match.group(1), bool(match.group(2)))

    return ""


def _segment_pass(text: str, found: dict) -> None:
    for raw_segment in SEGMENT_SPLIT.split(text.lower()):
        segment = raw_segment.strip()
        if not segment:
            continue
        for match in SegmentPatterns.ALIAS_OCCURRENCE.finditer(segment):
            name = canonical_language(match.group(1))
            _remember(found, name, _years_near(segment, match.start(), match.end()))


def _whole_text_pass(text: str, found: dict) -> None:
    for pattern in (WholeTextPatterns.LANG_THEN_YEARS, WholeTextPatterns.LANG_EXPERIENCE_YEARS):
        for match in pattern.finditer(text):
            _remember(
                found,
                canonical_language(match.group(1)),
                format_years(match.group(2), bool(match.group(3))),
            )

    for match in WholeTextPatterns.YEARS_THEN_LANG.finditer(text):
        _remember(
            found,
            canonical_language(match.group(3)),
            format_years(match.group(1), bool(match.group(2))),
        )


def extract_language_years(text: str | None) -> list[LanguagePair]:
    """
    Extract programming languages with their required experience years.

    Languages mentioned without any years are kept as bare names, so partial
    information is returned rather than nothing.

    Args:
        text: Posting text or a section of it

    Returns:
        Pairs in first-mention order (empty list when no language is found)

    Examples:
        >>> extract_language_years("Java, Java 3年")
        [LanguagePair(name='Java', years='3年')]
        >>> extract_language_years("3年のPython / node.js")
        [LanguagePair(name='Python', years='3年'), LanguagePair(name='JavaScript', years='')]
    """
    if not text:
        return []

    half = to_half_width(text)
    found: dict[str, str] = {}

    _segment_pass(half, found)
    _whole_text_pass(half, found)

    return [LanguagePair(name, years) for name, years in found.items()]
