"""
Codec between the three views of "language + years of experience" data.

    years list   "Java 3年, Python 2年以上"        (free-text field)
    pairs        [LanguagePair("Java", "3年"), ...]  (structured editor)
    names        "Java, Python"                     (names-only field)

All functions are pure and total; None or empty input gives an empty result.
"""

import re
from dataclasses import dataclass

from anken.contexts.intake.normalizer import normalize_text

# Item separator for the list forms
ITEM_SEPARATOR = re.compile(r"[、,]")

# "<name> <N>年" / "<name> <N>年以上" with optional space before the number
NAME_WITH_YEARS = re.compile(r"^(.*?)\s*(\d+(?:\.\d+)?)\s*年(以上)?$")

YEARS_SUFFIX = re.compile(r"\s*\d+(?:\.\d+)?\s*年(?:以上)?")

# "Java3年" -> "Java 3年"
YEARS_SPACING = re.compile(r"(\S)\s*(\d+(?:\.\d+)?)\s*年(以上)?")

JOIN_SEPARATOR = ", "


@dataclass(frozen=True)
class LanguagePair:
    """A technology name with its experience years ("3年", "2年以上" or "")."""

    name: str
    years: str = ""

    def __str__(self) -> str:
        return " ".join(part for part in (self.name.strip(), self.years.strip()) if part)

    @property
    def has_years(self) -> bool:
        return bool(self.years)

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "years": self.years}


def format_years(amount: str, at_least: bool = False) -> str:
    """Canonical years token: ("3", False) -> "3年", ("2", True) -> "2年以上"."""
    return f"{amount}年{'以上' if at_least else ''}"


def _items(years_list: str | None) -> list[str]:
    if not years_list:
        return []
    items = (normalize_text(item) for item in ITEM_SEPARATOR.split(years_list))
    return [item for item in items if item]


def pairs_from_years_list(years_list: str | None) -> list[LanguagePair]:
    """
    Parse a years list into pairs.

    Items without a years suffix become pairs with empty years.

    Examples:
        >>> pairs_from_years_list("Java 3年, Go")
        [LanguagePair(name='Java', years='3年'), LanguagePair(name='Go', years='')]
    """
    pairs = []
    for item in _items(years_list):
        match = NAME_WITH_YEARS.match(item)
        if match and match.group(1).strip():
            pairs.append(
                LanguagePair(match.group(1).strip(), format_years(match.group(2), bool(match.group(3))))
            )
        else:
            pairs.append(LanguagePair(item))
    return pairs


def join_pairs_to_years_list(pairs) -> str:
    """Join pairs as "<name> <years>" with ", " (years omitted when empty)."""
    return JOIN_SEPARATOR.join(text for text in (str(pair) for pair in pairs) if text)


def names_from_years_list(years_list: str | None) -> str:
    """Strip every years suffix and dedupe: "Java 3年, Java" -> "Java"."""
    if not years_list:
        return ""
    names = _items(YEARS_SUFFIX.sub("", years_list))
    return JOIN_SEPARATOR.join(dict.fromkeys(names))


def names_from_pairs(pairs) -> str:
    """Names-only view of a list of pairs, deduplicated."""
    names = (pair.name.strip() for pair in pairs)
    return JOIN_SEPARATOR.join(dict.fromkeys(name for name in names if name))


def normalize_years_list(years_list: str | None) -> str:
    """Tidy spacing and separators: "Java3年、Go 2年以上" -> "Java 3年, Go 2年以上"."""
    return JOIN_SEPARATOR.join(
        YEARS_SPACING.sub(
            lambda m: f"{m.group(1)} {format_years(m.group(2), bool(m.group(3)))}", item, count=1
        )
        for item in _items(years_list)
    )


def split_years_to_badges(years_list: str | None) -> list[str]:
    """One display badge per item."""
    return _items(years_list)
