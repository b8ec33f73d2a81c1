"""
Reusable patterns and constants for posting field extraction.

This module provides the regex patterns used by field_extractors.py for
budgets, settlement hour bands, work style, schedule fields and yes/no style
attributes. Patterns assume half-width input (see normalizer.to_half_width).

Pattern classes follow the convention from section_patterns.py:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Convenience lists for ordered iteration
"""

import re
from dataclasses import dataclass

# Range separators seen in postings: "~" (from full-width ～), "〜" (wave dash), "-"
RANGE_SEP = r"[~〜\-]"

# Plain or decimal number, e.g. "80" or "80.5"
NUMBER = r"(\d+(?:\.\d+)?)"

# Yen amounts with thousands separators, e.g. "800,000"
YEN_NUMBER = r"(\d[\d,]*)"

MAN_UNIT = r"(?:万円|万)"


# =============================================================================
# BUDGET PATTERNS
# =============================================================================


@dataclass(frozen=True)
class BudgetPatterns:
    """
    Regex patterns for monthly budget/rate extraction (万円 units).

    Ordered from most to least specific; the first pattern that yields a
    non-zero value wins.
    """

    # Lines that talk about money: restrict the search window to these
    CONTEXT_LINE: re.Pattern = re.compile(r"予算|単価|月単価|報酬")

    # 80万〜120万 / 80〜120万円 / 80.5万-90万
    MAN_RANGE: re.Pattern = re.compile(
        rf"{NUMBER}\s*{MAN_UNIT}?\s*{RANGE_SEP}\s*{NUMBER}\s*{MAN_UNIT}"
    )

    # 800,000円〜1,100,000円
    YEN_RANGE: re.Pattern = re.compile(rf"{YEN_NUMBER}\s*円\s*{RANGE_SEP}\s*{YEN_NUMBER}\s*円")

    # 〜70万 (lower bound omitted)
    MAN_MAX_ONLY: re.Pattern = re.compile(rf"{RANGE_SEP}\s*{NUMBER}\s*{MAN_UNIT}")

    # 70万 (single amount, read as the lower bound)
    MAN_SINGLE: re.Pattern = re.compile(rf"{NUMBER}\s*{MAN_UNIT}")

    # 700,000円
    YEN_SINGLE: re.Pattern = re.compile(rf"{YEN_NUMBER}\s*円")


# Only the first few hundred characters of the money lines are searched
BUDGET_WINDOW_CHARS = 300


# =============================================================================
# PAYMENT RANGE (精算幅) PATTERNS
# =============================================================================

# Plausible monthly settlement hours: 80..259
SETTLEMENT_HOURS = r"(8\d|9\d|1\d{2}|2[0-5]\d)"


@dataclass(frozen=True)
class PaymentRangePatterns:
    """
    Regex patterns for settlement hour bands such as "140h〜180h".

    re.ASCII keeps \\b meaningful next to kanji ("精算140h" has a boundary
    between 算 and 1).
    """

    CONTEXT_LINE: re.Pattern = re.compile(r"精算")

    # 10:00〜19:00 - working hours, never an hour band
    CLOCK_RANGE: re.Pattern = re.compile(
        rf"(?:^|\s|[^\d])[0-2]?\d:\d{{2}}\s*{RANGE_SEP}\s*[0-2]?\d:\d{{2}}(?=\s|$|[^\d])",
        re.ASCII,
    )

    # 140h〜180h
    BOTH_HOURS: re.Pattern = re.compile(
        rf"\b{SETTLEMENT_HOURS}\s*h\s*{RANGE_SEP}\s*{SETTLEMENT_HOURS}\s*h\b",
        re.ASCII | re.IGNORECASE,
    )

    # 140〜180h
    RIGHT_HOURS: re.Pattern = re.compile(
        rf"\b{SETTLEMENT_HOURS}\s*{RANGE_SEP}\s*{SETTLEMENT_HOURS}\s*h\b",
        re.ASCII | re.IGNORECASE,
    )

    # 精算幅: 140-180
    LABELLED: re.Pattern = re.compile(
        rf"精算(?:幅)?[:：]?\s*{SETTLEMENT_HOURS}\s*h?\s*{RANGE_SEP}\s*{SETTLEMENT_HOURS}\s*h?\b",
        re.ASCII | re.IGNORECASE,
    )


# Convenience list for iteration (precedence order)
PAYMENT_RANGE_PATTERNS = [
    PaymentRangePatterns.BOTH_HOURS,
    PaymentRangePatterns.RIGHT_HOURS,
    PaymentRangePatterns.LABELLED,
]


# =============================================================================
# WORK STYLE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class WorkStylePatterns:
    """
    Keyword sets for the remote / hybrid / onsite classifier.

    Checked in that order; the first set that matches decides the style.
    """

    REMOTE: re.Pattern = re.compile(
        r"フルリモート|完全リモート|フル在宅|完全在宅|在宅のみ|remote", re.IGNORECASE
    )

    HYBRID: re.Pattern = re.compile(
        r"ハイブリッド|一部在宅|一部出社|一部リモート|リモート併用"
        r"|[週月]\s*\d+\s*[日回](?:程度)?\s*出社|hybrid",
        re.IGNORECASE,
    )

    ONSITE: re.Pattern = re.compile(r"常駐|オンサイト|出社|on-?site", re.IGNORECASE)


WORK_STYLE_PATTERNS = [
    ("remote", WorkStylePatterns.REMOTE),
    ("hybrid", WorkStylePatterns.HYBRID),
    ("onsite", WorkStylePatterns.ONSITE),
]


# =============================================================================
# BOOLEAN (JAPANESE) PATTERNS
# =============================================================================


@dataclass(frozen=True)
class BooleanPatterns:
    """
    Tokens for yes/no style attributes (PC貸与, 外国籍, ...).

    NEGATIVE is checked first: "不可" contains "可" and "貸与なし" contains "貸与".
    """

    NEGATIVE: re.Pattern = re.compile(
        r"なし|無|不可|持参|(?<![a-z])no(?![a-z])|(?<![a-z])false(?![a-z])", re.IGNORECASE
    )

    AFFIRMATIVE: re.Pattern = re.compile(
        r"あり|有|可能|可|貸与|支給|(?<![a-z])yes(?![a-z])|(?<![a-z])true(?![a-z])",
        re.IGNORECASE,
    )

    # PC provision still being negotiated
    PENDING: re.Pattern = re.compile(r"要相談|確認中")


PC_PENDING_VALUE = "要相談"


# =============================================================================
# LABELLED FIELD PATTERNS
# =============================================================================


@dataclass(frozen=True)
class FieldPatterns:
    """
    Single-line label lookups for schedule and contract fields.

    Group 1 always captures the value.
    """

    TITLE_LABEL: re.Pattern = re.compile(
        r"^[ \t]*[【\[]?(?:案件名|タイトル|件名)[】\]]?[ \t]*[:：]?[ \t]*([^\n]+)", re.MULTILINE
    )

    # "【案件名】" / "【タイトル】" left at the start of the first line
    TITLE_MARKER: re.Pattern = re.compile(r"^[【\[]?(?:案件名|タイトル)[】\]]?[:：]?")

    LOCATION: re.Pattern = re.compile(r"勤務地[】\]]?[:：]?\s*([^\n]+)")

    ATTENDANCE: re.Pattern = re.compile(r"出社頻度[】\]]?[:：]?\s*([^\n]+)")

    FULL_REMOTE: re.Pattern = re.compile(r"フルリモート|完全在宅")

    WORKING_HOURS: re.Pattern = re.compile(r"勤務時間[】\]]?[:：]?\s*([^\n]+)")

    FLEX_HOURS: re.Pattern = re.compile(r"(フレックス\([^)\n]+\))")

    WORKING_DAYS_LABEL: re.Pattern = re.compile(r"稼働日数[】\]]?[:：]?\s*([^\n]+)")

    # 週5日 - but not 週2日出社, which is attendance
    WORKING_DAYS_WEEKLY: re.Pattern = re.compile(r"週\s*(\d)\s*日(?!\s*(?:程度)?\s*出社)")

    INTERVIEW_COUNT: re.Pattern = re.compile(r"面談(?:回数)?[】\]]?[:：]?\s*(\d+)")

    PAYMENT_TERMS_SITE: re.Pattern = re.compile(r"(\d{2,3}\s*日サイト)")

    PAYMENT_TERMS_LABEL: re.Pattern = re.compile(r"支払いサイト[】\]]?[:：]?\s*([^\n]+)")

    AGE_LIMIT: re.Pattern = re.compile(r"(\d{2})\s*歳\s*まで")

    # PC line up to the first aside, only when it carries a provision token:
    # "PC貸与あり(Windows)" matches, "社内PCのキッティング" does not
    PC_LINE: re.Pattern = re.compile(
        r"(?<![A-Za-z])PC(?![A-Za-z])[^\n(、。]*?"
        r"(?:あり|有|なし|無|貸与|支給|持参|要相談|確認中)[^\n(、。]*",
        re.IGNORECASE,
    )

    FOREIGNER: re.Pattern = re.compile(r"外国籍[^\n]*?(不可|NG|×|可|OK|○|〇)", re.IGNORECASE)

    COMMERCE_TIER: re.Pattern = re.compile(r"商流(?!制限)[ \t]*[】\]]?[ \t]*[:：\-][ \t]*([^\n]+)")

    COMMERCE_LIMIT: re.Pattern = re.compile(r"商流制限[ \t]*[】\]]?[ \t]*[:：\-][ \t]*([^\n]+)")

    EXPLICIT_LANGUAGE: re.Pattern = re.compile(r"使用言語[】\]]?[:：]?\s*([^\n]+)")


FOREIGNER_NEGATIVE = {"不可", "NG", "ng", "×"}

FULL_REMOTE_VALUE = "フルリモート"


# =============================================================================
# DESCRIPTION SUMMARY PATTERNS
# =============================================================================


@dataclass(frozen=True)
class SummaryPatterns:
    """Patterns used to cut a section into bullet-like fragments."""

    LINE_BREAK: re.Pattern = re.compile(r"[\n\r]+")

    BULLET: re.Pattern = re.compile(r"[・•\-–—◆■▶>]")


DESCRIPTION_MAX_LEN = 120
DESCRIPTION_MAX_BULLETS = 3
