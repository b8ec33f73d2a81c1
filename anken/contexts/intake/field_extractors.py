"""
Single-purpose field extractors for the Intake context.

Every extractor is a pure function text -> value | None. They never raise
on malformed input: a failed extraction simply means "not detected".

Where several patterns could match, precedence is an explicit ordered
strategy list evaluated top to bottom; the first non-empty result wins.
"""

import math
from typing import Callable, Optional, Union

from anken.contexts.intake.extraction_patterns import (
    BUDGET_WINDOW_CHARS,
    DESCRIPTION_MAX_BULLETS,
    DESCRIPTION_MAX_LEN,
    FOREIGNER_NEGATIVE,
    FULL_REMOTE_VALUE,
    PAYMENT_RANGE_PATTERNS,
    PC_PENDING_VALUE,
    WORK_STYLE_PATTERNS,
    BooleanPatterns,
    BudgetPatterns,
    FieldPatterns,
    PaymentRangePatterns,
    SummaryPatterns,
)
from anken.contexts.intake.normalizer import (
    clean_str,
    normalize_text,
    prepare_posting_text,
    to_half_width,
    trim_leading_label,
)

Number = Union[int, float]
BudgetRange = tuple[Optional[Number], Optional[Number]]


# =============================================================================
# NUMERIC HELPERS
# =============================================================================


def _to_number(raw: str) -> Optional[Number]:
    """Parse "80" / "80.5" / "1,000" into int when integral, else float."""
    try:
        value = float(raw.replace(",", ""))
    except (TypeError, ValueError):
        return None
    return int(value) if value.is_integer() else value


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves upward: 72.5 -> 73."""
    return math.floor(value + 0.5)


def _yen_to_man(raw: str) -> Optional[Number]:
    """800,000 (円) -> 80 (万円), rounded to the nearest 万."""
    value = _to_number(raw)
    if value is None:
        return None
    return round_half_up(value / 10000)


def _nonzero(value: Optional[Number]) -> Optional[Number]:
    # 0 is never a real budget; it comes from clock digits and the like
    return value if value else None


# =============================================================================
# BUDGET
# =============================================================================


def _budget_window(text: str) -> str:
    """Restrict the budget search to money lines when there are any."""
    lines = text.split("\n")
    money_lines = [line for line in lines if BudgetPatterns.CONTEXT_LINE.search(line)]
    source = " ".join(money_lines) if money_lines else text
    return source[:BUDGET_WINDOW_CHARS]


def _man_range(ctx: str) -> Optional[BudgetRange]:
    match = BudgetPatterns.MAN_RANGE.search(ctx)
    if match:
        return _to_number(match.group(1)), _to_number(match.group(2))
    return None


def _yen_range(ctx: str) -> Optional[BudgetRange]:
    match = BudgetPatterns.YEN_RANGE.search(ctx)
    if match:
        return _yen_to_man(match.group(1)), _yen_to_man(match.group(2))
    return None


def _man_max_only(ctx: str) -> Optional[BudgetRange]:
    match = BudgetPatterns.MAN_MAX_ONLY.search(ctx)
    if match:
        return None, _to_number(match.group(1))
    return None


def _man_single(ctx: str) -> Optional[BudgetRange]:
    match = BudgetPatterns.MAN_SINGLE.search(ctx)
    if match:
        return _to_number(match.group(1)), None
    return None


def _yen_single(ctx: str) -> Optional[BudgetRange]:
    match = BudgetPatterns.YEN_SINGLE.search(ctx)
    if match:
        return _yen_to_man(match.group(1)), None
    return None


# Precedence order: paired 万, paired 円, max-only 万, single 万, single 円
BUDGET_STRATEGIES: list[Callable[[str], Optional[BudgetRange]]] = [
    _man_range,
    _yen_range,
    _man_max_only,
    _man_single,
    _yen_single,
]


def extract_budget_range(text: str) -> BudgetRange:
    """
    Extract the monthly budget range in 万円.

    The search window is limited to lines mentioning 予算/単価/月単価/報酬 when
    such lines exist, which keeps clock times and dates out of the way.

    Args:
        text: Posting text

    Returns:
        (budget_min, budget_max); either side is None when not found

    Examples:
        >>> extract_budget_range("予算：80万〜120万円")
        (80, 120)
        >>> extract_budget_range("単価: 〜70万")
        (None, 70)
    """
    if not text:
        return None, None

    ctx = _budget_window(prepare_posting_text(text))

    for strategy in BUDGET_STRATEGIES:
        found = strategy(ctx)
        if found is None:
            continue
        budget_min, budget_max = (_nonzero(found[0]), _nonzero(found[1]))
        if budget_min is not None or budget_max is not None:
            return budget_min, budget_max

    return None, None


# =============================================================================
# PAYMENT RANGE (精算幅)
# =============================================================================


def extract_payment_range(text: str) -> Optional[str]:
    """
    Extract the settlement hour band, e.g. "140h-180h".

    Only lines containing 精算 are searched. Clock ranges (10:00〜19:00) are
    removed from the window first and any match that still looks like one is
    rejected. Hour counts outside 80..259 are ignored.

    Examples:
        >>> extract_payment_range("勤務時間：10:00〜17:00、精算：140h〜180h")
        '140h-180h'
    """
    if not text:
        return None

    lines = prepare_posting_text(text).split("\n")
    ctx_lines = [line for line in lines if PaymentRangePatterns.CONTEXT_LINE.search(line)]
    if not ctx_lines:
        return None

    ctx = PaymentRangePatterns.CLOCK_RANGE.sub(" ", " ".join(ctx_lines))

    for pattern in PAYMENT_RANGE_PATTERNS:
        match = pattern.search(ctx)
        if match and not PaymentRangePatterns.CLOCK_RANGE.search(match.group(0)):
            return f"{match.group(1)}h-{match.group(2)}h"

    return None


# =============================================================================
# WORK STYLE
# =============================================================================


def detect_work_style(text: str) -> str:
    """
    Classify the work style as "remote", "hybrid" or "onsite".

    Keyword sets are checked in that order. Returns "" when nothing matches,
    an explicit "no style detected" value kept for the form's select box.

    Examples:
        >>> detect_work_style("フルリモート可")
        'remote'
        >>> detect_work_style("週2日出社")
        'hybrid'
    """
    if not text:
        return ""
    half = to_half_width(text)
    for style, pattern in WORK_STYLE_PATTERNS:
        if pattern.search(half):
            return style
    return ""


# =============================================================================
# BOOLEAN COERCION
# =============================================================================


def coerce_boolean_ja(text) -> Optional[bool]:
    """
    Map Japanese/English yes-no tokens to a bool.

    Negative tokens (なし/無/不可/持参/no/false) are checked before affirmative
    ones (あり/有/可/可能/貸与/支給/yes/true). Unmatched text gives None.
    """
    if isinstance(text, bool):
        return text
    if not text:
        return None
    value = to_half_width(str(text))
    if BooleanPatterns.NEGATIVE.search(value):
        return False
    if BooleanPatterns.AFFIRMATIVE.search(value):
        return True
    return None


def coerce_pc_provided(text) -> Union[bool, str, None]:
    """
    Coerce a PC provision value.

    Like coerce_boolean_ja, but "要相談"/"確認中" return the literal "要相談".
    """
    if isinstance(text, bool):
        return text
    if not text:
        return None
    value = to_half_width(str(text))
    if BooleanPatterns.PENDING.search(value):
        return PC_PENDING_VALUE
    return coerce_boolean_ja(value)


# =============================================================================
# INTEGER FIELDS
# =============================================================================


def _first_int(pattern, text: str) -> Optional[int]:
    if not text:
        return None
    match = pattern.search(prepare_posting_text(text))
    return int(match.group(1)) if match else None


def extract_age_limit(text: str) -> Optional[int]:
    """Upper age limit from "<N>歳まで"."""
    return _first_int(FieldPatterns.AGE_LIMIT, text)


def extract_interview_count(text: str) -> Optional[int]:
    """Number of interviews from "面談(回数)?: N"."""
    return _first_int(FieldPatterns.INTERVIEW_COUNT, text)


# =============================================================================
# LABELLED LINE FIELDS
# =============================================================================


def _pick(pattern, text: str) -> Optional[str]:
    """Cleaned group 1 of the first match, with label residue trimmed."""
    match = pattern.search(text)
    if not match:
        return None
    return clean_str(trim_leading_label(match.group(1)))


def _full_remote_fallback(text: str) -> Optional[str]:
    return FULL_REMOTE_VALUE if FieldPatterns.FULL_REMOTE.search(text) else None


def extract_location(text: str) -> Optional[str]:
    """勤務地 line, else "フルリモート" when the posting is fully remote."""
    if not text:
        return None
    prepared = prepare_posting_text(text)
    return _pick(FieldPatterns.LOCATION, prepared) or _full_remote_fallback(prepared)


def extract_attendance_frequency(text: str) -> Optional[str]:
    """出社頻度 line, else "フルリモート" when the posting is fully remote."""
    if not text:
        return None
    prepared = prepare_posting_text(text)
    return _pick(FieldPatterns.ATTENDANCE, prepared) or _full_remote_fallback(prepared)


def extract_working_hours(text: str) -> Optional[str]:
    """勤務時間 line, else a "フレックス(...)" note."""
    if not text:
        return None
    prepared = prepare_posting_text(text)
    return _pick(FieldPatterns.WORKING_HOURS, prepared) or _pick(
        FieldPatterns.FLEX_HOURS, prepared
    )


def extract_working_days(text: str) -> Optional[str]:
    """稼働日数 line, else "週N日" (attendance like 週2日出社 excluded)."""
    if not text:
        return None
    prepared = prepare_posting_text(text)
    labelled = _pick(FieldPatterns.WORKING_DAYS_LABEL, prepared)
    if labelled:
        return labelled
    match = FieldPatterns.WORKING_DAYS_WEEKLY.search(prepared)
    return f"週{match.group(1)}日" if match else None


def extract_payment_terms(text: str) -> Optional[str]:
    """NN日サイト anywhere, else the 支払いサイト line."""
    if not text:
        return None
    prepared = prepare_posting_text(text)
    site = _pick(FieldPatterns.PAYMENT_TERMS_SITE, prepared)
    if site:
        return site.replace(" ", "")
    return _pick(FieldPatterns.PAYMENT_TERMS_LABEL, prepared)


def extract_commerce_tier(text: str) -> Optional[str]:
    if not text:
        return None
    return _pick(FieldPatterns.COMMERCE_TIER, prepare_posting_text(text))


def extract_commerce_limit(text: str) -> Optional[str]:
    if not text:
        return None
    return _pick(FieldPatterns.COMMERCE_LIMIT, prepare_posting_text(text))


def extract_pc_provided(text: str) -> Union[bool, str, None]:
    """PC provision from the PC line: True/False, "要相談", or None."""
    if not text:
        return None
    match = FieldPatterns.PC_LINE.search(prepare_posting_text(text))
    if not match:
        return None
    return coerce_pc_provided(match.group(0))


def extract_foreigner_acceptable(text: str) -> Optional[bool]:
    """外国籍 可/OK -> True, 不可/NG -> False."""
    if not text:
        return None
    match = FieldPatterns.FOREIGNER.search(prepare_posting_text(text))
    if not match:
        return None
    return match.group(1) not in FOREIGNER_NEGATIVE and match.group(1).upper() != "NG"


def extract_explicit_language(text: str) -> Optional[str]:
    """Value of an explicit 使用言語 line, e.g. "Java 3年, Python"."""
    if not text:
        return None
    return _pick(FieldPatterns.EXPLICIT_LANGUAGE, prepare_posting_text(text))


def extract_title(text: str) -> Optional[str]:
    """
    Posting title.

    An explicit 案件名/タイトル/件名 label wins; otherwise the first non-empty
    line with a leading 【案件名】 style marker removed.
    """
    if not text:
        return None
    prepared = prepare_posting_text(text)

    labelled = _pick(FieldPatterns.TITLE_LABEL, prepared)
    if labelled:
        return labelled

    for line in prepared.split("\n"):
        candidate = clean_str(FieldPatterns.TITLE_MARKER.sub("", normalize_text(line)))
        if candidate:
            return candidate
    return None


# =============================================================================
# DESCRIPTION SUMMARY
# =============================================================================


def summarize_description(raw: Optional[str], max_len: int = DESCRIPTION_MAX_LEN) -> Optional[str]:
    """
    Short description: first bullet-like fragments, truncated.

    Lines are cut at bullet glyphs; the first three fragments are joined with
    " / ". Text without any fragments falls back to the whole cleaned text.
    Results longer than max_len end with "…".
    """
    if not raw:
        return None

    fragments = []
    for line in SummaryPatterns.LINE_BREAK.split(to_half_width(raw)):
        for piece in SummaryPatterns.BULLET.split(line):
            cleaned = clean_str(piece)
            if cleaned:
                fragments.append(cleaned)

    joined = " / ".join(fragments[:DESCRIPTION_MAX_BULLETS]) if fragments else normalize_text(raw)
    if not joined:
        return None
    if len(joined) > max_len:
        return joined[: max_len - 1] + "…"
    return joined
