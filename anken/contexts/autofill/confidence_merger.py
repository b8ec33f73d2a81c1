"""
Confidence-gated merge of extracted values into the form.

Policy for every recognized field:
- Only empty form fields are filled; user input is never overwritten
- The incoming value must be present (not None, blank or a placeholder)
- If a confidence score exists for the field it must reach the threshold
- Skill lists are adopted when the form list is empty, unioned otherwise
- startDate is never filled automatically
- An AI result without an environment fills developmentEnvironment from its
  skill texts as "必須: ..." and "歓迎: ..." lines

Incoming values are coerced to form types first. AI responses are loosely
typed ("80", "在宅", "貸与あり", {"Java": "3年"}) so coercion is lenient and
anything that cannot be coerced is treated as absent.
"""

import re
from typing import Any, Optional

from anken.contexts.autofill.form_state import (
    DATE_FIELDS,
    FORM_FIELDS,
    INT_FIELDS,
    LIST_FIELDS,
    NUMBER_FIELDS,
    FormState,
    is_empty,
)
from anken.contexts.autofill.logger import _log_debug, log_merge_result
from anken.contexts.intake.field_extractors import (
    coerce_boolean_ja,
    coerce_pc_provided,
    detect_work_style,
)
from anken.contexts.intake.language_codec import (
    LanguagePair,
    join_pairs_to_years_list,
)
from anken.contexts.intake.normalizer import clean_str, to_half_width
from anken.contexts.intake.project_data_structure import WORK_STYLES, ExtractedDraft
from anken.contexts.intake.skills import split_skills

DEFAULT_CONFIDENCE_THRESHOLD = 0.6

CONFIDENCE_KEY = "_confidence"

# Keys some AI responses use for form fields
AI_KEY_ALIASES = {
    "pcProvision": "pcProvided",
    "environmentText": "developmentEnvironment",
}

# Values that mean "unknown" and must never fill a field
PLACEHOLDERS = {"不明", "未定", "null", "none", "n/a", "undefined"}

# Loose words the classifier does not know ("在宅", "リモート"), checked in order
WORK_STYLE_WORDS = [
    ("hybrid", re.compile(r"ハイブリッド|一部在宅|一部|hybrid", re.IGNORECASE)),
    ("remote", re.compile(r"リモート|完全在宅|在宅|remote", re.IGNORECASE)),
    ("onsite", re.compile(r"オンサイト|常駐|出社|on-?site", re.IGNORECASE)),
]

_FIRST_NUMBER = re.compile(r"\d+(?:\.\d+)?")

BOOL_FIELDS = ("foreignerAcceptable",)
LANGUAGE_FIELDS = ("languageYears", "language", "languages")


# =============================================================================
# COERCION
# =============================================================================


def _is_placeholder(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() in PLACEHOLDERS


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    match = _FIRST_NUMBER.search(to_half_width(str(value)).replace(",", ""))
    if not match:
        return None
    number = float(match.group(0))
    return int(number) if number.is_integer() else number


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_number(value)
    return int(number) if number is not None else None


def _coerce_work_style(value: Any) -> Optional[str]:
    text = to_half_width(str(value)).strip()
    if text.lower() in WORK_STYLES:
        return text.lower()
    detected = detect_work_style(text)
    if detected:
        return detected
    for style, pattern in WORK_STYLE_WORDS:
        if pattern.search(text):
            return style
    return None


def _coerce_skills(value: Any) -> Optional[list[str]]:
    if isinstance(value, str):
        return split_skills(value)
    if isinstance(value, (list, tuple)):
        items = [clean_str(str(item)) for item in value if item is not None]
        return list(dict.fromkeys(item for item in items if item)) or None
    return None


def _coerce_years_list(value: Any) -> Optional[str]:
    """
    languageYears in any shape the AI sends -> "Java 3年, Go" string.

    Accepts a string, a {name: years} object, or a list of {"name", "years"}.
    """
    if isinstance(value, str):
        return clean_str(value)
    if isinstance(value, dict):
        pairs = [
            LanguagePair(str(name).strip(), clean_str(str(years or "")) or "")
            for name, years in value.items()
        ]
    elif isinstance(value, (list, tuple)):
        pairs = []
        for item in value:
            if isinstance(item, LanguagePair):
                pairs.append(item)
            elif isinstance(item, dict) and item.get("name"):
                name, years = str(item["name"]).strip(), str(item.get("years") or "").strip()
                pairs.append(LanguagePair(name, years))
            elif isinstance(item, str) and item.strip():
                pairs.append(LanguagePair(item.strip()))
    else:
        return None
    return join_pairs_to_years_list(pair for pair in pairs if pair.name) or None


def coerce_value(key: str, value: Any) -> Any:
    """
    Coerce an incoming value to the form type of key.

    Returns:
        The coerced value, or None if it is absent, a placeholder or unusable
    """
    if value is None or _is_placeholder(value):
        return None

    if key in LIST_FIELDS:
        return _coerce_skills(value)
    if key in NUMBER_FIELDS:
        return _coerce_number(value)
    if key in INT_FIELDS:
        return _coerce_int(value)
    if key in BOOL_FIELDS:
        return coerce_boolean_ja(value)
    if key == "pcProvided":
        return coerce_pc_provided(value)
    if key == "workStyle":
        return _coerce_work_style(value)
    if key in LANGUAGE_FIELDS:
        return _coerce_years_list(value)

    if isinstance(value, (list, tuple)):
        value = "\n".join(str(item) for item in value if item is not None)
    text = str(value).strip()
    return text or None


# =============================================================================
# MERGE
# =============================================================================


def _confidence_for(confidence: dict, key: str, source_key: str) -> Optional[float]:
    for candidate in (key, source_key):
        score = confidence.get(candidate)
        if isinstance(score, (int, float)) and not isinstance(score, bool):
            return float(score)
    return None


def _merge_languages(form: FormState, incoming: dict, accept) -> Optional[str]:
    """Fill the language views from languageYears (preferred) or language."""
    if form.languages:
        return "not empty"

    for key in ("languageYears", "languages", "language"):
        if key not in incoming:
            continue
        value = coerce_value(key, incoming[key][1])
        if value is None:
            continue
        reason = accept(key, incoming[key][0])
        if reason:
            return reason
        if key == "language":
            form.language = value
        else:
            form.language_years = value
        return None
    return "absent"


def _environment_from_skills(incoming: dict, accept) -> Optional[str]:
    """Environment text from the raw skill texts, one labelled line each."""
    lines = []
    for key, prefix in (("mustSkillsText", "必須"), ("niceSkillsText", "歓迎")):
        if key not in incoming:
            continue
        source_key, raw = incoming[key]
        value = coerce_value(key, raw)
        if value and not accept(key, source_key):
            lines.append(f"{prefix}: {value}")
    return "\n".join(lines) or None


def _merge(
    form: FormState,
    values: dict,
    confidence: dict,
    threshold: float,
    source: str,
    derive_environment: bool = False,
) -> FormState:
    merged = form.copy()
    filled, skipped = [], {}

    # camelCase form key -> (key as sent, raw value)
    incoming = {}
    for source_key, value in values.items():
        key = AI_KEY_ALIASES.get(source_key, source_key)
        if key in FORM_FIELDS and key not in incoming:
            incoming[key] = (source_key, value)

    def accept(key: str, source_key: str) -> Optional[str]:
        score = _confidence_for(confidence, key, source_key)
        if score is not None and score < threshold:
            return f"low confidence ({score:.2f} < {threshold:.2f})"
        return None

    for key, (source_key, raw) in incoming.items():
        if key in DATE_FIELDS:
            skipped[key] = "dates are never auto-filled"
            continue
        if key in LANGUAGE_FIELDS:
            continue

        value = coerce_value(key, raw)
        if value is None:
            continue

        reason = accept(key, source_key)
        if reason:
            skipped[key] = reason
            continue

        current = merged.get_field(key)
        if key in LIST_FIELDS:
            if is_empty(current):
                merged.set_field(key, value)
                filled.append(key)
            else:
                union = list(dict.fromkeys([*current, *value]))
                if union != current:
                    merged.set_field(key, union)
                    filled.append(key)
            continue

        if not is_empty(current):
            skipped[key] = "not empty"
            continue

        merged.set_field(key, value)
        filled.append(key)

    # No environment arrived: fall back to the skill texts
    if derive_environment and merged.is_field_empty("developmentEnvironment"):
        environment = _environment_from_skills(incoming, accept)
        if environment:
            merged.development_environment = environment
            filled.append("developmentEnvironment")

    if any(key in incoming for key in LANGUAGE_FIELDS):
        reason = _merge_languages(merged, incoming, accept)
        if reason is None:
            filled.append("languageYears")
        elif reason != "absent":
            skipped["languageYears"] = reason

    log_merge_result(source, filled, skipped)
    return merged


def merge_with_confidence(
    form: FormState,
    ai_result: dict,
    confidence: Optional[dict] = None,
    threshold: Optional[float] = None,
) -> FormState:
    """
    Fold an AI-normalized result into the form.

    Args:
        form: Current form state (not modified)
        ai_result: Draft-shaped JSON object from the AI endpoint
        confidence: Field -> score map (default: ai_result["_confidence"])
        threshold: Minimum score for a scored field (default: 0.6)

    Returns:
        New FormState with empty fields filled

    Examples:
        >>> form = merge_with_confidence(FormState(), {"location": "渋谷", "_confidence": {"location": 0.7}})
        >>> form.location
        '渋谷'
    """
    if not isinstance(ai_result, dict):
        _log_debug(f"Ignoring AI result of type {type(ai_result).__name__}")
        return form.copy()

    if confidence is None:
        confidence = ai_result.get(CONFIDENCE_KEY)
    if not isinstance(confidence, dict):
        confidence = {}
    if threshold is None:
        threshold = DEFAULT_CONFIDENCE_THRESHOLD

    values = {key: value for key, value in ai_result.items() if key != CONFIDENCE_KEY}
    return _merge(form, values, confidence, threshold, source="ai", derive_environment=True)


def merge_draft(form: FormState, draft: ExtractedDraft) -> FormState:
    """
    Fold a heuristic draft into the form with the same fill-empty policy.

    Drafts carry no confidence scores, so every detected field is eligible.
    """
    return _merge(form, draft.to_dict(), {}, DEFAULT_CONFIDENCE_THRESHOLD, source="draft")
