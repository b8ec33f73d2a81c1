"""
Project posting parser for the Intake context.

Turns free-form posting text into an ExtractedDraft. This module has no
knowledge of the form: it returns an immutable draft that the Autofill
context folds into FormState.

Pipeline:
1. Normalize once (width only, line breaks kept)
2. Slice the labelled sections (詳細, 業務内容, 募集背景, 開発環境, NG, スキル)
3. Run every field extractor over the normalized text
4. Extract language/years pairs with explicit-label precedence
5. Derive the short and detailed descriptions

parse_project_text() never raises. A failing extractor leaves its field
absent and is logged.
"""

from pathlib import Path
from typing import Callable, Optional

from anken.contexts.intake.field_extractors import (
    detect_work_style,
    extract_age_limit,
    extract_attendance_frequency,
    extract_budget_range,
    extract_commerce_limit,
    extract_commerce_tier,
    extract_explicit_language,
    extract_foreigner_acceptable,
    extract_interview_count,
    extract_location,
    extract_payment_range,
    extract_payment_terms,
    extract_pc_provided,
    extract_title,
    extract_working_days,
    extract_working_hours,
    summarize_description,
)
from anken.contexts.intake.language_codec import LanguagePair
from anken.contexts.intake.language_years import extract_language_years
from anken.contexts.intake.logger import _log_debug, _log_warning, log_parse_result
from anken.contexts.intake.normalizer import normalize_lines, prepare_posting_text
from anken.contexts.intake.project_data_structure import ExtractedDraft
from anken.contexts.intake.section_extractor import pick_section
from anken.contexts.intake.section_patterns import SECTION_LABEL_GROUPS
from anken.contexts.intake.skills import split_skills

# Scalar fields filled by a single extractor over the whole text
SCALAR_EXTRACTORS: dict[str, Callable] = {
    "title": extract_title,
    "location": extract_location,
    "working_hours": extract_working_hours,
    "working_days": extract_working_days,
    "attendance_frequency": extract_attendance_frequency,
    "interview_count": extract_interview_count,
    "payment_range": extract_payment_range,
    "payment_terms": extract_payment_terms,
    "age_limit": extract_age_limit,
    "foreigner_acceptable": extract_foreigner_acceptable,
    "pc_provided": extract_pc_provided,
    "commerce_tier": extract_commerce_tier,
    "commerce_limit": extract_commerce_limit,
}


def _attempt(field_name: str, extractor: Callable, *args):
    """Run one extractor; an unexpected error only costs that field."""
    try:
        return extractor(*args)
    except Exception as e:
        _log_warning(f"Extractor for '{field_name}' failed: {type(e).__name__}: {e}")
        return None


def extract_sections(text: str) -> dict[str, str]:
    """
    Slice every labelled section out of prepared posting text.

    Args:
        text: Text from prepare_posting_text()

    Returns:
        Dict of section name (description, duties, ...) to body, found sections only
    """
    sections = {}
    for name, labels in SECTION_LABEL_GROUPS.items():
        body = _attempt(f"section:{name}", pick_section, text, labels)
        if body:
            sections[name] = body
    return sections


def extract_languages(text: str, environment: Optional[str]) -> list[LanguagePair]:
    """
    Language/years pairs with source precedence.

    Priority:
    1. Explicit 使用言語 line
    2. Development environment section
    3. Whole posting text
    """
    for source_name, source in (
        ("使用言語 line", extract_explicit_language(text)),
        ("environment section", environment),
        ("whole text", text),
    ):
        pairs = extract_language_years(source)
        if pairs:
            _log_debug(f"Languages taken from {source_name}: {len(pairs)} found")
            return pairs
    return []


def _as_tuple(items) -> Optional[tuple]:
    return tuple(items) if items else None


def parse_project_text(raw_text: str) -> ExtractedDraft:
    """
    Parse a job posting into an ExtractedDraft.

    Args:
        raw_text: Posting text as pasted or extracted from a PDF

    Returns:
        ExtractedDraft; undetected fields are None
    """
    text = prepare_posting_text(raw_text or "")
    if not text.strip():
        return ExtractedDraft()

    sections = extract_sections(text)

    values = {
        name: _attempt(name, extractor, text) for name, extractor in SCALAR_EXTRACTORS.items()
    }

    budget = _attempt("budget", extract_budget_range, text) or (None, None)
    values["budget_min"], values["budget_max"] = budget

    # "" means no style detected; the draft stores that as absent
    values["work_style"] = _attempt("work_style", detect_work_style, text) or None

    must_block = sections.get("must_skills")
    nice_block = sections.get("nice_skills")
    values["must_skills"] = _as_tuple(_attempt("must_skills", split_skills, must_block))
    values["nice_skills"] = _as_tuple(_attempt("nice_skills", split_skills, nice_block))
    values["must_skills_text"] = must_block
    values["nice_skills_text"] = nice_block

    environment = sections.get("environment")
    values["development_environment"] = environment
    values["ng_conditions"] = sections.get("ng")
    values["recruitment_background"] = sections.get("background")
    values["language_years"] = _as_tuple(
        _attempt("language_years", extract_languages, text, environment)
    )

    # Short summary prefers the description block, the detailed one prefers duties
    description_source = sections.get("description") or sections.get("duties") or text
    values["description"] = _attempt("description", summarize_description, description_source)
    values["detailed_description"] = (
        sections.get("duties") or sections.get("description") or normalize_lines(text)
    )

    draft = ExtractedDraft(**values)
    log_parse_result("posting", draft.detected_fields(), draft.missing_fields())
    return draft


def parse_project_file(file_path: Path) -> ExtractedDraft:
    """
    Parse a job posting from a UTF-8 text file.

    Args:
        file_path: Path to the posting text

    Returns:
        ExtractedDraft with all extracted information
    """
    text = Path(file_path).read_text(encoding="utf-8")
    return parse_project_text(text)
