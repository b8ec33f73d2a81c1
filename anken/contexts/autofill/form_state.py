"""
Editable form state for a project posting.

FormState is the live superset of ExtractedDraft that the user edits. It
exposes three views of the same language/years data:

    languages       [LanguagePair("Java", "3年"), ...]   structured editor
    language_years  "Java 3年, Python 2年以上"             free-text field
    language        "Java, Python"                       names-only field

Only `languages` is stored. The other two are properties computed from it,
and writing either of them rewrites `languages` through the codec, so the
three views can never disagree.
"""

import copy
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union

from anken.contexts.intake.field_extractors import round_half_up
from anken.contexts.intake.language_codec import (
    LanguagePair,
    join_pairs_to_years_list,
    names_from_pairs,
    normalize_years_list,
    pairs_from_years_list,
    split_years_to_badges,
)
from anken.contexts.intake.project_data_structure import FIELD_ALIASES
from anken.utils.timestamp import format_record_date, parse_record_date

Number = Union[int, float]

# camelCase key -> FormState attribute
FORM_FIELDS = {camel: attr for attr, camel in FIELD_ALIASES.items()}
FORM_FIELDS.update(
    {
        "languageYears": "language_years",
        "language": "language",
        "languages": "languages",
        "startDate": "start_date",
    }
)

LIST_FIELDS = ("mustSkills", "niceSkills")
NUMBER_FIELDS = ("budgetMin", "budgetMax")
INT_FIELDS = ("interviewCount", "ageLimit")
DATE_FIELDS = ("startDate",)


def is_empty(value: Any) -> bool:
    """Unset for merge purposes: None, blank string or empty collection."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


@dataclass
class FormState:
    """
    Project form contents.

    Text fields default to "", numbers and tri-state booleans to None.
    """

    title: str = ""
    description: str = ""
    detailed_description: str = ""
    recruitment_background: str = ""

    must_skills: list[str] = field(default_factory=list)
    nice_skills: list[str] = field(default_factory=list)
    must_skills_text: str = ""
    nice_skills_text: str = ""

    budget_min: Optional[Number] = None
    budget_max: Optional[Number] = None
    work_style: str = ""
    start_date: Optional[date] = None

    commerce_tier: str = ""
    commerce_limit: str = ""
    location: str = ""
    working_hours: str = ""
    working_days: str = ""
    attendance_frequency: str = ""
    interview_count: Optional[int] = None
    payment_range: str = ""
    payment_terms: str = ""
    age_limit: Optional[int] = None
    foreigner_acceptable: Optional[bool] = None
    pc_provided: Optional[Union[bool, str]] = None
    ng_conditions: str = ""
    development_environment: str = ""

    # Authoritative language/years data
    languages: list[LanguagePair] = field(default_factory=list)

    # =========================================================================
    # LANGUAGE VIEWS
    # =========================================================================

    @property
    def language_years(self) -> str:
        """Combined "Java 3年, Python" view."""
        return join_pairs_to_years_list(self.languages)

    @language_years.setter
    def language_years(self, value: Optional[str]) -> None:
        self.languages = pairs_from_years_list(normalize_years_list(value))

    @property
    def language(self) -> str:
        """Names-only "Java, Python" view."""
        return names_from_pairs(self.languages)

    @language.setter
    def language(self, value: Optional[str]) -> None:
        # Names that survive the edit keep their years; new names start without
        known_years = {pair.name: pair.years for pair in self.languages}
        names = dict.fromkeys(pair.name for pair in pairs_from_years_list(value))
        self.languages = [LanguagePair(name, known_years.get(name, "")) for name in names]

    def language_badges(self) -> list[str]:
        """One display badge per language ("Java 3年")."""
        return split_years_to_badges(self.language_years)

    # =========================================================================
    # KEYED ACCESS
    # =========================================================================

    def get_field(self, key: str) -> Any:
        """Value of a camelCase field."""
        return getattr(self, FORM_FIELDS[key])

    def set_field(self, key: str, value: Any) -> None:
        """Set a camelCase field (language views go through the codec)."""
        if key in DATE_FIELDS:
            value = parse_record_date(value)
        setattr(self, FORM_FIELDS[key], value)

    def is_field_empty(self, key: str) -> bool:
        return is_empty(self.get_field(key))

    def copy(self) -> "FormState":
        return copy.deepcopy(self)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def to_record(self) -> dict:
        """
        Flatten to the persistence record.

        - Budget values rounded to whole 万円, swapped when min > max
        - Skill lists deduplicated, order kept
        - startDate as YYYY-MM-DD
        - Empty strings and unset values omitted
        """
        budget_min = round_half_up(self.budget_min) if self.budget_min is not None else None
        budget_max = round_half_up(self.budget_max) if self.budget_max is not None else None
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            budget_min, budget_max = budget_max, budget_min

        record = {
            "title": self.title,
            "description": self.description,
            "detailedDescription": self.detailed_description,
            "recruitmentBackground": self.recruitment_background,
            "mustSkills": list(dict.fromkeys(self.must_skills)),
            "niceSkills": list(dict.fromkeys(self.nice_skills)),
            "mustSkillsText": self.must_skills_text,
            "niceSkillsText": self.nice_skills_text,
            "budgetMin": budget_min,
            "budgetMax": budget_max,
            "workStyle": self.work_style,
            "startDate": format_record_date(self.start_date),
            "language": self.language,
            "languageYears": self.language_years,
            "commerceTier": self.commerce_tier,
            "commerceLimit": self.commerce_limit,
            "location": self.location,
            "workingHours": self.working_hours,
            "workingDays": self.working_days,
            "attendanceFrequency": self.attendance_frequency,
            "interviewCount": self.interview_count,
            "paymentRange": self.payment_range,
            "paymentTerms": self.payment_terms,
            "ageLimit": self.age_limit,
            "foreignerAcceptable": self.foreigner_acceptable,
            "pcProvided": self.pc_provided,
            "ngConditions": self.ng_conditions,
            "developmentEnvironment": self.development_environment,
        }
        cleaned = {
            key: value.strip() if isinstance(value, str) else value for key, value in record.items()
        }
        return {key: value for key, value in cleaned.items() if value is not None and value != ""}
