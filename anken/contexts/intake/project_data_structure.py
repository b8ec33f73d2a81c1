"""
Project posting data structure for the Intake context.

ExtractedDraft is the immutable result of one parse: every field is optional
and None means "not detected". Sentinel strings are never stored.

The Autofill context reads drafts through to_dict(), which uses the camelCase
field names shared with the form, the AI endpoint and the persistence record.
"""

from dataclasses import dataclass, fields
from typing import Optional, Union

from anken.contexts.intake.language_codec import LanguagePair, join_pairs_to_years_list

# Draft attribute -> camelCase record key
FIELD_ALIASES = {
    "title": "title",
    "description": "description",
    "detailed_description": "detailedDescription",
    "recruitment_background": "recruitmentBackground",
    "must_skills": "mustSkills",
    "nice_skills": "niceSkills",
    "must_skills_text": "mustSkillsText",
    "nice_skills_text": "niceSkillsText",
    "budget_min": "budgetMin",
    "budget_max": "budgetMax",
    "work_style": "workStyle",
    "location": "location",
    "working_hours": "workingHours",
    "working_days": "workingDays",
    "attendance_frequency": "attendanceFrequency",
    "interview_count": "interviewCount",
    "payment_range": "paymentRange",
    "payment_terms": "paymentTerms",
    "age_limit": "ageLimit",
    "foreigner_acceptable": "foreignerAcceptable",
    "pc_provided": "pcProvided",
    "ng_conditions": "ngConditions",
    "development_environment": "developmentEnvironment",
    "commerce_tier": "commerceTier",
    "commerce_limit": "commerceLimit",
    "language_years": "languageYears",
}

WORK_STYLES = ("remote", "onsite", "hybrid")


@dataclass(frozen=True)
class ExtractedDraft:
    """
    Structured fields extracted from one posting.

    Skill lists and language pairs are tuples so the draft stays hashable
    and immutable once produced.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    detailed_description: Optional[str] = None
    recruitment_background: Optional[str] = None

    # Skills
    must_skills: Optional[tuple[str, ...]] = None
    nice_skills: Optional[tuple[str, ...]] = None
    must_skills_text: Optional[str] = None
    nice_skills_text: Optional[str] = None

    # Budget in 万円
    budget_min: Optional[Union[int, float]] = None
    budget_max: Optional[Union[int, float]] = None

    # Schedule and work style
    work_style: Optional[str] = None
    location: Optional[str] = None
    working_hours: Optional[str] = None
    working_days: Optional[str] = None
    attendance_frequency: Optional[str] = None

    # Contract terms
    interview_count: Optional[int] = None
    payment_range: Optional[str] = None
    payment_terms: Optional[str] = None
    age_limit: Optional[int] = None
    foreigner_acceptable: Optional[bool] = None
    pc_provided: Optional[Union[bool, str]] = None
    commerce_tier: Optional[str] = None
    commerce_limit: Optional[str] = None

    # Blocks stored verbatim
    ng_conditions: Optional[str] = None
    development_environment: Optional[str] = None

    language_years: Optional[tuple[LanguagePair, ...]] = None

    def __post_init__(self):
        if self.work_style is not None and self.work_style not in WORK_STYLES:
            raise ValueError(f"Unknown work style: {self.work_style!r}")

    @property
    def language_years_text(self) -> Optional[str]:
        """Combined "Java 3年, Python" view of language_years."""
        if not self.language_years:
            return None
        return join_pairs_to_years_list(self.language_years)

    def detected_fields(self) -> list[str]:
        """Names of the fields that were detected, in declaration order."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def missing_fields(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is None]

    def to_dict(self) -> dict:
        """
        camelCase record of the detected fields.

        Absent fields are omitted. Skill tuples become lists and
        languageYears becomes a list of {"name", "years"} dicts.
        """
        record = {}
        for name in self.detected_fields():
            value = getattr(self, name)
            if name == "language_years":
                value = [pair.to_dict() for pair in value]
            elif isinstance(value, tuple):
                value = list(value)
            record[FIELD_ALIASES[name]] = value
        return record
