"""
Integration tests for the autofill flow.
Tests: posting text → draft → form merge (+ scripted AI result) → persistence record.
"""

from pathlib import Path

import pytest

from anken.contexts.autofill.form_state import FormState
from anken.contexts.autofill.session import AI_FALLBACK_WARNING, AutofillSession
from anken.utils.ai_endpoint import NormalizationEndpoint
from anken.utils.config import AutofillSettings

FIXTURES_PATH = Path(__file__).parents[1] / "fixtures"


class FixedEndpoint(NormalizationEndpoint):
    _retryable_exception = ConnectionError
    _retry_message = "Connection failed"
    name = "fixed"

    def __init__(self, result: dict):
        self.result = result

    def _call_api(self, payload: dict) -> dict:
        return self.result


def read_posting(name: str) -> str:
    return (FIXTURES_PATH / f"{name}.txt").read_text(encoding="utf-8")


@pytest.mark.integration
def test_record_from_heuristics_only():
    """Heuristic draft alone produces a complete persistence record."""
    session = AutofillSession(settings=AutofillSettings())

    session.autofill(read_posting("block_posting"), use_ai=False)
    record = session.form.to_record()

    assert record["title"] == "大手ECサイトのバックエンド刷新"
    assert (record["budgetMin"], record["budgetMax"]) == (70, 85)
    assert record["workStyle"] == "hybrid"
    assert record["languageYears"] == "Java 3年以上, TypeScript"
    assert record["language"] == "Java, TypeScript"
    assert record["mustSkills"] == ["Javaでの開発経験3年以上", "Spring Boot", "SQL"]
    assert "startDate" not in record


@pytest.mark.integration
def test_ai_result_fills_gaps_only():
    """AI values fill what the heuristics missed, gated by confidence."""
    endpoint = FixedEndpoint(
        {
            "attendanceFrequency": "週2日",
            "commerceLimit": "2次請けまで",
            "location": "大阪",
            "workingDays": "週4日",
            "startDate": "2025-05-01",
            "_confidence": {"attendanceFrequency": 0.85, "commerceLimit": 0.4},
        }
    )
    session = AutofillSession(endpoint=endpoint, settings=AutofillSettings())

    result = session.autofill(read_posting("block_posting"))
    record = result.form.to_record()

    assert result.used_ai is True
    assert record["attendanceFrequency"] == "週2日"
    assert "commerceLimit" not in record
    assert record["location"] == "東京都渋谷区"
    assert record["workingDays"] == "週5日"
    assert "startDate" not in record


@pytest.mark.integration
def test_fallback_when_endpoint_missing():
    """Without an endpoint the user still gets the heuristic result and a warning."""
    session = AutofillSession(settings=AutofillSettings())

    result = session.autofill(read_posting("inline_posting"))

    assert result.warnings == [AI_FALLBACK_WARNING]
    assert result.form.pc_provided == "要相談"
    assert result.form.language_years == "Java 5年, JavaScript"


@pytest.mark.integration
def test_second_paste_keeps_user_edits():
    """Re-running autofill never overwrites what is already in the form."""
    session = AutofillSession(form=FormState(title="手入力のタイトル"), settings=AutofillSettings())

    session.autofill(read_posting("inline_posting"), use_ai=False)
    session.autofill(read_posting("block_posting"), use_ai=False)

    assert session.form.title == "手入力のタイトル"
    # Budget max from the first posting stays, min comes from the second
    assert (session.form.budget_min, session.form.budget_max) == (70, 75)
    # Skill lists grow by union
    assert session.form.must_skills[:3] == ["Java", "Spring", "Git"]
    assert "SQL" in session.form.must_skills
