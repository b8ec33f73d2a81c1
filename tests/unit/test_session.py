"""
Unit tests for AutofillSession.

A scripted endpoint stands in for the AI service, so these tests cover the
fallback path and stale-result handling without network access.
"""

import pytest

from anken.contexts.autofill.exceptions import AINormalizationError
from anken.contexts.autofill.form_state import FormState
from anken.contexts.autofill.session import (
    AI_FALLBACK_WARNING,
    QUALITY_WARNING,
    AutofillSession,
)
from anken.contexts.intake.exceptions import TextQualityError
from anken.utils.ai_endpoint import NormalizationEndpoint
from anken.utils.config import AutofillSettings

POSTING = """【案件名】ECサイト刷新
勤務地：渋谷
単価：70万〜80万
"""


class ScriptedEndpoint(NormalizationEndpoint):
    """Endpoint that returns a fixed result or raises a fixed error."""

    _retryable_exception = ConnectionError
    _retry_message = "Connection failed"
    name = "scripted"

    def __init__(self, result=None, error=None, on_call=None):
        self.result = result
        self.error = error
        self.on_call = on_call
        self.payloads = []

    def _call_api(self, payload: dict) -> dict:
        self.payloads.append(payload)
        if self.on_call:
            self.on_call()
        if self.error:
            raise self.error
        return self.result


def make_session(**kwargs) -> AutofillSession:
    return AutofillSession(settings=AutofillSettings(), **kwargs)


class TestRequestTokens:
    """Tests for stale AI result handling."""

    def test_tokens_increase(self):
        """Each request takes a newer token; older ones stop being current."""
        session = make_session()
        first = session.begin_request()
        second = session.begin_request()

        assert second > first
        assert session.is_current(second)
        assert not session.is_current(first)

    def test_stale_result_ignored(self):
        """A result for an old token is dropped; the current one applies."""
        session = make_session()
        stale = session.begin_request()
        current = session.begin_request()

        assert session.apply_ai_result(stale, {"location": "渋谷"}) is False
        assert session.form.location == ""

        assert session.apply_ai_result(current, {"location": "渋谷"}) is True
        assert session.form.location == "渋谷"

    def test_result_arriving_after_newer_request_is_dropped(self):
        """A request started during the AI call makes its result stale."""
        session = make_session()
        endpoint = ScriptedEndpoint(
            result={"attendanceFrequency": "週1回"}, on_call=session.begin_request
        )
        session._endpoint = endpoint

        result = session.autofill(POSTING)

        assert result.used_ai is False
        assert session.form.attendance_frequency == ""


class TestAutofill:
    """Tests for AutofillSession.autofill."""

    def test_heuristics_only(self):
        """Without AI the heuristic draft fills the form, no warnings."""
        session = make_session()

        result = session.autofill(POSTING, use_ai=False)

        assert result.used_ai is False
        assert result.warnings == []
        assert result.form.title == "ECサイト刷新"
        assert result.form.location == "渋谷"
        assert (result.form.budget_min, result.form.budget_max) == (70, 80)

    def test_ai_fills_what_heuristics_missed(self):
        """AI values fill only the gaps; the draft and raw text are sent."""
        endpoint = ScriptedEndpoint(
            result={
                "attendanceFrequency": "週1回",
                "location": "新宿",
                "_confidence": {"attendanceFrequency": 0.9},
            }
        )
        session = make_session(endpoint=endpoint)

        result = session.autofill(POSTING)

        assert result.used_ai is True
        assert result.form.attendance_frequency == "週1回"
        # Heuristic value already filled the field
        assert result.form.location == "渋谷"
        assert endpoint.payloads[0]["data"]["location"] == "渋谷"
        assert endpoint.payloads[0]["rawText"] == POSTING

    def test_ai_failure_keeps_heuristic_result(self):
        """An endpoint error leaves the heuristic form and a warning."""
        endpoint = ScriptedEndpoint(error=AINormalizationError("boom", endpoint="scripted"))
        session = make_session(endpoint=endpoint)

        result = session.autofill(POSTING)

        assert result.used_ai is False
        assert result.warnings == [AI_FALLBACK_WARNING]
        assert result.form.location == "渋谷"

    def test_missing_endpoint_configuration_is_recoverable(self):
        """No configured endpoint is a warning, not an error."""
        session = make_session()

        result = session.autofill(POSTING)

        assert result.warnings == [AI_FALLBACK_WARNING]
        assert result.form.title == "ECサイト刷新"

    def test_configured_threshold_applies(self):
        """The session uses the threshold from its settings."""
        endpoint = ScriptedEndpoint(
            result={"attendanceFrequency": "週1回", "_confidence": {"attendanceFrequency": 0.8}}
        )
        session = AutofillSession(
            endpoint=endpoint, settings=AutofillSettings(confidence_threshold=0.9)
        )

        session.autofill(POSTING)

        assert session.form.attendance_frequency == ""

    def test_user_input_survives(self):
        """Typed values are kept through autofill."""
        session = make_session(form=FormState(location="品川"))

        session.autofill(POSTING, use_ai=False)

        assert session.form.location == "品川"


class TestAutofillExtractedText:
    """Tests for the PDF text path with its quality gate."""

    def test_garbled_text_rejected(self):
        """Unusable extracted text raises TextQualityError."""
        session = make_session()

        with pytest.raises(TextQualityError):
            session.autofill_extracted_text("\ue000" * 40, use_ai=False)

    def test_questionable_text_warns(self):
        """Questionable text is parsed with a quality warning."""
        session = make_session()
        text = "勤務地: 渋谷\n" + "é" * 60

        result = session.autofill_extracted_text(text, use_ai=False)

        assert result.warnings == [QUALITY_WARNING]
        assert result.form.location == "渋谷"
