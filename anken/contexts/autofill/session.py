"""
Autofill session: one form, one outstanding AI request.

AutofillSession owns a FormState and a monotonically increasing request
token. Every extraction request takes a new token; an AI result is applied
only if its token is still the latest, so a slow response for an earlier
paste can never overwrite the form after a newer request started. The
network call itself is not cancelled.

Typical flow:
    session = AutofillSession()
    result = session.autofill(posting_text)
    if result.warnings:
        show(result.warnings)
    record = session.form.to_record()
"""

from dataclasses import dataclass, field
from typing import Optional

from anken.contexts.autofill.confidence_merger import merge_draft, merge_with_confidence
from anken.contexts.autofill.exceptions import AINormalizationError
from anken.contexts.autofill.form_state import FormState
from anken.contexts.autofill.logger import _log_debug, _log_error, _log_success, _log_warning
from anken.contexts.intake.exceptions import TextQualityError
from anken.contexts.intake.project_data_structure import ExtractedDraft
from anken.contexts.intake.project_parser import parse_project_text
from anken.contexts.intake.text_quality import QualityThresholds, ensure_usable_text
from anken.utils.ai_endpoint import NormalizationEndpoint, get_endpoint
from anken.utils.config import AutofillSettings, load_settings

AI_FALLBACK_WARNING = "AI正規化に失敗したため、テキスト解析の結果のみを反映しました"
QUALITY_WARNING = "抽出テキストの品質が低い可能性があります。内容を確認してください"


@dataclass
class AutofillResult:
    """Outcome of one autofill request."""

    form: FormState
    draft: ExtractedDraft
    used_ai: bool = False
    warnings: list[str] = field(default_factory=list)


class AutofillSession:
    """
    Form state plus request bookkeeping for a single posting form.

    Args:
        form: Starting form state (default: empty form)
        endpoint: AI normalization endpoint (default: built from settings on first use)
        settings: Autofill settings (default: load_settings())
    """

    def __init__(
        self,
        form: Optional[FormState] = None,
        endpoint: Optional[NormalizationEndpoint] = None,
        settings: Optional[AutofillSettings] = None,
    ):
        self.form = form if form is not None else FormState()
        self.settings = settings if settings is not None else load_settings()
        self._endpoint = endpoint
        self._latest_token = 0

    # =========================================================================
    # REQUEST TOKENS
    # =========================================================================

    def begin_request(self) -> int:
        """Start a new request; results of earlier requests become stale."""
        self._latest_token += 1
        return self._latest_token

    def is_current(self, token: int) -> bool:
        return token == self._latest_token

    # =========================================================================
    # MERGING
    # =========================================================================

    def apply_draft(self, draft: ExtractedDraft) -> FormState:
        """Fill empty form fields from a heuristic draft."""
        self.form = merge_draft(self.form, draft)
        return self.form

    def apply_ai_result(self, token: int, result: dict) -> bool:
        """
        Fill empty form fields from an AI result if the request is still current.

        Returns:
            True if the result was applied, False if it was stale
        """
        if not self.is_current(token):
            _log_debug(f"Ignoring stale AI result (token {token}, latest {self._latest_token})")
            return False
        self.form = merge_with_confidence(
            self.form, result, threshold=self.settings.confidence_threshold
        )
        return True

    def _get_endpoint(self) -> NormalizationEndpoint:
        if self._endpoint is None:
            self._endpoint = get_endpoint(self.settings)
        return self._endpoint

    # =========================================================================
    # AUTOFILL
    # =========================================================================

    def autofill(self, raw_text: str, use_ai: bool = True) -> AutofillResult:
        """
        Parse posting text and fill the form, with optional AI normalization.

        The heuristic draft is merged first. If the AI endpoint fails, the
        form keeps the heuristic values and a recoverable warning is returned.

        Args:
            raw_text: Posting text
            use_ai: Ask the AI endpoint to fill what the heuristics missed

        Returns:
            AutofillResult with the updated form and any warnings
        """
        token = self.begin_request()
        draft = parse_project_text(raw_text)
        self.apply_draft(draft)

        result = AutofillResult(form=self.form, draft=draft)
        if not use_ai:
            return result

        try:
            ai_result = self._get_endpoint().normalize(draft.to_dict(), raw_text)
        except AINormalizationError as e:
            _log_warning(f"AI normalization failed, keeping heuristic result: {e.message}")
            result.warnings.append(AI_FALLBACK_WARNING)
            return result

        result.used_ai = self.apply_ai_result(token, ai_result)
        result.form = self.form
        _log_success(f"Autofill finished (AI applied: {result.used_ai})")
        return result

    def autofill_extracted_text(self, text: str, use_ai: bool = True) -> AutofillResult:
        """
        Autofill from PDF-extracted text after a quality check.

        Raises:
            TextQualityError: If the text is too garbled to use
        """
        try:
            report = ensure_usable_text(text, QualityThresholds(**self.settings.quality))
        except TextQualityError as e:
            _log_error(f"Extracted text rejected: {e.message}")
            raise
        result = self.autofill(text, use_ai=use_ai)
        if report.is_warning:
            result.warnings.insert(0, QUALITY_WARNING)
        return result
