"""
AI normalization endpoint client and response parsing utilities.

The endpoint is a black box: it receives the heuristic draft plus the raw
posting text and returns a JSON object shaped like the draft, optionally
with a "_confidence" map. Calls are retried with exponential backoff on
connection errors; every attempt carries an explicit timeout.
"""

import json
import os
import time
from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, Optional, TypeVar

import requests
from dotenv import load_dotenv
from loguru import logger

from anken.contexts.autofill.exceptions import AINormalizationError
from anken.utils.config import load_settings

load_dotenv()

# Retry configuration
MAX_RETRIES = 3
BASE_DELAY = 1.0

DEFAULT_TIMEOUT_S = 20.0

T = TypeVar("T")

NORMALIZATION_INSTRUCTION = """以下の求人票データを正規化し、可能であれば欠損フィールドのみを推測補完してください。
- 出力は JSON のみ。
- 事実に自信がない場合はフィールドを出力しない（空文字や '不明' は入れない）。
- 数値は半角で、金額は万円基準。
- 勤務形態は remote/onsite/hybrid のいずれか。
- description は120字以内で要約。
- 可能なら _confidence を { フィールド名: 0.0〜1.0 } で付与。0.6未満は出力しない。
- 可能なら languageYears（"JavaScript 3年, Java 2年以上" のような書式）も返す。"""


def _retry_with_backoff(
    operation: Callable[[], T],
    retryable_exception: type[Exception],
    error_message: str,
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
) -> T:
    """
    Execute operation with exponential backoff retry on specific exception.

    Args:
        operation: Callable that performs the request and returns result
        retryable_exception: Exception type that triggers retry
        error_message: Message prefix for retry logging (e.g., "Connection failed")
        max_retries: Total number of attempts
        base_delay: Delay before the second attempt; doubles each time
    """
    for attempt in range(max_retries):
        try:
            return operation()
        except retryable_exception:
            if attempt == max_retries - 1:
                raise
            delay = base_delay * (2**attempt)
            logger.warning(
                f"{error_message}, retrying in {delay:.1f}s... "
                f"(attempt {attempt + 1}/{max_retries})"
            )
            time.sleep(delay)


# --- Request / Response Helpers ---


def build_normalization_request(data: dict, raw_text: Optional[str] = None) -> dict:
    """
    Build the endpoint payload.

    Args:
        data: Heuristic draft as a camelCase dict (may be empty)
        raw_text: Original posting text, when available

    Returns:
        {"instruction", "data", "rawText"?}
    """
    payload = {"instruction": NORMALIZATION_INSTRUCTION, "data": data}
    if raw_text:
        payload["rawText"] = raw_text
    return payload


def parse_json_object(text: str) -> dict:
    """
    Parse a JSON object from a response body.

    Tolerates text around the object (e.g. a fenced code block).

    Raises:
        AINormalizationError: If no JSON object can be found
    """
    text = (text or "").strip()

    # Try direct JSON parse
    try:
        result = json.loads(text)
        if isinstance(result, dict):
            return result
    except json.JSONDecodeError:
        pass

    # Try to find JSON object in the text
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            result = json.loads(text[start : end + 1])
            if isinstance(result, dict):
                return result
        except json.JSONDecodeError:
            pass

    snippet = text[:120] + "..." if len(text) > 120 else text
    raise AINormalizationError(f"Response is not a JSON object: {snippet!r}")


# --- Endpoint Classes ---


class NormalizationEndpoint(ABC):
    """
    Abstract base for AI normalization endpoints.

    Subclasses must:
    - Set _retryable_exception to the exception type that triggers retry
    - Set _retry_message for logging during retries
    - Implement _call_api() for a single request
    """

    _retryable_exception: type[Exception]
    _retry_message: str

    name: str
    max_retries: int = MAX_RETRIES

    @abstractmethod
    def _call_api(self, payload: dict) -> dict:
        """Make a single request (no retries). Implemented by subclasses."""
        pass

    def normalize(self, data: dict, raw_text: Optional[str] = None) -> dict:
        """
        Ask the endpoint to normalize a draft, retrying transient failures.

        Raises:
            AINormalizationError: If every attempt fails or the response is unusable
        """
        payload = build_normalization_request(data, raw_text)
        try:
            return _retry_with_backoff(
                partial(self._call_api, payload),
                self._retryable_exception,
                self._retry_message,
                max_retries=self.max_retries,
            )
        except self._retryable_exception as e:
            raise AINormalizationError(
                f"Endpoint unreachable after {self.max_retries} attempts",
                endpoint=self.name,
                original_error=e,
            ) from e


class HttpNormalizationEndpoint(NormalizationEndpoint):
    """JSON-over-HTTP endpoint (POST payload, JSON object back)."""

    _retryable_exception = requests.ConnectionError
    _retry_message = "Connection failed"

    def __init__(
        self,
        url: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        max_retries: int = MAX_RETRIES,
        api_key: Optional[str] = None,
    ):
        if not url:
            raise ValueError("AI endpoint URL is empty")
        self.url = url
        self.name = url
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.api_key = api_key if api_key is not None else os.getenv("AI_NORMALIZE_API_KEY")

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _call_api(self, payload: dict) -> dict:
        try:
            response = requests.post(
                self.url, json=payload, headers=self._headers(), timeout=self.timeout_s
            )
        except requests.Timeout as e:
            raise AINormalizationError(
                f"Endpoint timed out after {self.timeout_s:.0f}s", endpoint=self.url, original_error=e
            ) from e

        if response.status_code >= 400:
            raise AINormalizationError(
                "Endpoint returned an error status",
                endpoint=self.url,
                status_code=response.status_code,
            )

        return parse_json_object(response.text)


# --- Endpoint Factory ---


def get_endpoint(settings=None) -> NormalizationEndpoint:
    """
    Get the configured normalization endpoint.

    Args:
        settings: AutofillSettings (default: load_settings())

    Returns:
        NormalizationEndpoint instance

    Raises:
        AINormalizationError: If no endpoint URL is configured
    """
    if settings is None:
        settings = load_settings()

    if not settings.endpoint_url:
        raise AINormalizationError("No AI endpoint configured (set AI_NORMALIZE_URL)")

    return HttpNormalizationEndpoint(
        settings.endpoint_url,
        timeout_s=settings.endpoint_timeout_s,
        max_retries=settings.max_retries,
    )
