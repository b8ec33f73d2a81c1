"""
Quality gate for text extracted from PDFs.

PDF text extraction sometimes returns mojibake: control characters, private
use glyphs, or nothing readable at all. assess_text_quality() classifies the
text before it reaches the parser:

    ok       - parse as is
    warning  - garbled in places, parse but tell the user
    fatal    - too garbled to use, ask for manually pasted text instead
"""

import re
from dataclasses import dataclass

from anken.contexts.intake.exceptions import TextQualityError
from anken.contexts.intake.logger import _log_debug, _log_warning

# Kana and common kanji
JAPANESE_CHARS = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
ALNUM_CHARS = re.compile(r"[A-Za-z0-9]")
COMMON_SYMBOLS = re.compile(r"[.,!?;:()\-\s@]")

# Control characters other than tab and line breaks
CONTROL_CHARS = re.compile(r"[\u0000-\u0008\u000B\u000C\u000E-\u001F\u007F-\u009F]")
# Anything outside Latin-1, kana, kanji and CJK punctuation (control characters
# are counted by CONTROL_CHARS only)
UNRECOGNIZED_CHARS = re.compile(
    r"[^\u0000-\u00FF\u3000-\u303F\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]"
)

OK = "ok"
WARNING = "warning"
FATAL = "fatal"


@dataclass(frozen=True)
class QualityThresholds:
    """Ratios and lengths that separate ok / warning / fatal text."""

    fatal_weird_ratio: float = 0.8
    fatal_readable_ratio: float = 0.1
    fatal_min_length: int = 20
    warning_weird_ratio: float = 0.3
    warning_max_length: int = 100
    warning_readable_ratio: float = 0.5
    warning_min_length: int = 50


DEFAULT_THRESHOLDS = QualityThresholds()


@dataclass(frozen=True)
class TextQualityReport:
    """Outcome of a quality check."""

    status: str
    length: int
    readable_ratio: float
    weird_ratio: float
    reason: str = ""

    @property
    def is_fatal(self) -> bool:
        return self.status == FATAL

    @property
    def is_warning(self) -> bool:
        return self.status == WARNING


def _count(pattern: re.Pattern, text: str) -> int:
    return len(pattern.findall(text))


def assess_text_quality(
    text: str, thresholds: QualityThresholds = DEFAULT_THRESHOLDS
) -> TextQualityReport:
    """
    Classify extracted text as ok, warning or fatal.

    Fatal: weird ratio above 0.8, or readable ratio below 0.1 on text longer
    than 20 characters. Warning: weird ratio above 0.3 on text shorter than
    100 characters, or readable ratio below 0.5 on text longer than 50.

    Args:
        text: Extracted text
        thresholds: Override the default ratios

    Returns:
        TextQualityReport (empty text is fatal)
    """
    length = len(text or "")
    if length == 0:
        return TextQualityReport(FATAL, 0, 0.0, 0.0, "no text extracted")

    readable = (
        _count(JAPANESE_CHARS, text) + _count(ALNUM_CHARS, text) + _count(COMMON_SYMBOLS, text)
    )
    weird = _count(CONTROL_CHARS, text) + _count(UNRECOGNIZED_CHARS, text)
    readable_ratio = readable / length
    weird_ratio = weird / length

    _log_debug(
        f"Text quality: length={length} readable={readable_ratio:.2f} weird={weird_ratio:.2f}"
    )

    t = thresholds
    if weird_ratio > t.fatal_weird_ratio:
        reason = "mostly unrecognized characters"
        status = FATAL
    elif readable_ratio < t.fatal_readable_ratio and length > t.fatal_min_length:
        reason = "almost nothing readable"
        status = FATAL
    elif weird_ratio > t.warning_weird_ratio and length < t.warning_max_length:
        reason = "short text with many unrecognized characters"
        status = WARNING
    elif readable_ratio < t.warning_readable_ratio and length > t.warning_min_length:
        reason = "low share of readable characters"
        status = WARNING
    else:
        reason = ""
        status = OK

    return TextQualityReport(status, length, readable_ratio, weird_ratio, reason)


def ensure_usable_text(
    text: str, thresholds: QualityThresholds = DEFAULT_THRESHOLDS
) -> TextQualityReport:
    """
    Gate text before parsing.

    Raises:
        TextQualityError: If the text is too garbled to use

    Returns:
        The report (status ok or warning)
    """
    report = assess_text_quality(text, thresholds)
    if report.is_fatal:
        raise TextQualityError(
            f"Extracted text is unusable ({report.reason}); paste the posting text manually",
            weird_ratio=report.weird_ratio,
            readable_ratio=report.readable_ratio,
            sample=text,
        )
    if report.is_warning:
        _log_warning(f"Extracted text may be garbled: {report.reason}")
    return report
