"""
Autofill context logger.

Provides logging interface for the autofill context with automatic [autofill] prefix.
All autofill modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from anken.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[autofill]"


def setup_autofill_logger(log_dir: Path, use_ai: bool = True) -> Path:
    """
    Setup logger for the autofill context.

    Args:
        log_dir: Directory for this autofill session
        use_ai: Whether the session calls the AI endpoint (recorded in provenance)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="autofill",
        log_dir=log_dir,
        extra_provenance={"AI normalization": "on" if use_ai else "off"},
    )


# Wrapper functions with automatic [autofill] prefix


def _log_info(message: str) -> None:
    """Log info message with [autofill] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [autofill] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [autofill] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [autofill] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [autofill] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_merge_result(source: str, filled: list[str], skipped: dict[str, str]) -> None:
    """
    Log which form fields a merge filled and why others were left alone.

    Args:
        source: "draft" or "ai"
        filled: camelCase keys that received a value
        skipped: camelCase key -> reason ("not empty", "low confidence", ...)
    """
    _log_info(f"Merged {source}: {len(filled)} fields filled, {len(skipped)} skipped")
    if filled:
        _log_debug(f"  Filled: {', '.join(filled)}")
    for key, reason in skipped.items():
        _log_debug(f"  Skipped {key}: {reason}")
