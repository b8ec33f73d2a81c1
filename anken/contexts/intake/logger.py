"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from anken.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path, source: str = "text") -> Path:
    """
    Setup logger for the intake context.

    Args:
        log_dir: Directory for this parsing session
        source: Where the posting text came from ("text", "file" or "pdf")

    Returns:
        Path to log file

    Example:
        from anken.contexts.intake.logger import setup_intake_logger, _log_info

        log_file = setup_intake_logger(log_dir, source="file")
        _log_info("Parsing posting...")
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={"Source": source},
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_parse_result(source_name: str, detected: list[str], missing: list[str]) -> None:
    """Log which draft fields a parse produced."""
    _log_info(f"{source_name}: {len(detected)} fields detected")
    _log_debug(f"  Detected: {', '.join(detected) or '-'}")
    _log_debug(f"  Missing: {', '.join(missing) or '-'}")
