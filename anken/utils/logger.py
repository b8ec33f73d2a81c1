"""
Session logging for the anken scripts.

Library code only logs through the context wrappers in
contexts/{context}/logger.py and never configures sinks. A script that wants a
session log calls setup_logger() once; until then loguru's default stderr
handler is used.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(context_name: str, log_dir: Path, extra_provenance: dict = None) -> Path:
    """
    Route logging to <log_dir>/<context_name>.log (DEBUG) and stdout (INFO).

    Args:
        context_name: "intake" or "autofill"
        log_dir: Directory for this session, created if missing
        extra_provenance: Session facts for the header (source, AI on/off)

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    # Postings are Japanese; the platform default encoding may not be UTF-8
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_session_header(context_name, extra_provenance)
    return log_file


def log_session_header(context_name: str, extra_context: dict = None) -> None:
    """Log the command line and the session facts between two rules."""
    logger.info("=" * 80)
    logger.info(f"Context: {context_name}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")
    logger.info("=" * 80)
