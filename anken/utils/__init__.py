"""
Shared utilities for ANKEN.

Common functionality used across contexts:
- Logging setup
- Configuration loading
- AI normalization endpoint client
- Date formatting
"""

from anken.utils.timestamp import format_record_date, parse_record_date

__all__ = ["format_record_date", "parse_record_date"]
