"""
Pattern matching for posting section identification.

This module provides the heading label groups and regex builders used to
locate labelled blocks (案件詳細, 業務内容, 開発環境, ...) in loosely formatted
Japanese postings.

Pattern classes follow the convention from extraction_patterns.py:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass

# =============================================================================
# HEADING DECORATION
# =============================================================================

# Opening bracket / leading bullet glyphs tolerated in front of a heading label
HEADING_OPEN = r"[【\[<]?"
HEADING_MARKER = r"[■◆●◇\*・\-]?"

# Closing bracket / trailing marker tolerated after the label
HEADING_CLOSE = r"[】\]>■◆]?"

# A closing bracket alone separates label and body: "【必須スキル】Java、AWS"
BRACKET_CLOSE = r"[】\]]"


# =============================================================================
# SECTION LABEL GROUPS
# =============================================================================


@dataclass(frozen=True)
class SectionLabels:
    """
    Synonym groups for section headings.

    Each group is a tuple of labels that name the same logical section.
    These aren't meant to be exhaustive. They have been collected from real
    SES postings pasted into the form.
    """

    DESCRIPTION: tuple = ("案件詳細", "概要", "説明", "詳細", "プロジェクト概要", "案件概要")

    DUTIES: tuple = ("業務内容", "仕事内容", "職務内容", "作業内容", "担当業務", "業務概要")

    BACKGROUND: tuple = ("募集背景", "募集理由", "背景", "ポジション背景")

    ENVIRONMENT: tuple = (
        "開発環境",
        "使用技術",
        "技術スタック",
        "利用技術",
        "環境",
        "ツール",
        "言語",
    )

    NG: tuple = ("NG条件", "応募NG", "不可", "禁止")

    MUST_SKILLS: tuple = (
        "必須スキル",
        "必須条件",
        "必須要件",
        "必須経験",
        "必須",
        "応募要件",
        "応募資格",
        "求めるスキル",
        "スキル",
    )

    NICE_SKILLS: tuple = (
        "歓迎スキル",
        "歓迎要件",
        "歓迎",
        "あれば尚可",
        "あると尚可",
        "尚可",
        "尚良",
    )

    # Labels that end a block but are never extracted as sections themselves
    BOUNDARY_ONLY: tuple = (
        "案件名",
        "タイトル",
        "使用言語",
        "開発言語",
        "勤務地",
        "勤務時間",
        "稼働日数",
        "出社頻度",
        "予算",
        "単価",
        "月単価",
        "報酬",
        "精算幅",
        "精算",
        "支払いサイト",
        "商流制限",
        "商流",
        "面談回数",
        "面談",
        "年齢",
        "外国籍",
        "PC",
        "開始時期",
        "期間",
        "備考",
        "応募方法",
    )


# Mapping of section names to their label groups
SECTION_LABEL_GROUPS = {
    "description": SectionLabels.DESCRIPTION,
    "duties": SectionLabels.DUTIES,
    "background": SectionLabels.BACKGROUND,
    "environment": SectionLabels.ENVIRONMENT,
    "ng": SectionLabels.NG,
    "must_skills": SectionLabels.MUST_SKILLS,
    "nice_skills": SectionLabels.NICE_SKILLS,
}

# Every label that marks the start of a new block
ALL_HEADING_LABELS = tuple(
    label
    for group in (*SECTION_LABEL_GROUPS.values(), SectionLabels.BOUNDARY_ONLY)
    for label in group
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def label_alternation(labels) -> str:
    """
    Build a regex alternation from labels, longest first.

    Longest-first keeps "必須スキル" from being shadowed by "必須".
    """
    ordered = sorted(dict.fromkeys(labels), key=len, reverse=True)
    return "|".join(re.escape(label) for label in ordered)


def inline_heading_pattern(labels) -> re.Pattern:
    """
    Pattern for "label: body" or "【label】body" on a single line.

    Group 1 captures the body after the colon or closing bracket.
    """
    return re.compile(
        rf"^[ \t]*{HEADING_OPEN}{HEADING_MARKER}[ \t]*(?:{label_alternation(labels)})"
        rf"[ \t]*(?:{HEADING_CLOSE}[ \t]*[:：]|{BRACKET_CLOSE}[ \t]*[:：]?)[ \t]*([^\n]+)",
        re.MULTILINE | re.IGNORECASE,
    )


def block_heading_pattern(labels) -> re.Pattern:
    """Pattern for a line that is purely a heading (optional colon, nothing after)."""
    return re.compile(
        rf"^[ \t]*{HEADING_OPEN}{HEADING_MARKER}[ \t]*(?:{label_alternation(labels)})"
        rf"[ \t]*{HEADING_CLOSE}[ \t]*[:：]?[ \t]*$",
        re.MULTILINE | re.IGNORECASE,
    )


def any_heading_pattern(labels) -> re.Pattern:
    """
    Pattern for a line that starts a new block, either inline or bare.

    Used to find where the current block ends.
    """
    return re.compile(
        rf"^[ \t]*{HEADING_OPEN}{HEADING_MARKER}[ \t]*(?:{label_alternation(labels)})"
        rf"[ \t]*(?:{HEADING_CLOSE}[ \t]*(?:[:：]|$)|{BRACKET_CLOSE})",
        re.MULTILINE | re.IGNORECASE,
    )


NEXT_HEADING_PATTERN = any_heading_pattern(ALL_HEADING_LABELS)
