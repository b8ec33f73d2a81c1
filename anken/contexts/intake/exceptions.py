"""Custom exceptions for the intake context."""

from typing import Optional


class TextQualityError(Exception):
    """
    Exception raised when extracted posting text is too garbled to parse.

    Attributes:
        message: Error description
        weird_ratio: Share of control/unrecognized characters
        readable_ratio: Share of readable characters
        sample: Start of the rejected text
    """

    def __init__(
        self,
        message: str,
        weird_ratio: Optional[float] = None,
        readable_ratio: Optional[float] = None,
        sample: Optional[str] = None,
    ):
        self.message = message
        self.weird_ratio = weird_ratio
        self.readable_ratio = readable_ratio
        self.sample = sample

        # Build enhanced error message
        parts = [message]

        if weird_ratio is not None and readable_ratio is not None:
            parts.append(f"Weird characters: {weird_ratio:.0%}, readable: {readable_ratio:.0%}")

        if sample:
            snippet = sample[:80] + "..." if len(sample) > 80 else sample
            parts.append(f"\nText sample:\n{snippet}")

        super().__init__("\n".join(parts))
