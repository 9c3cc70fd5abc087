"""
Errors raised while decoding ISO8583 messages.
"""
from typing import Optional


class ISO8583Error(ValueError):
    """Base class for every decoding failure."""

    def __init__(self, message: str, field_id: Optional[int] = None, position: Optional[int] = None):
        super().__init__(message)
        self.field_id = field_id
        self.position = position

    def __str__(self):
        text = super().__str__()
        if self.field_id is not None:
            text = f"Field {self.field_id}: {text}"
        if self.position is not None:
            text = f"{text} (at character {self.position})"
        return text


class MalformedHex(ISO8583Error):
    """Input is not an even-length string of hex digits."""


class InvalidMTI(ISO8583Error):
    """The Message Type Indicator is not four decimal digits."""


class TruncatedMessage(ISO8583Error):
    """The message ends before a header, bitmap or field is complete."""


class TrailingData(ISO8583Error):
    """Data remains after every field in the bitmap was consumed."""

    def __init__(self, message: str, remaining: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.remaining = remaining


class InvalidLength(ISO8583Error):
    """A variable-length prefix is not numeric or exceeds its maximum."""


class UnknownField(ISO8583Error):
    """The bitmap announces a field the dictionary does not describe."""

    def __init__(self, field_id: int, position: Optional[int] = None):
        super().__init__("field is not implemented", field_id=field_id, position=position)


class TruncatedSubfield(ISO8583Error):
    """A TLV/LTV token stream ends in the middle of a token."""


class ConflictingOptions(ISO8583Error):
    """Mutually exclusive parse options were requested together."""
