"""
Length-prefixed and fixed-length field extraction.
"""
from typing import NamedTuple, Optional

from .errors import InvalidLength, TruncatedMessage
from .field_dictionary import Encoding, FieldLengthRule, Fixed, Variable


class FieldSlice(NamedTuple):
    raw_value: str
    length: int   # declared length, in units of the field's encoding
    cursor: int   # position just after the field


def _take(text: str, cursor: int, count: int, what: str, field_id: Optional[int]) -> str:
    chunk = text[cursor:cursor + count]
    if len(chunk) < count:
        raise TruncatedMessage(
            f"{what} needs {count} characters, {len(chunk)} left",
            field_id=field_id,
            position=cursor,
        )
    return chunk


def extract_field(
    text: str,
    rule: FieldLengthRule,
    cursor: int = 0,
    encoding: Encoding = Encoding.HEX,
    field_id: Optional[int] = None,
) -> FieldSlice:
    """Consume one field from ``text`` starting at ``cursor``."""
    if isinstance(rule, Fixed):
        length = rule.length
    elif isinstance(rule, Variable):
        prefix = _take(text, cursor, rule.digits, "length prefix", field_id)
        if not (prefix.isascii() and prefix.isdigit()):
            raise InvalidLength(f"length prefix {prefix!r} is not numeric", field_id=field_id, position=cursor)
        length = int(prefix)
        if length > rule.max_length:
            raise InvalidLength(
                f"length {length} exceeds maximum {rule.max_length}",
                field_id=field_id,
                position=cursor,
            )
        cursor += rule.digits
    else:
        raise TypeError(f"unsupported length rule: {rule!r}")

    count = encoding.char_count(length)
    raw_value = _take(text, cursor, count, "field data", field_id)
    return FieldSlice(raw_value, length, cursor + count)
