"""
Private sub-field decoders for vendor data carried in fields 48 and 121.

Two token layouts are supported, both with a one byte tag and a one byte
binary length counting the value bytes:

- TLV: tag, length, value
- LTV: length, tag, value
"""
from dataclasses import dataclass
from typing import List, Optional

import construct as cs

from .errors import MalformedHex, TruncatedSubfield
from .hexutil import bytes_to_hex, hex_to_bytes


@dataclass(frozen=True)
class SubfieldEntry:
    """One decoded private sub-field."""
    tag: str     # 2 hex characters
    length: int  # value length in bytes
    value: str   # hex text

    def __str__(self):
        return f"\tTag: {self.tag:>3} | Len: {self.length:3} | Val: {self.value}"


TLV_TOKEN = cs.Struct(
    "tag" / cs.Bytes(1),
    "length" / cs.Int8ub,
    "value" / cs.Bytes(cs.this.length),
)

LTV_TOKEN = cs.Struct(
    "length" / cs.Int8ub,
    "tag" / cs.Bytes(1),
    "value" / cs.Bytes(cs.this.length),
)


def _decode_tokens(token: cs.Struct, raw_value: str, label: str, field_id: Optional[int]) -> List[SubfieldEntry]:
    if len(raw_value) % 2 != 0:
        raise TruncatedSubfield(f"{label} data ends with half a byte", field_id=field_id, position=len(raw_value) - 1)
    try:
        data = hex_to_bytes(raw_value)
    except MalformedHex as e:
        raise TruncatedSubfield(f"{label} data is not hex: {e}", field_id=field_id) from e

    entries = []
    pos = 0
    while pos < len(data):
        try:
            parsed = token.parse(data[pos:])
        except cs.StreamError as e:
            raise TruncatedSubfield(
                f"{label} token at byte {pos} is incomplete ({len(data) - pos} bytes left)",
                field_id=field_id,
                position=pos * 2,
            ) from e
        entries.append(SubfieldEntry(
            tag=bytes_to_hex(parsed.tag),
            length=parsed.length,
            value=bytes_to_hex(parsed.value),
        ))
        pos += 2 + parsed.length
    return entries


def decode_private_tlv(raw_value: str, field_id: Optional[int] = None) -> List[SubfieldEntry]:
    """Split a field value into tag-length-value entries."""
    return _decode_tokens(TLV_TOKEN, raw_value, "TLV", field_id)


def decode_private_ltv(raw_value: str, field_id: Optional[int] = None) -> List[SubfieldEntry]:
    """Split a field value into length-tag-value entries."""
    return _decode_tokens(LTV_TOKEN, raw_value, "LTV", field_id)
