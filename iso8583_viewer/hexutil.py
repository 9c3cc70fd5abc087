"""
Hexadecimal and bit helpers shared by the decoder and its front ends.
"""
import re
from typing import List

from .errors import MalformedHex


_NON_HEX_RE = re.compile(r"[^0-9A-Fa-f]")
_SEPARATORS_RE = re.compile(r"[\s\"']")


def hex_to_bytes(s: str) -> bytes:
    """Convert hex text to bytes.

    Unlike ``bytes.fromhex`` no whitespace is accepted: every character must be
    a hex digit and the length must be even.
    """
    bad = _NON_HEX_RE.search(s)
    if bad is not None:
        raise MalformedHex(f"invalid hex character {bad.group(0)!r}", position=bad.start())
    if len(s) % 2 != 0:
        raise MalformedHex(f"odd hex string length {len(s)}")
    return bytes.fromhex(s)


def bytes_to_hex(data: bytes) -> str:
    return data.hex().upper()


def bit_positions(data: bytes) -> List[int]:
    """Return the 0-based indexes of set bits, most significant bit first."""
    positions = []
    for byte_index, byte in enumerate(data):
        for bit in range(8):
            if byte & (0x80 >> bit):
                positions.append(byte_index * 8 + bit)
    return positions


def hex_to_text(s: str) -> str:
    """Decode hex text into a string, one character per byte (Latin-1)."""
    return hex_to_bytes(s).decode("latin-1")


def clean_message(s: str) -> str:
    """Drop quotes and whitespace pasted along with a message."""
    return _SEPARATORS_RE.sub("", s or "")
