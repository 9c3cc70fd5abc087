"""
Primary/secondary bitmap decoding.
"""
import logging
from typing import List, Tuple

from .errors import TruncatedMessage
from .hexutil import bit_positions

logger = logging.getLogger(__name__)

BITMAP_SIZE = 8  # bytes per bitmap


def decode_bitmap(data: bytes, offset: int = 0, force_secondary: bool = False) -> Tuple[List[int], int]:
    """Decode the bitmap starting at ``offset``.

    Returns the present field numbers in ascending order (field 1, the
    secondary bitmap indicator, excluded) and the number of bytes consumed.
    """
    primary = data[offset:offset + BITMAP_SIZE]
    if len(primary) < BITMAP_SIZE:
        raise TruncatedMessage(
            f"primary bitmap needs {BITMAP_SIZE} bytes, {len(primary)} left",
            position=offset * 2,
        )
    fields = [pos + 1 for pos in bit_positions(primary)]
    consumed = BITMAP_SIZE

    if 1 in fields or force_secondary:
        start = offset + BITMAP_SIZE
        secondary = data[start:start + BITMAP_SIZE]
        if len(secondary) < BITMAP_SIZE:
            raise TruncatedMessage(
                f"secondary bitmap needs {BITMAP_SIZE} bytes, {len(secondary)} left",
                position=start * 2,
            )
        fields.extend(pos + 65 for pos in bit_positions(secondary))
        consumed += BITMAP_SIZE

    fields = [f for f in fields if f != 1]
    logger.debug("Bitmap (%d bytes): %s", consumed, fields)
    return fields, consumed
