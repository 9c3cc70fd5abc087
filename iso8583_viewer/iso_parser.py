"""
ISO8583 message parser.

``parse`` walks a hex encoded message in a fixed order: optional length
header, optional TPDU header, MTI, bitmap, then every field announced by the
bitmap in ascending order. The first problem raises an ``ISO8583Error``; no
partial result is returned.
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .bitmap import decode_bitmap
from .emv_tlv import IccTag, parse_icc_data
from .errors import ConflictingOptions, InvalidMTI, TrailingData, TruncatedMessage
from .field_dictionary import FIELD_DICTIONARY, Encoding, FieldDefinition, Fixed, definition_for
from .field_extractor import extract_field
from .hexutil import bytes_to_hex, hex_to_bytes, hex_to_text
from .private_fields import SubfieldEntry, decode_private_ltv, decode_private_tlv

logger = logging.getLogger(__name__)

LENGTH_HEADER_CHARS = 4
TPDU_CHARS = 10
MTI_CHARS = 4


@dataclass(frozen=True)
class ParsedField:
    """A single decoded data element."""
    id: int
    name: str
    length: int
    raw_value: str
    value: str
    subfields: Optional[Tuple[SubfieldEntry, ...]] = None
    emv_tags: Optional[Tuple[IccTag, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "length": self.length,
            "raw": self.raw_value,
            "value": self.value,
        }
        if self.subfields is not None:
            out["subfields"] = [
                {"tag": s.tag, "length": s.length, "value": s.value} for s in self.subfields
            ]
        if self.emv_tags is not None:
            out["emv_tags"] = [t.to_dict() for t in self.emv_tags]
        return out


@dataclass(frozen=True)
class ParsedMessage:
    """Result of one successful parse."""
    mti: str
    bitmap: Tuple[int, ...]
    fields: Mapping[int, ParsedField]
    primary_bitmap: str
    secondary_bitmap: Optional[str] = None
    message_length: Optional[int] = None
    header: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.message_length is not None:
            out["message_length"] = self.message_length
        if self.header is not None:
            out["header"] = self.header
        out["mti"] = self.mti
        out["primary_bitmap"] = self.primary_bitmap
        if self.secondary_bitmap is not None:
            out["secondary_bitmap"] = self.secondary_bitmap
        out["bitmap"] = list(self.bitmap)
        out["fields"] = [f.to_dict() for f in self.fields.values()]
        return out


def _display_value(definition: FieldDefinition, raw_value: str, length: int) -> str:
    if definition.encoding is Encoding.ASCII:
        return hex_to_text(raw_value)
    if definition.encoding is Encoding.NUMERIC:
        # odd length BCD: fixed fields pad on the left, variable ones on the right
        if isinstance(definition.rule, Fixed):
            return raw_value[len(raw_value) - length:]
        return raw_value[:length]
    return raw_value


def _take(text: str, cursor: int, count: int, what: str) -> Tuple[str, int]:
    chunk = text[cursor:cursor + count]
    if len(chunk) < count:
        raise TruncatedMessage(f"{what} needs {count} characters, {len(chunk)} left", position=cursor)
    return chunk, cursor + count


def parse(
    message: str,
    including_header_length: bool = False,
    tlv_private: bool = False,
    ltv_private: bool = False,
    *,
    tpdu: bool = False,
    emv: bool = False,
    dictionary: Mapping[int, FieldDefinition] = FIELD_DICTIONARY,
) -> ParsedMessage:
    """Decode a hex encoded ISO8583 message.

    Args:
        message: Hex text without separators.
        including_header_length: The message starts with a 2-byte hex byte
            count of the rest of the message, which is validated.
        tlv_private: Decode private fields as tag-length-value.
        ltv_private: Decode private fields as length-tag-value.
        tpdu: A 5-byte TPDU header precedes the MTI.
        emv: Decode ICC data (field 55) as BER-TLV.
        dictionary: Field definitions to decode with.

    Raises:
        ISO8583Error: On the first decoding problem.
    """
    if tlv_private and ltv_private:
        raise ConflictingOptions("TLV and LTV private decoding are mutually exclusive")

    data = hex_to_bytes(message)
    text = bytes_to_hex(data)
    cursor = 0
    logger.debug("Parsing %d bytes", len(data))

    message_length = None
    if including_header_length:
        prefix, cursor = _take(text, cursor, LENGTH_HEADER_CHARS, "message length header")
        message_length = int(prefix, 16)
        actual = (len(text) - cursor) // 2
        if actual < message_length:
            raise TruncatedMessage(
                f"incorrect message length, expected {message_length} bytes but got {actual}",
                position=cursor,
            )
        if actual > message_length:
            raise TrailingData(
                f"incorrect message length, expected {message_length} bytes but got {actual}",
                remaining=text[cursor + message_length * 2:],
                position=cursor + message_length * 2,
            )
        logger.debug("Message length header: %d bytes", message_length)

    header = None
    if tpdu:
        header, cursor = _take(text, cursor, TPDU_CHARS, "TPDU header")
        logger.debug("TPDU header: %s", header)

    mti_position = cursor
    mti, cursor = _take(text, cursor, MTI_CHARS, "MTI")
    if not mti.isdigit():
        raise InvalidMTI(f"MTI {mti!r} is not four decimal digits", position=mti_position)
    logger.debug("MTI: %s", mti)

    field_ids, consumed = decode_bitmap(data, cursor // 2)
    primary_bitmap = text[cursor:cursor + 16]
    secondary_bitmap = text[cursor + 16:cursor + 32] if consumed > 8 else None
    cursor += consumed * 2

    fields: Dict[int, ParsedField] = {}
    for field_id in field_ids:
        definition = definition_for(field_id, dictionary)
        start = cursor
        raw_value, length, cursor = extract_field(
            text, definition.rule, cursor, definition.encoding, field_id=field_id
        )
        logger.debug("Field %d at %d: length %d, raw %s", field_id, start, length, raw_value)

        subfields = None
        if definition.private and tlv_private:
            subfields = tuple(decode_private_tlv(raw_value, field_id))
        elif definition.private and ltv_private:
            subfields = tuple(decode_private_ltv(raw_value, field_id))

        emv_tags = None
        if definition.icc and emv:
            emv_tags = tuple(parse_icc_data(raw_value, field_id))

        fields[field_id] = ParsedField(
            id=field_id,
            name=definition.name or str(field_id),
            length=length,
            raw_value=raw_value,
            value=_display_value(definition, raw_value, length),
            subfields=subfields,
            emv_tags=emv_tags,
        )

    if cursor < len(text):
        remaining = text[cursor:]
        raise TrailingData(
            f"{len(remaining)} characters left after the last field: {remaining}",
            remaining=remaining,
            position=cursor,
        )

    return ParsedMessage(
        mti=mti,
        bitmap=tuple(field_ids),
        fields=MappingProxyType(fields),
        primary_bitmap=primary_bitmap,
        secondary_bitmap=secondary_bitmap,
        message_length=message_length,
        header=header,
    )
