"""
BER-TLV decoding of ICC (EMV chip) data carried in field 55.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import MalformedHex, TruncatedSubfield
from .hexutil import bytes_to_hex, hex_to_bytes


@dataclass(frozen=True)
class IccTag:
    """A single BER-TLV element of the ICC data."""
    tag: str
    name: str
    length: int
    value: str
    byte_offset: int
    children: Tuple['IccTag', ...] = ()

    def to_dict(self) -> dict:
        out = {"tag": self.tag, "name": self.name, "length": self.length, "value": self.value}
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out

    def __str__(self):
        return f"\t{self.tag:<6} | {self.name:<40} | Len: {self.length:3} | Val: {self.value}"


EMV_TAGS = {
    "4F": "Application Identifier (AID)",
    "50": "Application Label",
    "57": "Track 2 Equivalent Data",
    "5A": "Application PAN",
    "5F20": "Cardholder Name",
    "5F24": "Application Expiration Date",
    "5F25": "Application Effective Date",
    "5F28": "Issuer Country Code",
    "5F2A": "Transaction Currency Code",
    "5F34": "PAN Sequence Number",
    "6F": "FCI Template",
    "70": "Record Template",
    "71": "Issuer Script Template 1",
    "72": "Issuer Script Template 2",
    "77": "Response Message Template Format 2",
    "80": "Response Message Template Format 1",
    "82": "Application Interchange Profile",
    "84": "Dedicated File Name",
    "86": "Issuer Script Command",
    "89": "Authorisation Code",
    "8A": "Authorisation Response Code",
    "91": "Issuer Authentication Data",
    "95": "Terminal Verification Results",
    "9A": "Transaction Date",
    "9B": "Transaction Status Information",
    "9C": "Transaction Type",
    "9F02": "Amount, Authorised",
    "9F03": "Amount, Other",
    "9F06": "Application Identifier (Terminal)",
    "9F07": "Application Usage Control",
    "9F09": "Application Version Number (Terminal)",
    "9F10": "Issuer Application Data",
    "9F12": "Application Preferred Name",
    "9F1A": "Terminal Country Code",
    "9F1E": "Interface Device Serial Number",
    "9F21": "Transaction Time",
    "9F26": "Application Cryptogram",
    "9F27": "Cryptogram Information Data",
    "9F33": "Terminal Capabilities",
    "9F34": "Cardholder Verification Method Results",
    "9F35": "Terminal Type",
    "9F36": "Application Transaction Counter",
    "9F37": "Unpredictable Number",
    "9F41": "Transaction Sequence Counter",
    "9F53": "Transaction Category Code",
    "9F6E": "Form Factor Indicator",
}


def get_tag_name(tag: str) -> str:
    return EMV_TAGS.get(tag, "Unknown")


def _parse(data: bytes, base: int, field_id: Optional[int]) -> List[IccTag]:
    tags = []
    pos = 0

    def truncated(what: str):
        return TruncatedSubfield(
            f"ICC data ends inside a {what} at byte {base + pos}",
            field_id=field_id,
            position=(base + pos) * 2,
        )

    while pos < len(data):
        tag_start = pos
        first = data[pos]
        pos += 1

        # Multi-byte tag when the low five bits are all set
        if (first & 0x1F) == 0x1F:
            while True:
                if pos >= len(data):
                    raise truncated("tag")
                more = data[pos] & 0x80
                pos += 1
                if not more:
                    break
        tag_bytes = data[tag_start:pos]

        if pos >= len(data):
            raise truncated("length")
        length = data[pos]
        pos += 1
        if length & 0x80:
            # Long form length
            length_bytes = length & 0x7F
            if length_bytes == 0 or pos + length_bytes > len(data):
                raise truncated("length")
            length = int.from_bytes(data[pos:pos + length_bytes], "big")
            pos += length_bytes

        if pos + length > len(data):
            raise truncated("value")
        value = data[pos:pos + length]
        value_offset = pos
        pos += length

        # Constructed tags hold nested TLVs
        children = ()
        if first & 0x20:
            children = tuple(_parse(value, base + value_offset, field_id))

        tag = bytes_to_hex(tag_bytes)
        tags.append(IccTag(
            tag=tag,
            name=get_tag_name(tag),
            length=length,
            value=bytes_to_hex(value),
            byte_offset=base + tag_start,
            children=children,
        ))

    return tags


def parse_icc_data(raw_value: str, field_id: Optional[int] = None) -> List[IccTag]:
    """Decode field 55 hex text into a BER-TLV tree."""
    if len(raw_value) % 2 != 0:
        raise TruncatedSubfield("ICC data ends with half a byte", field_id=field_id)
    try:
        data = hex_to_bytes(raw_value)
    except MalformedHex as e:
        raise TruncatedSubfield(f"ICC data is not hex: {e}", field_id=field_id) from e
    return _parse(data, 0, field_id)
