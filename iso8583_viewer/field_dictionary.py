"""
Static ISO8583 field dictionary.

Each supported data element is described by its length rule, the way its
length maps onto hex characters (``Encoding``) and a display name. The table
is built once at import time and exposed read-only.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Union

from .errors import UnknownField


class Encoding(Enum):
    """How a declared field length maps onto characters of the hex text."""
    HEX = "hex"          # one character per unit, no padding
    NUMERIC = "numeric"  # packed BCD, odd lengths padded to a whole byte
    BINARY = "binary"    # length counts bytes (two characters each)
    ASCII = "ascii"      # length counts text characters, one byte each

    def char_count(self, length: int) -> int:
        """Number of hex characters occupied by ``length`` units."""
        if self is Encoding.NUMERIC:
            return length + (length % 2)
        if self in (Encoding.BINARY, Encoding.ASCII):
            return length * 2
        return length


@dataclass(frozen=True)
class Fixed:
    """Field of exactly ``length`` units."""
    length: int


@dataclass(frozen=True)
class Variable:
    """Field preceded by a decimal length prefix of ``digits`` characters."""
    digits: int
    max_length: int


FieldLengthRule = Union[Fixed, Variable]


@dataclass(frozen=True)
class FieldDefinition:
    id: int
    name: str
    rule: FieldLengthRule
    encoding: Encoding = Encoding.HEX
    private: bool = False  # may carry TLV/LTV private sub-fields
    icc: bool = False      # carries EMV BER-TLV chip data


_N = Encoding.NUMERIC
_B = Encoding.BINARY
_A = Encoding.ASCII

_DEFINITIONS = [
    FieldDefinition(2, "PAN", Variable(2, 99), _N),
    FieldDefinition(3, "Process Code", Fixed(6), _N),
    FieldDefinition(4, "Transaction Amount", Fixed(12), _N),
    FieldDefinition(5, "Settlement Amount", Fixed(12), _N),
    FieldDefinition(6, "Cardholder Billing Amount", Fixed(12), _N),
    FieldDefinition(7, "Transaction Date and Time", Fixed(10), _N),
    FieldDefinition(9, "Conversion rate, settlement", Fixed(8), _N),
    FieldDefinition(10, "Conversion rate, cardholder billing", Fixed(8), _N),
    FieldDefinition(11, "Trace", Fixed(6), _N),
    FieldDefinition(12, "Time", Fixed(6), _N),
    FieldDefinition(13, "Date", Fixed(4), _N),
    FieldDefinition(14, "Card Expiration Date", Fixed(4), _N),
    FieldDefinition(15, "Settlement Date", Fixed(4), _N),
    FieldDefinition(18, "Merchant Category Code", Fixed(4), _N),
    FieldDefinition(19, "Acquirer Country Code", Fixed(3), _N),
    FieldDefinition(22, "POS Entry Mode", Fixed(4), _N),
    FieldDefinition(23, "Card Sequence Number", Fixed(3), _N),
    FieldDefinition(24, "Network International Identifier", Fixed(4), _N),
    FieldDefinition(25, "POS Condition Code", Fixed(2), _N),
    FieldDefinition(32, "Institution Identification Code Acquiring", Variable(2, 11), _N),
    FieldDefinition(35, "Track2", Variable(2, 37), _N),
    FieldDefinition(37, "Retrieval Ref #", Fixed(12), _A),
    FieldDefinition(38, "Authorization Code", Fixed(6), _A),
    FieldDefinition(39, "Response Code", Fixed(2), _A),
    FieldDefinition(41, "Terminal", Fixed(8), _A),
    FieldDefinition(42, "Acceptor", Fixed(15), _A),
    FieldDefinition(43, "Card Acceptor Name/Location", Fixed(20), _A),
    FieldDefinition(44, "Additional response data", Variable(2, 25), _A),
    FieldDefinition(45, "Track 1 Data", Variable(2, 76), _N),
    FieldDefinition(48, "Additional Data", Variable(4, 999), _B, private=True),
    FieldDefinition(49, "Transaction Currency Code", Fixed(3), _A),
    FieldDefinition(50, "Settlement Currency Code", Fixed(3), _A),
    FieldDefinition(51, "Billing Currency Code", Fixed(3), _A),
    FieldDefinition(52, "PinBlock", Fixed(8), _B),
    FieldDefinition(54, "Amount", Variable(4, 120), _A),
    FieldDefinition(55, "ICC Data", Variable(4, 999), _B, icc=True),
    FieldDefinition(60, "Reserved Private", Variable(4, 999), _B),
    FieldDefinition(62, "Private", Variable(4, 999), _A),
    FieldDefinition(64, "MAC", Fixed(8), _B),
    FieldDefinition(70, "Network Management Information Code", Fixed(3), _N),
    FieldDefinition(116, "Reserved National", Variable(4, 999), _A),
    FieldDefinition(121, "Additional Data", Variable(4, 999), _B, private=True),
    FieldDefinition(122, "Additional Data", Variable(4, 999), _A),
    FieldDefinition(128, "MAC", Fixed(8), _B),
]

FIELD_DICTIONARY: Mapping[int, FieldDefinition] = MappingProxyType(
    {definition.id: definition for definition in _DEFINITIONS}
)


def definition_for(field_id: int, dictionary: Mapping[int, FieldDefinition] = FIELD_DICTIONARY) -> FieldDefinition:
    """Look up a field definition, raising ``UnknownField`` when absent."""
    try:
        return dictionary[field_id]
    except KeyError:
        raise UnknownField(field_id) from None


def field_name(field_id: int) -> str:
    """Display name of a field, falling back to its number."""
    definition = FIELD_DICTIONARY.get(field_id)
    if definition is None or not definition.name:
        return str(field_id)
    return definition.name


def export_field_names() -> List[Dict[str, object]]:
    """Enumerate ``{id, name}`` pairs for display."""
    return [{"id": fid, "name": field_name(fid)} for fid in sorted(FIELD_DICTIONARY)]
