"""
ISO8583 Viewer - decode hex-encoded ISO8583 financial messages.
"""
from .errors import (
    ISO8583Error, MalformedHex, InvalidMTI, TruncatedMessage, TrailingData,
    InvalidLength, UnknownField, TruncatedSubfield, ConflictingOptions,
)
from .field_dictionary import (
    Encoding, Fixed, Variable, FieldDefinition, FIELD_DICTIONARY,
    definition_for, field_name, export_field_names,
)
from .iso_parser import ParsedField, ParsedMessage, parse

__version__ = "1.0.0"
