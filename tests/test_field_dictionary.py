import os
import sys
import pytest

# Ensure repo package import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iso8583_viewer.errors import UnknownField
from iso8583_viewer.field_dictionary import (
    FIELD_DICTIONARY, Encoding, Fixed, Variable, definition_for, export_field_names, field_name,
)


def test_pan_is_llvar_numeric():
    d = definition_for(2)
    assert d.name == "PAN"
    assert d.rule == Variable(2, 99)
    assert d.encoding is Encoding.NUMERIC


def test_unknown_field_raises_with_id():
    with pytest.raises(UnknownField) as exc:
        definition_for(8)
    assert exc.value.field_id == 8


def test_dictionary_is_read_only():
    with pytest.raises(TypeError):
        FIELD_DICTIONARY[8] = definition_for(2)


def test_private_and_icc_fields():
    assert {d.id for d in FIELD_DICTIONARY.values() if d.private} == {48, 121}
    assert {d.id for d in FIELD_DICTIONARY.values() if d.icc} == {55}


def test_field_name_falls_back_to_number():
    assert field_name(41) == "Terminal"
    assert field_name(99) == "99"


def test_export_field_names_sorted():
    names = export_field_names()
    ids = [n["id"] for n in names]
    assert ids == sorted(ids)
    assert {"id": 2, "name": "PAN"} in names
    assert len(names) == len(FIELD_DICTIONARY)


def test_encoding_char_count():
    assert Encoding.HEX.char_count(3) == 3
    assert Encoding.NUMERIC.char_count(3) == 4
    assert Encoding.NUMERIC.char_count(6) == 6
    assert Encoding.BINARY.char_count(8) == 16
    assert Encoding.ASCII.char_count(3) == 6
    assert definition_for(3).rule == Fixed(6)
