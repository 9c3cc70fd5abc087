import os
import sys
import pytest

# Ensure repo package import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iso8583_viewer.errors import InvalidLength, TruncatedMessage
from iso8583_viewer.field_dictionary import Encoding, Fixed, Variable
from iso8583_viewer.field_extractor import extract_field


def test_fixed_consumes_to_end():
    raw, length, cursor = extract_field("ABC", Fixed(3))
    assert raw == "ABC"
    assert length == 3
    assert cursor == 3


def test_fixed_truncated():
    with pytest.raises(TruncatedMessage):
        extract_field("AB", Fixed(3))


def test_fixed_from_cursor():
    raw, _, cursor = extract_field("XX123456YY", Fixed(6), 2)
    assert raw == "123456"
    assert cursor == 8


def test_variable_llvar():
    raw, length, cursor = extract_field("0512345", Variable(2, 99))
    assert raw == "12345"
    assert length == 5
    assert cursor == 7


def test_variable_non_numeric_prefix():
    with pytest.raises(InvalidLength):
        extract_field("AB12345", Variable(2, 99))


def test_variable_prefix_over_maximum():
    with pytest.raises(InvalidLength):
        extract_field("12" + "0" * 12, Variable(2, 11), field_id=32)


def test_variable_data_truncated():
    with pytest.raises(TruncatedMessage) as exc:
        extract_field("99" + "1" * 20, Variable(2, 99), field_id=2)
    assert exc.value.field_id == 2


def test_variable_prefix_truncated():
    with pytest.raises(TruncatedMessage):
        extract_field("0", Variable(2, 99))


def test_numeric_odd_length_keeps_pad_nibble():
    raw, length, cursor = extract_field("05123450FF", Variable(2, 99), encoding=Encoding.NUMERIC)
    assert raw == "123450"
    assert length == 5
    assert cursor == 8


def test_binary_lllvar_counts_bytes():
    raw, length, cursor = extract_field("0002ABCD", Variable(4, 999), encoding=Encoding.BINARY)
    assert raw == "ABCD"
    assert length == 2
    assert cursor == 8


def test_ascii_fixed_counts_characters():
    raw, length, cursor = extract_field("3030", Fixed(2), encoding=Encoding.ASCII)
    assert raw == "3030"
    assert cursor == 4
