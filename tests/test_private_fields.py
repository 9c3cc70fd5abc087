import os
import sys
import pytest

# Ensure repo package import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iso8583_viewer.errors import TruncatedSubfield
from iso8583_viewer.private_fields import SubfieldEntry, decode_private_ltv, decode_private_tlv


def test_tlv_single_entry():
    assert decode_private_tlv("0103ABCDEF") == [SubfieldEntry(tag="01", length=3, value="ABCDEF")]


def test_ltv_single_entry():
    assert decode_private_ltv("0301ABCDEF") == [SubfieldEntry(tag="01", length=3, value="ABCDEF")]


def test_tlv_multiple_entries_keep_order():
    entries = decode_private_tlv("0102AAAA" "0200" "1F01FF")
    assert [(e.tag, e.length, e.value) for e in entries] == [
        ("01", 2, "AAAA"),
        ("02", 0, ""),
        ("1F", 1, "FF"),
    ]


def test_ltv_multiple_entries():
    entries = decode_private_ltv("0211" "4869" "0522" "576F726C64")
    assert [(e.tag, e.value) for e in entries] == [("11", "4869"), ("22", "576F726C64")]


def test_empty_value_has_no_entries():
    assert decode_private_tlv("") == []
    assert decode_private_ltv("") == []


def test_decoders_are_not_interchangeable():
    # Each decoder reads the other's layout as a length running past the end.
    with pytest.raises(TruncatedSubfield):
        decode_private_tlv("0301ABCDEF")
    with pytest.raises(TruncatedSubfield):
        decode_private_ltv("0103ABCDEF")


@pytest.mark.parametrize("raw", ["0103ABCDEF01", "0103ABCD", "01", "0103ABCDE"])
def test_tlv_truncated(raw):
    with pytest.raises(TruncatedSubfield):
        decode_private_tlv(raw, field_id=48)


def test_ltv_truncated_reports_field():
    with pytest.raises(TruncatedSubfield) as exc:
        decode_private_ltv("0301ABCDEF05", field_id=121)
    assert exc.value.field_id == 121
