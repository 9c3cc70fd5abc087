import os
import sys
import pytest

# Ensure repo package import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iso8583_viewer.emv_tlv import parse_icc_data
from iso8583_viewer.errors import TruncatedSubfield


def test_primitive_tags_with_two_byte_tag():
    tags = parse_icc_data("9F0206000000001000" "9A03240101")
    assert [(t.tag, t.length, t.value) for t in tags] == [
        ("9F02", 6, "000000001000"),
        ("9A", 3, "240101"),
    ]
    assert tags[0].name == "Amount, Authorised"
    assert tags[1].name == "Transaction Date"


def test_constructed_tag_has_children():
    tags = parse_icc_data("7009" "5A03123456" "9F350122")
    assert len(tags) == 1
    assert tags[0].tag == "70"
    assert [c.tag for c in tags[0].children] == ["5A", "9F35"]
    assert tags[0].children[1].byte_offset == 7


def test_long_form_length():
    tags = parse_icc_data("5A8103123456")
    assert tags[0].length == 3
    assert tags[0].value == "123456"


def test_unknown_tag_name():
    assert parse_icc_data("DF0100")[0].name == "Unknown"


@pytest.mark.parametrize("raw", ["9F0206000000", "9F", "9A", "5A82", "9F02060"])
def test_truncated_icc_data(raw):
    with pytest.raises(TruncatedSubfield):
        parse_icc_data(raw, field_id=55)
