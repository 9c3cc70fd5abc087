import os
import sys
import pytest

# Ensure repo package import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iso8583_viewer.bitmap import decode_bitmap
from iso8583_viewer.errors import TruncatedMessage


def test_primary_bitmap_only():
    fields, consumed = decode_bitmap(bytes.fromhex("7020000000808000"))
    assert fields == [2, 3, 4, 11, 41, 49]
    assert consumed == 8


def test_secondary_bitmap_first_bit_is_field_65():
    data = bytes.fromhex("8000000000000000" "8000000000000000")
    fields, consumed = decode_bitmap(data)
    assert fields == [65]
    assert consumed == 16


def test_secondary_bitmap_merges_and_drops_field_one():
    data = bytes.fromhex("C000000000000000" "0400000000000001")
    fields, consumed = decode_bitmap(data)
    assert fields == [2, 70, 128]
    assert 1 not in fields
    assert consumed == 16


def test_bitmap_at_offset():
    data = bytes.fromhex("0200" "4000000000000000" "06123456")
    fields, consumed = decode_bitmap(data, 2)
    assert fields == [2]
    assert consumed == 8


def test_force_secondary_reads_second_bitmap():
    data = bytes.fromhex("4000000000000000" "0400000000000000")
    fields, consumed = decode_bitmap(data, force_secondary=True)
    assert fields == [2, 70]
    assert consumed == 16


def test_truncated_primary_bitmap():
    with pytest.raises(TruncatedMessage):
        decode_bitmap(bytes.fromhex("40000000000000"))


def test_truncated_secondary_bitmap():
    with pytest.raises(TruncatedMessage):
        decode_bitmap(bytes.fromhex("8000000000000000" "80000000"))
