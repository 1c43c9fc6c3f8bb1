"""
Unit tests for the code page 273 translation table.
"""

import pytest

from ebcdic_converter.codepage import (
    EBCDIC_TO_LATIN1,
    LATIN1_TO_EBCDIC,
    encode,
    is_representable,
    translate,
)


class TestTranslationTable:
    """Tests for the forward table."""

    def test_table_has_256_entries(self):
        assert len(EBCDIC_TO_LATIN1) == 256

    @pytest.mark.parametrize("ebcdic_byte,latin1_byte", [
        (0x40, 0x20),  # space
        (0x4B, 0x2E),  # .
        (0xC1, 0x41),  # A
        (0xE9, 0x5A),  # Z
        (0x81, 0x61),  # a
        (0xF0, 0x30),  # 0
        (0xF9, 0x39),  # 9
        (0x4A, 0xC4),  # Ä
        (0x6A, 0xF6),  # ö
        (0xA1, 0xDF),  # ß
        (0xC0, 0xE4),  # ä
        (0x7F, 0x22),  # "
        (0xBB, 0x7C),  # |
        (0x25, 0x0A),  # LF
        (0x0D, 0x0D),  # CR
        (0x9F, 0x3F),  # Euro slot
    ])
    def test_known_characters(self, ebcdic_byte, latin1_byte):
        assert translate(bytes([ebcdic_byte])) == bytes([latin1_byte])

    def test_translate_text(self):
        assert translate(b'\xc8\x81\x93\x93\x96') == b'Hallo'

    def test_translate_accepts_memoryview(self):
        data = memoryview(bytearray(b'\xf1\xf2\xf3'))
        assert translate(data[1:]) == b'23'


class TestInverseTable:
    """Tests for the Latin-1 to EBCDIC direction."""

    def test_round_trip_for_every_representable_byte(self):
        for value in range(256):
            if is_representable(value):
                assert translate(encode(bytes([value]))) == bytes([value])

    def test_round_trip_for_every_ebcdic_byte_except_euro(self):
        for value in range(256):
            if value == 0x9F:
                continue
            assert encode(translate(bytes([value]))) == bytes([value])

    def test_euro_slot_shares_question_mark(self):
        assert LATIN1_TO_EBCDIC[ord('?')] == 0x6F

    def test_currency_sign_is_not_representable(self):
        assert not is_representable(0xA4)
        assert LATIN1_TO_EBCDIC[0xA4] == 0x3F

    def test_encode_text(self):
        assert encode("Größe 1") == b'\xc7\x99\x6a\xa1\x85\x40\xf1'
