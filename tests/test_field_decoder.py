"""
Unit tests for field decoding.
"""

import pytest

from ebcdic_converter.field_decoder import (
    convert_date,
    decode_field,
    format_decimal,
    trim,
    unpack,
    unzone,
)
from ebcdic_converter.schema_reader import FieldDescriptor
from ebcdic_converter.types_and_errors import DecodeFault


def make_field(type_code, length, output_length=None, precision=0, name="FELD"):
    return FieldDescriptor(
        name=name,
        type_code=type_code,
        input_from=1,
        input_to=length,
        output_length=length if output_length is None else output_length,
        precision=precision,
    )


class TestTrim:
    """Tests for whitespace trimming and reserved byte removal."""

    def test_strips_surrounding_whitespace(self):
        assert trim(b'  ABC \t') == b'ABC'

    def test_drops_quotes_and_pipes(self):
        assert trim(b'  A"B|C  ') == b'ABC'

    def test_keeps_interior_spaces(self):
        assert trim(b' Hans  Meier ') == b'Hans  Meier'

    def test_blank_value_becomes_empty(self):
        assert trim(b'     ') == b''

    def test_interior_line_breaks_are_kept(self):
        assert trim(b'\nA\rB\n') == b'A\rB'


class TestUnpack:
    """Tests for packed decimal (COMP-3) decoding."""

    def test_positive(self):
        assert unpack(b'\x12\x34\x5C') == 12345

    def test_negative(self):
        assert unpack(b'\x12\x34\x5D') == -12345

    def test_unsigned(self):
        assert unpack(b'\x12\x34\x5F') == 12345

    def test_single_byte(self):
        assert unpack(b'\x7D') == -7

    def test_negative_zero_is_zero(self):
        assert unpack(b'\x00\x0D') == 0

    @pytest.mark.parametrize("sign", [0x0A, 0x0B, 0x0E, 0x00, 0x09])
    def test_invalid_sign_nibble(self, sign):
        with pytest.raises(DecodeFault, match="sign nibble"):
            unpack(bytes([0x12, 0x30 | sign]))

    def test_invalid_digit_nibble(self):
        with pytest.raises(DecodeFault, match="digit nibble"):
            unpack(b'\x1A\x3C')

    def test_empty_field(self):
        with pytest.raises(DecodeFault):
            unpack(b'')

    @pytest.mark.parametrize("value", [0, 1, -1, 999, -4711, 1234567, -9999999])
    @pytest.mark.parametrize("sign", ["C", "D", "F"])
    def test_round_trip(self, packed, value, sign):
        if sign == "D":
            value = -abs(value)
        elif sign in ("C", "F"):
            value = abs(value)
        encoded = packed(value, 4, sign=int(sign, 16))
        assert unpack(encoded) == value


class TestUnzone:
    """Tests for zoned decimal decoding."""

    def test_positive(self):
        assert unzone(b'\xF1\xF2\xF3') == 123

    def test_negative(self):
        assert unzone(b'\xF1\xF2\xD3') == -123

    def test_other_negative_sign(self):
        assert unzone(b'\xF1\xF2\xB3') == -123

    def test_zones_of_leading_bytes_are_ignored(self):
        assert unzone(b'\x01\x32\xF3') == 123

    @pytest.mark.parametrize("sign", [0x0C, 0x0A, 0x0E, 0x03])
    def test_invalid_sign_nibble(self, sign):
        with pytest.raises(DecodeFault, match="sign nibble"):
            unzone(bytes([0xF1, (sign << 4) | 0x02]))

    def test_invalid_digit_nibble(self):
        with pytest.raises(DecodeFault, match="digit nibble"):
            unzone(b'\xFA\xF1')

    @pytest.mark.parametrize("value", [0, 5, -5, 12345, -12345, 99999])
    def test_matches_packed(self, packed, zoned, value):
        assert unzone(zoned(value, 5)) == unpack(packed(value, 3))

    @pytest.mark.parametrize("sign", [0x0D, 0x0B])
    def test_negative_signs_match_packed(self, packed, zoned, sign):
        assert unzone(zoned(-321, 4, sign=sign)) == unpack(packed(-321, 2))


class TestFormatDecimal:
    """Tests for fixed-point rendering."""

    def test_precision_two(self):
        assert format_decimal(12345, 10, 2) == b'123.45'

    def test_small_negative(self):
        assert format_decimal(-5, 10, 2) == b'-0.05'

    def test_zero(self):
        assert format_decimal(0, 8, 2) == b'0.00'

    def test_integer(self):
        assert format_decimal(4711, 9, 0) == b'4711'

    def test_value_wider_than_declared_width(self):
        assert format_decimal(123456789, 3, 0) == b'123456789'

    def test_large_values_are_exact(self):
        value = 1234567890123456789012345678901
        assert format_decimal(value, 40, 4) == b'123456789012345678901234567.8901'


class TestConvertDate:
    """Tests for DD.MM.YYYY -> YYYY-MM-DD conversion."""

    @pytest.mark.parametrize("value,expected", [
        (b'01.02.2020', b'2020-02-01'),
        (b'31.12.1999', b'1999-12-31'),
    ])
    def test_valid_dates(self, value, expected):
        assert convert_date(value) == expected

    @pytest.mark.parametrize("value", [
        b'',
        b'2020-02-01',
        b'1.2.2020',
        b'01.02.20',
        b'01.02.20200',
        b'01022020',
        b'01.02.2020.',
        b'AB.CD.EFGH',
    ])
    def test_invalid_dates(self, value):
        with pytest.raises(DecodeFault, match="Invalid date"):
            convert_date(value)


class TestDecodeField:
    """Tests for type dispatch."""

    def test_text(self, ebcdic):
        field = make_field('A', 9)
        assert decode_field(field, ebcdic('  A"B|C  ')) == b'ABC'

    def test_legacy_text(self, ebcdic):
        field = make_field('T', 12)
        assert decode_field(field, ebcdic(' Müller GmbH')) == 'Müller GmbH'.encode('latin-1')

    def test_date(self, ebcdic):
        field = make_field('L', 12)
        assert decode_field(field, ebcdic(' 31.12.1999 ')) == b'1999-12-31'

    def test_blank_date_is_a_fault(self, ebcdic):
        field = make_field('L', 10, name="DATUM")
        with pytest.raises(DecodeFault) as excinfo:
            decode_field(field, ebcdic(' ' * 10))
        assert excinfo.value.field_name == "DATUM"

    def test_packed(self, packed):
        field = make_field('P', 3, output_length=10, precision=2)
        assert decode_field(field, packed(12345, 3)) == b'123.45'

    def test_negative_packed(self, packed):
        field = make_field('P', 3, output_length=10, precision=2)
        assert decode_field(field, packed(-12345, 3)) == b'-123.45'

    def test_zoned(self, zoned):
        field = make_field('S', 5, output_length=6, precision=1)
        assert decode_field(field, zoned(-1234, 5)) == b'-123.4'

    def test_packed_is_not_translated(self):
        # 0x40 is a space in EBCDIC but the digits 4 and 0 in a packed field
        field = make_field('P', 2, output_length=5)
        assert decode_field(field, b'\x40\x1C') == b'401'

    def test_unmanaged_datatype(self):
        field = make_field('X', 4, name="UNBEKANNT")
        with pytest.raises(DecodeFault, match="Unmanaged datatype") as excinfo:
            decode_field(field, b'\x40\x40\x40\x40')
        assert excinfo.value.field_name == "UNBEKANNT"

    def test_fault_names_the_field(self):
        field = make_field('P', 2, name="BETRAG")
        with pytest.raises(DecodeFault, match="field BETRAG"):
            decode_field(field, b'\x12\x3A')
