#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Field Decoder

Decodes the raw bytes of a single field into the text written to the output
record. Decoding dispatches on the field type:

    Text (A, T)  code page translation, then trim
    Date (L)     Text decode, then DD.MM.YYYY -> YYYY-MM-DD
    Packed (P)   COMP-3 digits, sign in the low nibble of the last byte
    Zoned (S)    one digit per byte, sign in the high nibble of the last byte

Numeric values are scaled by their precision and rendered as fixed-point
text. Every decoded value has surrounding whitespace and any '"' or '|'
removed, since those bytes are reserved for the output format.
"""

from decimal import Decimal
from typing import Callable, Dict, Union

from .codepage import translate
from .schema_reader import FieldDescriptor, FieldType
from .types_and_errors import DecodeFault

ByteData = Union[bytes, bytearray, memoryview]

RESERVED_BYTES = b'"|'

# Packed decimal sign nibbles (low nibble of the last byte)
PACKED_PLUS = 0x0C
PACKED_MINUS = 0x0D
PACKED_UNSIGNED = 0x0F

# Zoned decimal sign nibbles (high nibble of the last byte)
ZONED_PLUS = 0x0F
ZONED_MINUS = 0x0D
ZONED_OTHER_MINUS = 0x0B

DATE_LENGTH = 10
YEAR_DIGITS = 4


# ==========================================
# TEXT HELPERS
# ==========================================

def trim(data: ByteData) -> bytes:
    """Strip surrounding whitespace and drop reserved quote/pipe bytes."""
    return bytes(data).strip().translate(None, RESERVED_BYTES)


def convert_date(value: bytes) -> bytes:
    """
    Rewrite a DD.MM.YYYY date as YYYY-MM-DD.

    Raises:
        DecodeFault: If the value is not a 10 character DD.MM.YYYY date
    """
    parts = value.split(b'.')
    if (
        len(value) != DATE_LENGTH
        or len(parts) != 3
        or len(parts[0]) != 2
        or len(parts[1]) != 2
        or len(parts[2]) != YEAR_DIGITS
        or not all(part.isdigit() for part in parts)
    ):
        raise DecodeFault(f"Invalid date '{value.decode('latin-1')}', expected DD.MM.YYYY")

    day, month, year = parts
    return b'-'.join((year, month, day))


# ==========================================
# NUMERIC HELPERS
# ==========================================

def _digit(nibble: int, encoding: str) -> int:
    if nibble > 9:
        raise DecodeFault(f"Invalid digit nibble 0x{nibble:X} in {encoding} decimal")
    return nibble


def unpack(raw: ByteData) -> int:
    """
    Convert a packed decimal (COMP-3) to an integer.

    Each byte holds two digits, high nibble first, except the last byte
    whose high nibble is the final digit and whose low nibble is the sign.

    Raises:
        DecodeFault: On an empty field, a non-decimal digit or an invalid sign
    """
    raw = bytes(raw)
    if not raw:
        raise DecodeFault("Empty packed decimal")

    value = 0
    for byte in raw[:-1]:
        value = value * 10 + _digit(byte >> 4, 'packed')
        value = value * 10 + _digit(byte & 0x0F, 'packed')

    last = raw[-1]
    value = value * 10 + _digit(last >> 4, 'packed')
    sign = last & 0x0F
    if sign == PACKED_MINUS:
        return -value
    if sign not in (PACKED_PLUS, PACKED_UNSIGNED):
        raise DecodeFault(f"Invalid sign nibble 0x{sign:X} in packed decimal")
    return value


def unzone(raw: ByteData) -> int:
    """
    Convert a zoned decimal to an integer.

    Each byte's low nibble is a digit; the high nibble of the last byte is
    the sign, the other high nibbles (zones) are ignored.

    Raises:
        DecodeFault: On an empty field, a non-decimal digit or an invalid sign
    """
    raw = bytes(raw)
    if not raw:
        raise DecodeFault("Empty zoned decimal")

    value = 0
    for byte in raw:
        value = value * 10 + _digit(byte & 0x0F, 'zoned')

    sign = raw[-1] >> 4
    if sign in (ZONED_MINUS, ZONED_OTHER_MINUS):
        return -value
    if sign != ZONED_PLUS:
        raise DecodeFault(f"Invalid sign nibble 0x{sign:X} in zoned decimal")
    return value


def format_decimal(value: int, output_length: int, precision: int) -> bytes:
    """Render value / 10**precision as trimmed fixed-point text."""
    scaled = Decimal(f"{value}E-{precision}")
    text = f"{scaled:.{precision}f}".ljust(output_length)
    return trim(text.encode('ascii'))


# ==========================================
# FIELD DECODING
# ==========================================

def decode_text(field: FieldDescriptor, raw: ByteData) -> bytes:
    return trim(translate(raw))


def decode_date(field: FieldDescriptor, raw: ByteData) -> bytes:
    return convert_date(decode_text(field, raw))


def decode_packed(field: FieldDescriptor, raw: ByteData) -> bytes:
    return format_decimal(unpack(raw), field.output_length, field.precision)


def decode_zoned(field: FieldDescriptor, raw: ByteData) -> bytes:
    return format_decimal(unzone(raw), field.output_length, field.precision)


DECODERS: Dict[FieldType, Callable[[FieldDescriptor, ByteData], bytes]] = {
    FieldType.TEXT: decode_text,
    FieldType.LEGACY_TEXT: decode_text,
    FieldType.DATE: decode_date,
    FieldType.PACKED: decode_packed,
    FieldType.ZONED: decode_zoned,
}


def decode_field(field: FieldDescriptor, raw: ByteData) -> bytes:
    """
    Decode one field's raw bytes.

    Args:
        field: Schema descriptor of the field
        raw: Exactly field.input_length bytes from the source record

    Returns:
        bytes: Decoded, trimmed value

    Raises:
        DecodeFault: If the value cannot be decoded or the type is unmanaged
    """
    decoder = DECODERS.get(field.field_type)
    if decoder is None:
        raise DecodeFault(f"Unmanaged datatype '{field.type_code}'", field_name=field.name)
    try:
        return decoder(field, raw)
    except DecodeFault as e:
        raise e.locate(field_name=field.name)
