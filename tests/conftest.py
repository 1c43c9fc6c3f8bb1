"""
Pytest configuration and fixtures for the EBCDIC converter tests.
"""

from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from ebcdic_converter.codepage import encode


# =============================================================================
# Record Encoders
# =============================================================================

def pack_comp3(number: int, length: int, sign: Optional[int] = None) -> bytes:
    """Encode an integer as a packed decimal of `length` bytes."""
    if sign is None:
        sign = 0xC if number >= 0 else 0xD
    digits = str(abs(number)).zfill(length * 2 - 1)
    assert len(digits) == length * 2 - 1, "number does not fit"

    packed = bytearray()
    for i in range(0, len(digits) - 1, 2):
        packed.append((int(digits[i]) << 4) | int(digits[i + 1]))
    packed.append((int(digits[-1]) << 4) | sign)
    return bytes(packed)


def zone(number: int, length: int, sign: Optional[int] = None) -> bytes:
    """Encode an integer as a zoned decimal of `length` bytes."""
    if sign is None:
        sign = 0xF if number >= 0 else 0xD
    digits = str(abs(number)).zfill(length)
    assert len(digits) == length, "number does not fit"

    zoned = bytearray(0xF0 | int(d) for d in digits[:-1])
    zoned.append((sign << 4) | int(digits[-1]))
    return bytes(zoned)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def packed():
    return pack_comp3


@pytest.fixture
def zoned():
    return zone


@pytest.fixture
def ebcdic():
    """Encode Latin-1 text as code page 273."""
    return encode


@pytest.fixture
def write_schema(tmp_path):
    """Write schema rows (tuples of columns) as a tab-delimited file."""

    def _write(rows: Sequence[Sequence[object]], name: str = "fivb.md") -> Path:
        path = tmp_path / name
        lines: List[str] = ['\t'.join(str(column) for column in row) for row in rows]
        path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
        return path

    return _write


@pytest.fixture
def sample_rows():
    """Text, packed, zoned and date fields, 30 bytes per record."""
    return [
        ("KUNDE", "10", "A", 1, 10, "Kundenname", "customer name"),
        ("BETRAG", "10,2", "P", 11, 14, "Betrag", "amount"),
        ("MENGE", "5", "S", 15, 19, "Menge", "quantity"),
        ("DATUM", "10", "L", 20, 29, "Buchungsdatum", "booking date"),
        ("KZ", "1", "T", 30, 30, "Kennzeichen", "flag"),
    ]


@pytest.fixture
def sample_record(ebcdic, packed, zoned):
    """Build one record matching sample_rows."""

    def _record(name: str, amount: int, quantity: int, date: str, flag: str = "J") -> bytes:
        record = (
            ebcdic(name.ljust(10))
            + packed(amount, 4)
            + zoned(quantity, 5)
            + ebcdic(date.ljust(10))
            + ebcdic(flag)
        )
        assert len(record) == 30
        return record

    return _record
