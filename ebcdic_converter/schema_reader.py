#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Schema Reader

This module reads the tab-delimited field schema that describes the layout of
a fixed-width EBCDIC extract and turns it into an immutable SchemaTable.

Schema file format (one field per line):
    name <TAB> width[,precision] <TAB> type <TAB> from <TAB> to <TAB> description <TAB> translation

Type codes:
    A - Text
    T - Text (legacy code, treated as A)
    L - Date, DD.MM.YYYY in the source, written as YYYY-MM-DD
    P - Packed decimal (COMP-3)
    S - Zoned decimal

Classes:
    - FieldType: Known field type codes
    - FieldDescriptor: One schema-declared field
    - SchemaTable: Ordered fields plus derived record lengths
    - SchemaReader: Parser for schema files
"""

from enum import Enum
from pathlib import Path
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

import polars as pl

from .types_and_errors import ResourceFault, RunContext, SchemaFault

MIN_COLUMNS = 5
MAX_COLUMNS = 7


class FieldType(Enum):
    """Field type codes understood by the decoder."""
    TEXT = 'A'
    LEGACY_TEXT = 'T'
    DATE = 'L'
    PACKED = 'P'
    ZONED = 'S'

    @classmethod
    def from_code(cls, code: str) -> Optional["FieldType"]:
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def is_text(self) -> bool:
        return self in (FieldType.TEXT, FieldType.LEGACY_TEXT)

    @property
    def is_numeric(self) -> bool:
        return self in (FieldType.PACKED, FieldType.ZONED)


@dataclass(frozen=True)
class FieldDescriptor:
    """One field of the record layout."""
    name: str
    type_code: str
    input_from: int
    input_to: int
    output_length: int
    precision: int = 0
    output_position: int = 0
    description: str = ''
    translation: str = ''

    @property
    def field_type(self) -> Optional[FieldType]:
        return FieldType.from_code(self.type_code)

    @property
    def input_position(self) -> int:
        return self.input_from - 1

    @property
    def input_length(self) -> int:
        return self.input_to - self.input_from + 1

    @property
    def input_slice(self) -> slice:
        return slice(self.input_position, self.input_position + self.input_length)


@dataclass(frozen=True)
class SchemaTable:
    """
    Ordered field descriptors of one record layout.

    Built once per run and shared read-only by the record processor and the
    catalog writer.
    """
    source: Path
    fields: Tuple[FieldDescriptor, ...]
    encoding: str = 'utf-8'

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)

    def __getitem__(self, index: int) -> FieldDescriptor:
        return self.fields[index]

    @property
    def field_count(self) -> int:
        return len(self.fields)

    @property
    def input_record_length(self) -> int:
        return sum(f.input_length for f in self.fields)

    @property
    def output_record_length(self) -> int:
        return sum(f.output_length for f in self.fields)

    @property
    def table_name(self) -> str:
        """Base name of the schema file up to its first dot."""
        return self.source.name.split('.', 1)[0]

    def layout_warnings(self) -> List[str]:
        """Describe gaps and overlaps between consecutive input ranges."""
        warnings = []
        expected = 1
        for f in self.fields:
            if f.input_from > expected:
                warnings.append(f"Gap before field {f.name}: bytes {expected}-{f.input_from - 1} are not declared")
            elif f.input_from < expected:
                warnings.append(f"Field {f.name} overlaps the previous field (starts at {f.input_from}, expected {expected})")
            expected = f.input_to + 1
        return warnings

    def to_frame(self) -> pl.DataFrame:
        """Render the schema as a polars DataFrame, one row per field."""
        return pl.DataFrame({
            'position': [i + 1 for i in range(len(self.fields))],
            'name': [f.name for f in self.fields],
            'type_code': [f.type_code for f in self.fields],
            'input_from': [f.input_from for f in self.fields],
            'input_to': [f.input_to for f in self.fields],
            'input_length': [f.input_length for f in self.fields],
            'output_position': [f.output_position for f in self.fields],
            'output_length': [f.output_length for f in self.fields],
            'precision': [f.precision for f in self.fields],
            'description': [f.description for f in self.fields],
            'translation': [f.translation for f in self.fields],
        })


class SchemaReader:
    """
    Reader for tab-delimited field schema files.

    Width and from/to columns are mandatory integers; a malformed precision is
    tolerated as 0. Unknown type codes are accepted here and rejected by the
    field decoder.
    """

    def __init__(
        self,
        context: Optional[RunContext] = None,
        encoding: str = "utf-8",
        fallback_encoding: str = "iso-8859-1"
    ):
        self.context = context or RunContext.create('-', __name__)
        self.logger = self.context.logger
        self.encoding = encoding
        self.fallback_encoding = fallback_encoding

    def read(self, schema_file: Union[str, Path]) -> SchemaTable:
        """
        Read a schema file.

        Args:
            schema_file: Path to the tab-delimited schema

        Returns:
            SchemaTable: The parsed layout

        Raises:
            ResourceFault: If the file cannot be read
            SchemaFault: If the file is structurally malformed
        """
        schema_file = Path(schema_file)
        self.logger.info(f"Reading metadata file {schema_file}")

        lines, encoding = self._read_lines(schema_file)
        schema = self.parse_lines(lines, source=schema_file, encoding=encoding)

        self.logger.info(f"Metadata file {schema_file} successfully processed.")
        return schema

    def _read_lines(self, schema_file: Path) -> Tuple[List[str], str]:
        """Return the lines of the schema file and the encoding that decoded them."""
        encoding = self.encoding
        try:
            try:
                text = schema_file.read_text(encoding=encoding)
            except UnicodeDecodeError:
                self.logger.warning(
                    f"Could not decode {schema_file.name} as {self.encoding}, retrying with {self.fallback_encoding}"
                )
                encoding = self.fallback_encoding
                text = schema_file.read_text(encoding=encoding)
        except OSError as e:
            raise ResourceFault(f"Unable to open metadata file {schema_file}: {e}") from e
        return text.split('\n'), encoding

    def parse_lines(
        self,
        lines: Iterable[str],
        source: Union[str, Path] = '<schema>',
        encoding: str = 'utf-8'
    ) -> SchemaTable:
        """Parse schema lines into a SchemaTable."""
        source = Path(source)
        fields: List[FieldDescriptor] = []
        output_position = 0

        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip('\r\n')
            if not line.strip():
                continue

            f = self._parse_line(line, output_position, source, line_number)
            fields.append(f)
            output_position += f.output_length

        if not fields:
            raise SchemaFault("Schema declares no fields", str(source))

        schema = SchemaTable(source=source, fields=tuple(fields), encoding=encoding)
        for warning in schema.layout_warnings():
            self.logger.warning(warning)
        self._check_bounds(schema)
        return schema

    def _parse_line(self, line: str, output_position: int, source: Path, line_number: int) -> FieldDescriptor:
        columns = line.split('\t')
        if len(columns) < MIN_COLUMNS:
            raise SchemaFault(
                f"Expected at least {MIN_COLUMNS} tab-separated columns, found {len(columns)}",
                str(source), line_number
            )
        if len(columns) > MAX_COLUMNS:
            self.logger.warning(f"{source.name}, line {line_number}: ignoring {len(columns) - MAX_COLUMNS} extra column(s)")
        columns += [''] * (MAX_COLUMNS - len(columns))

        name = columns[0].strip()
        if not name:
            raise SchemaFault("Field name is empty", str(source), line_number)

        output_length, precision = self._parse_size(columns[1], name, source, line_number)
        type_code = columns[2].strip()[:1]
        input_from = self._parse_int(columns[3], 'from', name, source, line_number)
        input_to = self._parse_int(columns[4], 'to', name, source, line_number)

        if input_from < 1:
            raise SchemaFault(f"Field {name} starts at {input_from}, positions are 1-based", str(source), line_number)
        if input_to < input_from:
            raise SchemaFault(f"Field {name} ends ({input_to}) before it starts ({input_from})", str(source), line_number)

        f = FieldDescriptor(
            name=name,
            type_code=type_code,
            input_from=input_from,
            input_to=input_to,
            output_length=output_length,
            precision=precision,
            output_position=output_position,
            description=columns[5].strip(),
            translation=columns[6].strip(),
        )

        if f.field_type is not None and f.field_type.is_numeric and precision >= output_length:
            self.logger.warning(f"Field {name}: precision {precision} is not below its width {output_length}")
        return f

    def _parse_size(self, token: str, name: str, source: Path, line_number: int) -> Tuple[int, int]:
        width_token, _, precision_token = token.partition(',')
        output_length = self._parse_int(width_token, 'width', name, source, line_number)

        precision = 0
        if precision_token.strip():
            try:
                precision = int(precision_token.strip())
            except ValueError:
                self.logger.warning(f"Field {name}: malformed precision '{precision_token}', using 0")
                precision = 0
            if precision < 0:
                self.logger.warning(f"Field {name}: negative precision {precision}, using 0")
                precision = 0
        return output_length, precision

    @staticmethod
    def _parse_int(token: str, column: str, name: str, source: Path, line_number: int) -> int:
        try:
            return int(token.strip())
        except ValueError:
            raise SchemaFault(f"Field {name}: {column} '{token}' is not an integer", str(source), line_number) from None

    @staticmethod
    def _check_bounds(schema: SchemaTable) -> None:
        # Fields are sliced out of a buffer of input_record_length bytes, so a
        # field ending past it means the layout leaves bytes undeclared
        record_length = schema.input_record_length
        for f in schema:
            if f.input_to > record_length:
                raise SchemaFault(
                    f"Field {f.name} ends at byte {f.input_to}, beyond the record length {record_length}"
                    " (the layout leaves bytes undeclared)",
                    str(schema.source)
                )


def load_schema(
    schema_file: Union[str, Path],
    context: Optional[RunContext] = None,
    encoding: str = "utf-8",
    fallback_encoding: str = "iso-8859-1"
) -> SchemaTable:
    """Convenience wrapper around SchemaReader.read."""
    return SchemaReader(context, encoding, fallback_encoding).read(schema_file)
