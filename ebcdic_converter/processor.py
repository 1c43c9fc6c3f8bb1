#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Record Processor

This module contains the RecordProcessor class which converts a stream of
fixed-length EBCDIC records into pipe-delimited text lines using a
SchemaTable.

Features:
    - Schema-driven field decoding (text, date, packed, zoned)
    - One output line per input record, CR/LF in content replaced by '~'
    - Read and write buffers allocated once per run and reused
    - Record counting and progress logging

Classes:
    - RecordProcessor: Main record conversion class

Per record:
    1. Read exactly input_record_length bytes (a short read ends the input)
    2. Decode every field in schema order
    3. Join the values with '|' and terminate the line with '\\n'
    4. Replace embedded CR/LF with '~'
    5. Write the line

Dependencies:
    - schema_reader: SchemaTable
    - field_decoder: decode_field
    - types_and_errors: ConversionResult, faults
"""

from pathlib import Path
from typing import BinaryIO, Optional, Union

from .field_decoder import ByteData, decode_field
from .schema_reader import SchemaTable
from .types_and_errors import ConversionResult, DecodeFault, ResourceFault, RunContext

DELIMITER = b'|'
LINE_TERMINATOR = b'\n'
LINE_BREAK_PLACEHOLDER = b'~'
LINE_BREAK_TABLE = bytes.maketrans(b'\r\n', LINE_BREAK_PLACEHOLDER * 2)


class RecordProcessor:
    """
    A class for converting fixed-length EBCDIC records into delimited text.

    Any decode fault aborts the conversion; the record that failed is never
    written, while records written before it stay in the output.
    """

    def __init__(
        self,
        schema: SchemaTable,
        context: Optional[RunContext] = None,
        progress_interval: int = 100000
    ):
        """
        Initialize the processor with a schema.

        Args:
            schema: Layout of the source records
            context: Run context used for logging
            progress_interval: Number of records between progress messages
        """
        self.schema = schema
        self.context = context or RunContext.create('-', __name__)
        self.logger = self.context.logger
        self.progress_interval = progress_interval

        # Reused for every record
        self._read_buffer = bytearray(schema.input_record_length)
        self._read_view = memoryview(self._read_buffer)
        self._write_buffer = bytearray()

    # ==========================================
    # Single record
    # ==========================================
    def assemble_record(self, record: ByteData) -> bytes:
        """
        Decode one raw record into a complete output line.

        Args:
            record: Exactly input_record_length bytes

        Returns:
            bytes: Delimited, sanitized line including its terminator

        Raises:
            DecodeFault: If any field cannot be decoded
        """
        buffer = self._write_buffer
        buffer.clear()

        last = self.schema.field_count - 1
        for i, field in enumerate(self.schema):
            buffer += decode_field(field, record[field.input_slice])
            if i < last:
                buffer += DELIMITER

        # Replace CR/LF so that every record stays on one physical line
        buffer[:] = buffer.translate(LINE_BREAK_TABLE)
        buffer += LINE_TERMINATOR
        return bytes(buffer)

    # ==========================================
    # Streams and files
    # ==========================================
    def _read_record(self, source: BinaryIO) -> int:
        """Fill the read buffer; return the number of bytes read."""
        filled = 0
        size = len(self._read_buffer)
        while filled < size:
            count = source.readinto(self._read_view[filled:])
            if not count:
                break
            filled += count
        return filled

    def process_stream(
        self,
        source: BinaryIO,
        destination: BinaryIO,
        result: Optional[ConversionResult] = None
    ) -> ConversionResult:
        """
        Convert every complete record of a binary stream.

        Args:
            source: Binary stream of fixed-length EBCDIC records
            destination: Binary stream receiving the decoded lines
            result: Optional result container to update

        Returns:
            ConversionResult: Record and byte counts

        Raises:
            DecodeFault: If a field of any record cannot be decoded
            ResourceFault: If reading or writing fails
        """
        if result is None:
            result = ConversionResult(run_id=self.context.run_id)
        result.field_count = self.schema.field_count
        result.input_record_length = self.schema.input_record_length
        result.output_record_length = self.schema.output_record_length

        record_length = self.schema.input_record_length
        record_number = 0

        while True:
            try:
                filled = self._read_record(source)
            except OSError as e:
                raise ResourceFault(f"Unable to read record {record_number + 1}: {e}") from e

            if filled < record_length:
                if filled:
                    result.trailing_bytes = filled
                    self.logger.warning(
                        f"Ignoring {filled} trailing bytes, shorter than the record length {record_length}"
                    )
                break

            record_number += 1
            result.records_read += 1

            try:
                line = self.assemble_record(self._read_view)
            except DecodeFault as e:
                raise e.locate(record_number=record_number)

            try:
                destination.write(line)
            except OSError as e:
                raise ResourceFault(f"Unable to write record {record_number}: {e}") from e
            result.add_record(len(line))

            if record_number % self.progress_interval == 0:
                self.logger.info(f"Converted {record_number} records")

        self.logger.info(f"Converted {result.records_written} records ({result.bytes_written} bytes)")
        return result

    def process_file(
        self,
        input_file: Union[str, Path],
        output_file: Union[str, Path],
        result: Optional[ConversionResult] = None
    ) -> ConversionResult:
        """
        Convert an EBCDIC file into a delimited text file.

        Args:
            input_file: Path to the EBCDIC records
            output_file: Path to the decoded output (overwritten)
            result: Optional result container to update

        Returns:
            ConversionResult: Record and byte counts
        """
        input_file, output_file = Path(input_file), Path(output_file)
        self.logger.info(f"Input file:  {input_file}")
        self.logger.info(f"Output file: {output_file}")

        try:
            source = open(input_file, 'rb')
        except OSError as e:
            raise ResourceFault(f"Unable to open input file {input_file}: {e}") from e

        with source:
            try:
                destination = open(output_file, 'wb')
            except OSError as e:
                raise ResourceFault(f"Unable to open output file {output_file}: {e}") from e
            with destination:
                return self.process_stream(source, destination, result)
