#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Ingestion Catalog

Derives the column catalog consumed by the downstream ingestion tooling.
The catalog depends on the schema only, one pipe-delimited row per field:

    database|table|position|name|TYPE|length|precision|0
"""

from pathlib import Path
from typing import Optional, Union

import polars as pl

from .schema_reader import FieldDescriptor, FieldType, SchemaTable
from .types_and_errors import ResourceFault, RunContext

BIGINT_MIN_WIDTH = 10
UNKNOWN_COLUMN_TYPE = 'UNKNOWN'


def column_type(field: FieldDescriptor) -> str:
    """
    Map a schema field to its catalog column type.

    Fields with an unrecognized type code get UNKNOWN_COLUMN_TYPE; they only
    fail once a record is decoded.
    """
    field_type = field.field_type
    if field_type is None:
        return UNKNOWN_COLUMN_TYPE
    if field_type.is_text:
        return 'CHAR'
    if field_type is FieldType.DATE:
        return 'DATE'
    if field.precision > 0:
        return 'DECIMAL'
    if field.output_length < BIGINT_MIN_WIDTH:
        return 'INTEGER'
    return 'BIGINT'


def build_catalog_frame(schema: SchemaTable, database: str) -> pl.DataFrame:
    """Build the catalog as a polars DataFrame, one row per field."""
    return pl.DataFrame(
        {
            'database': [database] * schema.field_count,
            'table': [schema.table_name] * schema.field_count,
            'position': list(range(1, schema.field_count + 1)),
            'name': [f.name for f in schema],
            'type': [column_type(f) for f in schema],
            'length': [f.output_length for f in schema],
            'precision': [f.precision for f in schema],
            'reserved': [0] * schema.field_count,
        },
        schema={
            'database': pl.Utf8,
            'table': pl.Utf8,
            'position': pl.Int64,
            'name': pl.Utf8,
            'type': pl.Utf8,
            'length': pl.Int64,
            'precision': pl.Int64,
            'reserved': pl.Int64,
        },
    )


def write_catalog(
    schema: SchemaTable,
    database: str,
    catalog_file: Union[str, Path],
    context: Optional[RunContext] = None
) -> int:
    """
    Write the ingestion catalog for a schema.

    Rows are written unquoted, in the encoding the schema file was read with.

    Args:
        schema: Parsed record layout
        database: Database/system name written in every row
        catalog_file: Destination path (overwritten)
        context: Run context used for logging

    Returns:
        int: Number of rows written

    Raises:
        ResourceFault: If the file cannot be written or a value cannot be
            represented in the schema's encoding
    """
    logger = (context or RunContext.create('-', __name__)).logger
    catalog_file = Path(catalog_file)

    frame = build_catalog_frame(schema, database)
    for field in schema:
        if field.field_type is None:
            logger.warning(f"Unmanaged datatype '{field.type_code}' for field {field.name}, cataloged as {UNKNOWN_COLUMN_TYPE}")

    text = frame.write_csv(separator='|', include_header=False, quote_style='never')
    try:
        content = text.encode(schema.encoding)
    except UnicodeEncodeError as e:
        raise ResourceFault(f"Ingestion metadata cannot be written as {schema.encoding}: {e}") from e

    logger.info(f"Output ingestion metadata file: {catalog_file}")
    try:
        with open(catalog_file, 'wb') as f:
            f.write(content)
    except OSError as e:
        raise ResourceFault(f"Unable to write ingestion metadata file {catalog_file}: {e}") from e

    return frame.height
