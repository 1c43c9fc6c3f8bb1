#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Mainframe Extract Decoding Pipeline

This package converts fixed-width mainframe extracts encoded in EBCDIC code
page 273, with packed (COMP-3) and zoned decimal fields, into pipe-delimited
text plus a column catalog for the downstream ingestion tooling.

The pipeline consists of modular components that can be used independently or together:

Components:
    - SchemaReader: Read the tab-delimited field schema
    - decode_field: Decode the raw bytes of one field
    - RecordProcessor: Convert fixed-length records into delimited lines
    - write_catalog: Write the ingestion catalog for a schema
    - ConverterPipeline: Complete workflow orchestrator

Configuration:
    - ConverterConfig: Configuration for a conversion run

Usage:
    from ebcdic_converter import ConverterPipeline, create_default_config

    config = create_default_config(
        input_file="fivb_ebcdic",
        output_file="fivb_ascii.txt",
        catalog_file="fivb.csv",
        schema_file="fivb.md",
        database="as400",
    )
    result = ConverterPipeline(config).run()

    # Or from environment variables / .env
    from ebcdic_converter.utils import create_pipeline_from_env
    pipeline = create_pipeline_from_env()
"""

__version__ = "1.8.0"

from .config_options import ConverterConfig

from .types_and_errors import (
    ConversionResult,
    RunContext,
    ConverterError,
    ResourceFault,
    SchemaFault,
    DecodeFault
)

from .codepage import translate
from .schema_reader import FieldDescriptor, FieldType, SchemaReader, SchemaTable, load_schema
from .field_decoder import decode_field, unpack, unzone
from .processor import RecordProcessor
from .catalog import build_catalog_frame, column_type, write_catalog
from .pipeline import ConverterPipeline

from .utils import (
    create_default_config,
    create_config_from_env,
    create_config_from_yaml,
    create_pipeline_from_env
)

# Define what gets imported with "from ebcdic_converter import *"
__all__ = [
    # Main classes
    'SchemaReader',
    'RecordProcessor',
    'ConverterPipeline',

    # Schema types
    'FieldDescriptor',
    'FieldType',
    'SchemaTable',

    # Configuration classes
    'ConverterConfig',

    # Result classes
    'ConversionResult',
    'RunContext',

    # Exceptions
    'ConverterError',
    'ResourceFault',
    'SchemaFault',
    'DecodeFault',

    # Functions
    'translate',
    'load_schema',
    'decode_field',
    'unpack',
    'unzone',
    'column_type',
    'build_catalog_frame',
    'write_catalog',
    'create_default_config',
    'create_config_from_env',
    'create_config_from_yaml',
    'create_pipeline_from_env'
]

# Package metadata
__description__ = "EBCDIC code page 273 extract converter"
