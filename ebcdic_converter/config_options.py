#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Configuration Options

This module contains the configuration dataclass for a conversion run.
Separated from the pipeline for better organization and easier testing.

Classes:
    - ConverterConfig: Configuration for ConverterPipeline
"""

import uuid
from pathlib import Path
from typing import Union
from dataclasses import dataclass, field

# ==========================================
# CONFIGURATION CLASSES
# ==========================================

@dataclass
class ConverterConfig:
    """Configuration class for one EBCDIC conversion run."""
    # Files
    input_file: Union[str, Path]     # EBCDIC source records
    output_file: Union[str, Path]    # Decoded, pipe-delimited output
    catalog_file: Union[str, Path]   # Ingestion metadata (column catalog)
    schema_file: Union[str, Path]    # Tab-delimited field schema

    # Target system
    database: str = "as400"
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Schema file reading
    encoding: str = "utf-8"
    fallback_encoding: str = "iso-8859-1"

    # Logging and behavior settings
    log_level: str = "INFO"
    logs_folder: Path = Path("logs")
    log_to_file: bool = True
    progress_interval: int = 100000  # Records between progress messages
    verbose: bool = False

    def __post_init__(self):
        self.input_file = Path(self.input_file)
        self.output_file = Path(self.output_file)
        self.catalog_file = Path(self.catalog_file)
        self.schema_file = Path(self.schema_file)
        self.logs_folder = Path(self.logs_folder)
        if self.progress_interval < 1:
            raise ValueError(f"progress_interval must be positive, got {self.progress_interval}")
