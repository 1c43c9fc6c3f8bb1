#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter Pipeline Orchestrator

This module contains the ConverterPipeline class that coordinates a complete
conversion run. It provides a high-level interface and the single place where
faults are reported.

Features:
    - Complete workflow orchestration
    - Run-id correlated logging to file and console
    - One top-level fault handler, no retries

Classes:
    - ConverterPipeline: Main pipeline orchestrator

Workflow:
    1. Read the schema file
    2. Write the ingestion catalog
    3. Convert the EBCDIC records

Dependencies:
    - schema_reader, catalog, processor
    - config_options: ConverterConfig
"""

import logging
from typing import Any, Dict

from .catalog import write_catalog
from .config_options import ConverterConfig
from .processor import RecordProcessor
from .schema_reader import SchemaReader
from .types_and_errors import ConversionResult, ConverterError, RunContext

VERSION_BANNER = "EBCDIC-ASCII File Converter"


class ConverterPipeline:
    """
    Complete EBCDIC conversion pipeline orchestrator.

    This class coordinates the entire workflow:
    1. Read the schema
    2. Write the catalog
    3. Convert the records
    """

    def __init__(self, config: ConverterConfig):
        """
        Initialize the complete pipeline.

        Args:
            config: Configuration of the run
        """
        self.config = config
        self._setup_logging()

        self.context = RunContext.create(config.run_id, __name__)
        self.logger = self.context.logger
        self.schema_reader = SchemaReader(
            self.context.child('ebcdic_converter.schema_reader'),
            encoding=config.encoding,
            fallback_encoding=config.fallback_encoding,
        )

    def _setup_logging(self) -> None:
        """Set up pipeline logging."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        if self.config.verbose:
            log_level = logging.DEBUG

        handlers = [logging.StreamHandler()]
        if self.config.log_to_file:
            # Ensure logs directory exists
            self.config.logs_folder.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.config.logs_folder / 'ebcdic_converter.log'))

        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )
        logging.getLogger('ebcdic_converter').setLevel(log_level)

    def run(self) -> ConversionResult:
        """
        Execute the complete conversion.

        Returns:
            ConversionResult: Counts, status and any reported fault
        """
        from . import __version__

        result = ConversionResult(run_id=self.config.run_id)
        self.logger.info(f"Starting {VERSION_BANNER} v{__version__}")

        try:
            # Step 1: Schema
            schema = self.schema_reader.read(self.config.schema_file)
            self.logger.info(f"Number of Attributes: {schema.field_count:4d}")
            self.logger.info(f"Input Record Length:  {schema.input_record_length:4d}")
            self.logger.info(f"Output Record Length: {schema.output_record_length:4d}")

            # Step 2: Catalog
            result.catalog_rows = write_catalog(
                schema,
                self.config.database,
                self.config.catalog_file,
                self.context.child('ebcdic_converter.catalog'),
            )

            # Step 3: Records
            processor = RecordProcessor(
                schema,
                self.context.child('ebcdic_converter.processor'),
                progress_interval=self.config.progress_interval,
            )
            processor.process_file(self.config.input_file, self.config.output_file, result)

        except ConverterError as e:
            self.logger.error(f"{type(e).__name__}: {e}")
            result.add_failure(str(e))
            return result

        result.mark_completed()
        self.logger.debug(f"Run summary: {result.summary()}")
        self.logger.info("Ready.")
        return result

    def get_pipeline_status(self) -> Dict[str, Any]:
        """Get the configured inputs and outputs of the pipeline."""
        return {
            'run_id': self.config.run_id,
            'database': self.config.database,
            'schema_file': str(self.config.schema_file),
            'input_file': str(self.config.input_file),
            'output_file': str(self.config.output_file),
            'catalog_file': str(self.config.catalog_file),
        }
