#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Type Definitions and Result Classes

This module contains the run context, result classes and exceptions
used across the conversion pipeline.

Classes:
    - RunLoggerAdapter: Logger adapter prefixing every message with the run id
    - RunContext: Explicit per-run context handed to each component
    - ConversionResult: Results from a conversion run
    - ConverterError: Base class of all conversion faults
    - ResourceFault: File could not be opened, read or written
    - SchemaFault: Schema file is structurally malformed
    - DecodeFault: A field could not be decoded
"""

import logging
import datetime
from dataclasses import dataclass, field
from typing import Dict, List, Optional

# ==========================================
# RUN CONTEXT
# ==========================================

class RunLoggerAdapter(logging.LoggerAdapter):
    """Prefix log messages with the run identifier for log correlation."""

    def process(self, msg, kwargs):
        return f"{self.extra['run_id']} {msg}", kwargs


@dataclass(frozen=True)
class RunContext:
    """Everything a component needs to know about the current run."""
    run_id: str
    logger: logging.LoggerAdapter

    @classmethod
    def create(cls, run_id: str, name: str = "ebcdic_converter") -> "RunContext":
        return cls(run_id=run_id, logger=RunLoggerAdapter(logging.getLogger(name), {'run_id': run_id}))

    def child(self, name: str) -> "RunContext":
        """Same run, logger of another module."""
        return RunContext.create(self.run_id, name)


# ==========================================
# RESULT CLASSES
# ==========================================

@dataclass
class ConversionResult:
    """Container for conversion run results."""
    run_id: str
    field_count: int = 0
    input_record_length: int = 0
    output_record_length: int = 0
    records_read: int = 0
    records_written: int = 0
    bytes_written: int = 0
    catalog_rows: int = 0
    trailing_bytes: int = 0
    status: str = 'pending'
    errors: List[Dict] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == 'completed'

    @property
    def records_failed(self) -> int:
        return self.records_read - self.records_written

    def add_record(self, length: int) -> None:
        self.records_written += 1
        self.bytes_written += length

    def add_failure(self, error: str) -> None:
        self.status = 'failed'
        self.errors.append({
            'error': error,
            'timestamp': datetime.datetime.now().isoformat()
        })

    def mark_completed(self) -> None:
        if not self.errors:
            self.status = 'completed'

    def summary(self) -> Dict[str, object]:
        return {
            'run_id': self.run_id,
            'status': self.status,
            'records_read': self.records_read,
            'records_written': self.records_written,
            'records_failed': self.records_failed,
            'bytes_written': self.bytes_written,
            'catalog_rows': self.catalog_rows,
            'errors': len(self.errors),
        }


# ==========================================
# EXCEPTION CLASSES
# ==========================================

class ConverterError(Exception):
    """Base exception for every fault that aborts a conversion run."""
    pass


class ResourceFault(ConverterError):
    """Custom exception for files that cannot be opened, read or written."""
    pass


class SchemaFault(ConverterError):
    """Custom exception for malformed schema files."""

    def __init__(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None):
        self.source = source
        self.line_number = line_number
        if source is not None and line_number is not None:
            message = f"{source}, line {line_number}: {message}"
        elif source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


class DecodeFault(ConverterError):
    """Custom exception for field values that cannot be decoded."""

    def __init__(self, message: str, field_name: Optional[str] = None, record_number: Optional[int] = None):
        self.reason = message
        self.field_name = field_name
        self.record_number = record_number
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.record_number is not None:
            where.append(f"record {self.record_number}")
        if self.field_name is not None:
            where.append(f"field {self.field_name}")
        if where:
            return f"{self.reason} ({', '.join(where)})"
        return self.reason

    def locate(self, field_name: Optional[str] = None, record_number: Optional[int] = None) -> "DecodeFault":
        """Attach record/field coordinates, keeping the ones already known."""
        if self.field_name is None:
            self.field_name = field_name
        if self.record_number is None:
            self.record_number = record_number
        self.args = (self._format(),)
        return self
