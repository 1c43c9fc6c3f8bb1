#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EBCDIC Converter - Utility Functions

This module contains shared helper functions for creating run configurations
and pipelines from explicit arguments, environment variables or YAML files.

Functions:
    - create_default_config: Create a configuration from file paths
    - create_config_from_env: Create a configuration from E2A_* variables
    - create_config_from_yaml: Create a configuration from a YAML profile
    - create_pipeline_from_env: Create a pipeline from environment variables

Dependencies:
    - config_options: ConverterConfig
    - pipeline: ConverterPipeline
"""

import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from .config_options import ConverterConfig
from .pipeline import ConverterPipeline

ENV_PREFIX = "E2A_"
REQUIRED_SETTINGS = ['input_file', 'output_file', 'catalog_file', 'schema_file']
BOOLEAN_SETTINGS = {'log_to_file', 'verbose'}
INTEGER_SETTINGS = {'progress_interval'}
STRING_SETTINGS = {'database', 'run_id', 'log_level'}

# ==========================================
# CONVENIENCE FUNCTIONS
# ==========================================

def create_default_config(
    input_file: Union[str, Path],
    output_file: Union[str, Path],
    catalog_file: Union[str, Path],
    schema_file: Union[str, Path],
    database: str = "as400",
    run_id: Optional[str] = None,
    **kwargs
) -> ConverterConfig:
    """
    Create a configuration for one conversion run.

    Args:
        input_file: EBCDIC source records
        output_file: Decoded output file
        catalog_file: Ingestion catalog file
        schema_file: Tab-delimited field schema
        database: Database/system name for the catalog
        run_id: Identifier used for log correlation (generated if omitted)
        **kwargs: Any other ConverterConfig field

    Returns:
        ConverterConfig
    """
    if run_id is not None:
        kwargs['run_id'] = run_id
    return ConverterConfig(
        input_file=input_file,
        output_file=output_file,
        catalog_file=catalog_file,
        schema_file=schema_file,
        database=database,
        **kwargs
    )


def _coerce(name: str, value: Any) -> Any:
    if name in BOOLEAN_SETTINGS and isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    if name in INTEGER_SETTINGS and isinstance(value, str):
        return int(value)
    if name in STRING_SETTINGS:
        return str(value)
    return value


def _build_config(settings: Dict[str, Any], origin: str) -> ConverterConfig:
    known = {f.name for f in fields(ConverterConfig)}
    unknown = sorted(set(settings) - known)
    if unknown:
        raise ValueError(f"Unknown settings in {origin}: {unknown}")

    missing = [name for name in REQUIRED_SETTINGS if not settings.get(name)]
    if missing:
        raise ValueError(f"Missing required settings in {origin}: {missing}")

    return ConverterConfig(**{name: _coerce(name, value) for name, value in settings.items()})


def create_config_from_env() -> ConverterConfig:
    """
    Create a configuration from environment variables.

    A .env file is loaded first. Every ConverterConfig field can be set via
    E2A_<FIELD NAME IN UPPER CASE>; these are required:
    - E2A_INPUT_FILE
    - E2A_OUTPUT_FILE
    - E2A_CATALOG_FILE
    - E2A_SCHEMA_FILE

    Returns:
        ConverterConfig
    """
    load_dotenv()

    settings = {}
    for f in fields(ConverterConfig):
        value = os.getenv(ENV_PREFIX + f.name.upper())
        if value:
            settings[f.name] = value

    return _build_config(settings, 'environment')


def create_config_from_yaml(config_file: Union[str, Path]) -> ConverterConfig:
    """
    Create a configuration from a YAML profile.

    The file holds a mapping of ConverterConfig field names to values.

    Returns:
        ConverterConfig
    """
    config_file = Path(config_file)
    try:
        with open(config_file, "r") as f:
            settings = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file: {e}")

    if not isinstance(settings, dict):
        raise ValueError(f"Configuration file {config_file} must contain a mapping")
    return _build_config(settings, str(config_file))


def create_pipeline_from_env() -> ConverterPipeline:
    """
    Create a complete pipeline using environment variables.

    Returns:
        Configured ConverterPipeline instance
    """
    return ConverterPipeline(create_config_from_env())
