"""Configuration module for airmerge.

This module provides Pydantic-based validation of reader options and YAML
loading.
"""

from airmerge.config.parser import load_options, load_yaml, options_to_yaml, validate_options
from airmerge.config.schema import ReaderOptions, StrictModel

__all__ = [
    # Schema classes
    "ReaderOptions",
    "StrictModel",
    # Parser functions
    "load_options",
    "load_yaml",
    "options_to_yaml",
    "validate_options",
]
