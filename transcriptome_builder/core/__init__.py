#!/usr/bin/env python3

"""
Core module for the transcriptome builder.

Contains fundamental data structures, exception types, and configuration
management components.
"""

from .data_structures import Strand, AnnotationRecord, TranscriptGroup
from .exceptions import (
    PipelineError, ParseError, MissingAttributeError, ParseAttributeError,
    NumericParseError, EmptyInputError, IntervalError, SequenceError,
    ConfigurationError, MemoryLimitError, GenomeError
)
from .config import PipelineConfig, load_config

__all__ = [
    'Strand', 'AnnotationRecord', 'TranscriptGroup',
    'PipelineError', 'ParseError', 'MissingAttributeError', 'ParseAttributeError',
    'NumericParseError', 'EmptyInputError', 'IntervalError', 'SequenceError',
    'ConfigurationError', 'MemoryLimitError', 'GenomeError',
    'PipelineConfig', 'load_config'
]
