#!/usr/bin/env python3

"""
Transcriptome Builder

Reconstructs transcript sequences from a reference genome (FASTA) and a
gene annotation (GTF/GFF) by grouping exon or CDS intervals per transcript
and concatenating the matching genome slices in transcription order.

Modules:
- core: Data structures, parsers, processors, configuration and the pipeline
- utils: Performance monitoring
- tests: Unit and integration tests
"""

__version__ = "0.1.0"

from .core.data_structures import Strand, AnnotationRecord, TranscriptGroup
from .core.exceptions import (
    PipelineError, ParseError, MissingAttributeError, ParseAttributeError,
    NumericParseError, EmptyInputError, IntervalError, SequenceError,
    ConfigurationError, MemoryLimitError, GenomeError
)
from .core.config import PipelineConfig, load_config
from .core.attributes import AttributeExtractor, extract_transcript_id
from .core.parsers import AnnotationRecordParser, AnnotationReader, GenomeIndex
from .core.processors import TranscriptAggregator, SequenceAssembler
from .core.nucleotides import complement, reverse_complement
from .core.pipeline import TranscriptomePipeline

__all__ = [
    # Main pipeline
    'TranscriptomePipeline',
    # Processing components
    'AttributeExtractor', 'extract_transcript_id',
    'AnnotationRecordParser', 'AnnotationReader', 'GenomeIndex',
    'TranscriptAggregator', 'SequenceAssembler',
    'complement', 'reverse_complement',
    # Data structures
    'Strand', 'AnnotationRecord', 'TranscriptGroup',
    # Exceptions
    'PipelineError', 'ParseError', 'MissingAttributeError', 'ParseAttributeError',
    'NumericParseError', 'EmptyInputError', 'IntervalError', 'SequenceError',
    'ConfigurationError', 'MemoryLimitError', 'GenomeError',
    # Configuration
    'PipelineConfig', 'load_config'
]
