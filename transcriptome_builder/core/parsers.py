#!/usr/bin/env python3

"""
File parsers for gene annotations and reference genomes.

Handles GTF/GFF line parsing and FASTA genome access.
"""

import os
import gzip
import logging
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import pyfaidx

from .attributes import AttributeExtractor
from .data_structures import AnnotationRecord, Strand
from .exceptions import (
    ParseError, NumericParseError, EmptyInputError, IntervalError, GenomeError
)

ANNOTATION_COLUMNS = 9


class AnnotationRecordParser:
    """Parse tab-delimited GTF/GFF lines into AnnotationRecords."""

    def __init__(self, feature: str = 'exon', attribute_mode: str = 'tokenized',
                 strip_version_suffix: bool = False):
        self.feature = feature
        self.extractor = AttributeExtractor(attribute_mode, strip_version_suffix)

    def parse_line(self, line: str, feature_filter: Optional[str] = None) -> Optional[AnnotationRecord]:
        """
        Parse one annotation line.

        Args:
            line: A GTF/GFF data line (comments are skipped upstream)
            feature_filter: Feature to keep; defaults to the parser's feature

        Returns:
            The record, or None when the line describes another feature
        """
        feature_filter = feature_filter or self.feature

        line = line.rstrip('\r\n')
        if not line.strip():
            raise EmptyInputError("Empty annotation line")

        fields = line.split('\t')
        if len(fields) != ANNOTATION_COLUMNS:
            raise ParseError(f"Expected {ANNOTATION_COLUMNS} tab-separated columns, found {len(fields)}")

        chrom, source, feature, start, end, score, strand, frame, attributes = fields
        if feature != feature_filter:
            return None

        start = self._parse_coordinate(start, 'start')
        end = self._parse_coordinate(end, 'end')
        if start < 1 or end < start:
            raise IntervalError(f"Invalid interval {start}-{end} on {chrom}")

        transcript_id = self.extractor.extract_transcript_id(attributes)

        return AnnotationRecord(
            chromosome=chrom,
            feature=feature,
            start=start,
            end=end,
            strand=Strand.from_symbol(strand),
            transcript_id=transcript_id
        )

    def _parse_coordinate(self, value: str, column: str) -> int:
        # Unsigned ASCII digits only
        if not (value.isascii() and value.isdigit()):
            raise NumericParseError(f"Invalid {column} coordinate: {value!r}")
        try:
            return int(value)
        except ValueError:
            raise NumericParseError(f"Invalid {column} coordinate: {value!r}")


class AnnotationReader:
    """Stream data lines of a GTF/GFF file in numbered chunks."""

    def __init__(self, file_path: str, chunk_size: int = 10000):
        self.file_path = file_path
        self.chunk_size = chunk_size
        self.file_type = self._detect_file_type(file_path)

    @staticmethod
    def _detect_file_type(file_path: str) -> str:
        name = file_path.lower()
        if name.endswith('.gz'):
            name = name[:-3]
        return "GTF" if name.endswith('.gtf') else "GFF"

    def _open(self):
        if self.file_path.endswith('.gz'):
            return gzip.open(self.file_path, 'rt')
        return open(self.file_path, 'r')

    def iter_lines(self) -> Iterator[Tuple[int, str]]:
        """Yield (line_number, line) for every non-comment, non-blank line."""
        try:
            with self._open() as f:
                for line_num, line in enumerate(f, 1):
                    if not line.strip() or line.startswith('#'):
                        continue
                    yield line_num, line
        except FileNotFoundError:
            raise ParseError(f"Annotation file not found: {self.file_path}")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to read {self.file_type} file: {e}", self.file_path)

    def iter_chunks(self) -> Iterator[List[Tuple[int, str]]]:
        """Yield lists of at most chunk_size numbered lines."""
        chunk = []
        for numbered_line in self.iter_lines():
            chunk.append(numbered_line)
            if len(chunk) >= self.chunk_size:
                yield chunk
                chunk = []
        if chunk:
            yield chunk


class GenomeIndex:
    """Read-only access to chromosome sequences by name.

    Wraps any mapping of name -> sequence; from_fasta() builds one backed by
    a pyfaidx index, keyed by the first whitespace-delimited header token.
    """

    def __init__(self, sequences: Mapping, allow_fuzzy_match: bool = True):
        self.sequences = sequences
        self.allow_fuzzy_match = allow_fuzzy_match
        self.names: List[str] = list(sequences.keys())
        self._resolved: Dict[str, Optional[str]] = {}

    @classmethod
    def from_fasta(cls, genome_file: str, allow_fuzzy_match: bool = True) -> 'GenomeIndex':
        """Index and open a genome FASTA file."""
        if not os.path.exists(genome_file):
            raise GenomeError(f"Genome file not found: {genome_file}")

        logging.info(f"Loading genome from {genome_file}")
        try:
            fasta = pyfaidx.Fasta(genome_file, as_raw=True, sequence_always_upper=False)
        except pyfaidx.FastaIndexingError as e:
            raise GenomeError(f"Failed to index genome file {genome_file}: {e}")
        except ValueError as e:
            # Raised for duplicate sequence names
            raise GenomeError(f"Invalid genome file {genome_file}: {e}")

        genome = cls(fasta, allow_fuzzy_match)
        logging.info(f"Loaded genome with {len(genome.names)} sequences")
        return genome

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: str) -> bool:
        return self.resolve_chromosome(name) is not None

    def resolve_chromosome(self, name: str) -> Optional[str]:
        """
        Find the loaded sequence name for an annotation chromosome name.

        Exact matches win. Otherwise, when fuzzy matching is enabled, the
        first sequence whose name contains the annotation name is used;
        this is ambiguous when one chromosome name is a substring of another
        (chr1 vs chr10), which is logged.
        """
        if name in self._resolved:
            return self._resolved[name]

        if name in self.sequences:
            resolved = name
        elif self.allow_fuzzy_match and name:
            candidates = [seq_name for seq_name in self.names if name in seq_name]
            if len(candidates) > 1:
                logging.warning(f"Chromosome {name} matches several sequences "
                                f"({', '.join(candidates)}); using {candidates[0]}")
            resolved = candidates[0] if candidates else None
        else:
            resolved = None

        self._resolved[name] = resolved
        return resolved

    def sequence_for(self, name: str) -> Optional[str]:
        """Return the full sequence for a chromosome, or None if it is not loaded."""
        resolved = self.resolve_chromosome(name)
        if resolved is None:
            return None
        return str(self.sequences[resolved][:])

    def chromosome_length(self, name: str) -> int:
        resolved = self.resolve_chromosome(name)
        if resolved is None:
            raise GenomeError("Chromosome not found in genome", name)
        return len(self.sequences[resolved])

    def fetch(self, name: str, start: int, end: int) -> str:
        """
        Extract a 1-based inclusive interval.

        The slice is the half-open range [start-1, end), giving
        end - start + 1 characters.
        """
        resolved = self.resolve_chromosome(name)
        if resolved is None:
            raise GenomeError("Chromosome not found in genome", name)

        record = self.sequences[resolved]
        if start < 1 or end > len(record):
            raise GenomeError(f"Interval outside sequence of length {len(record)}",
                              resolved, f"{start}-{end}")

        return str(record[start - 1:end])

    def close(self) -> None:
        if hasattr(self.sequences, 'close'):
            self.sequences.close()

    def __enter__(self) -> 'GenomeIndex':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
