#!/usr/bin/env python3

"""
Core data structures for the transcriptome builder.

Defines annotation records produced by the line parser and the
per-transcript interval groups built by the aggregator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class Strand(str, Enum):
    """Feature orientation on the genome."""
    PLUS = '+'
    MINUS = '-'
    UNKNOWN = '.'

    @classmethod
    def from_symbol(cls, symbol: str) -> 'Strand':
        """Map a strand column value to a Strand; anything but +/- is UNKNOWN."""
        if symbol == '+':
            return cls.PLUS
        if symbol == '-':
            return cls.MINUS
        return cls.UNKNOWN


@dataclass
class AnnotationRecord:
    """One annotation line that matched the target feature."""
    chromosome: str
    feature: str
    start: int
    end: int
    strand: Strand
    transcript_id: str

    def __post_init__(self):
        """Validate record data after initialization."""
        if self.start < 1:
            raise ValueError(f"Invalid start coordinate: {self.start} (coordinates are 1-based)")
        if self.end < self.start:
            raise ValueError(f"Invalid interval coordinates: {self.start}-{self.end}")
        if not self.transcript_id:
            raise ValueError("Transcript ID cannot be empty")

    @property
    def length(self) -> int:
        """Get interval length."""
        return self.end - self.start + 1

    @property
    def interval(self) -> Tuple[int, int]:
        return self.start, self.end


@dataclass
class TranscriptGroup:
    """Genomic location and intervals of a single transcript.

    Intervals are kept in insertion order, which is not meaningful once
    partial groups from several workers have been merged; use
    sorted_intervals() before reading sequence.
    """
    chromosome: str
    strand: Strand
    intervals: List[Tuple[int, int]] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: AnnotationRecord) -> 'TranscriptGroup':
        return cls(chromosome=record.chromosome, strand=record.strand,
                   intervals=[record.interval])

    def add_interval(self, start: int, end: int) -> None:
        self.intervals.append((start, end))

    def merge(self, other: 'TranscriptGroup') -> None:
        """Append another group's intervals; chromosome and strand stay first-seen."""
        self.intervals.extend(other.intervals)

    @property
    def interval_count(self) -> int:
        return len(self.intervals)

    @property
    def total_length(self) -> int:
        """Get summed length of all intervals."""
        return sum(end - start + 1 for start, end in self.intervals)

    def sorted_intervals(self) -> List[Tuple[int, int]]:
        """Get intervals sorted by coordinate (strand-aware)."""
        return sorted(self.intervals, reverse=self.strand == Strand.MINUS)
