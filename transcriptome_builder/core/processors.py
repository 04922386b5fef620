#!/usr/bin/env python3

"""
Processing classes for transcript aggregation and sequence assembly.

Aggregation is a fork-join fold: every worker builds a private mapping of
transcript_id -> TranscriptGroup for its partition, and the partial
mappings are merged afterwards. Workers share no mutable state, so no
locking is needed; each partial is consumed exactly once by the merge.
"""

import logging
import math
from collections import deque
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from functools import partial, reduce
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from intervaltree import Interval, IntervalTree

from .data_structures import AnnotationRecord, Strand, TranscriptGroup
from .exceptions import GenomeError, ParseError, SequenceError
from .nucleotides import reverse_complement
from .parsers import AnnotationReader, AnnotationRecordParser, GenomeIndex

TranscriptMap = Dict[str, TranscriptGroup]
NumberedLine = Tuple[int, str]


def _add_record(transcripts: TranscriptMap, record: AnnotationRecord) -> None:
    group = transcripts.get(record.transcript_id)
    if group is None:
        transcripts[record.transcript_id] = TranscriptGroup.from_record(record)
    else:
        group.add_interval(record.start, record.end)


def fold_records(records: Iterable[AnnotationRecord]) -> TranscriptMap:
    """Group records by transcript; chromosome and strand are set on first insertion."""
    transcripts: TranscriptMap = {}
    for record in records:
        _add_record(transcripts, record)
    return transcripts


def fold_lines(chunk: Sequence[NumberedLine], parser: AnnotationRecordParser,
               skip_invalid: bool = False, filename: str = "") -> Tuple[TranscriptMap, int]:
    """
    Parse and group one chunk of numbered annotation lines.

    Returns:
        The partial transcript mapping and the number of lines skipped
        because they failed to parse (always 0 unless skip_invalid)
    """
    transcripts: TranscriptMap = {}
    skipped = 0

    for line_num, line in chunk:
        try:
            record = parser.parse_line(line)
        except ParseError as e:
            e.filename = filename
            e.line_number = line_num
            if not skip_invalid:
                raise
            logging.warning(f"Skipping line: {e}")
            skipped += 1
            continue

        if record is not None:
            _add_record(transcripts, record)

    return transcripts, skipped


def merge_partials(combined: TranscriptMap, partial_map: TranscriptMap) -> TranscriptMap:
    """Merge partial_map into combined; groups already in combined keep their location."""
    for transcript_id, group in partial_map.items():
        existing = combined.get(transcript_id)
        if existing is None:
            combined[transcript_id] = group
        else:
            existing.merge(group)
    return combined


def partition(items: Sequence, parts: int) -> List[Sequence]:
    """Split items into at most `parts` contiguous, non-empty slices."""
    if not items:
        return []
    size = math.ceil(len(items) / parts)
    return [items[i:i + size] for i in range(0, len(items), size)]


class TranscriptAggregator:
    """Group annotation intervals by transcript across parallel workers."""

    def __init__(self, parallel_workers: int = 1, executor_type: str = 'process',
                 skip_invalid: bool = False, monitor=None, check_memory: bool = False):
        self.parallel_workers = parallel_workers
        self.executor_type = executor_type
        self.skip_invalid = skip_invalid
        self.monitor = monitor
        self.check_memory = check_memory
        self.lines_skipped = 0

    def aggregate(self, records: Iterable[AnnotationRecord]) -> TranscriptMap:
        """Group already-parsed records, partitioned evenly across the workers."""
        partitions = partition(list(records), self.parallel_workers)
        partials = self._map(fold_records, partitions)
        return reduce(merge_partials, partials, {})

    def aggregate_lines(self, chunks: Iterable[Sequence[NumberedLine]],
                        parser: AnnotationRecordParser, filename: str = "") -> TranscriptMap:
        """Parse and group chunks of numbered annotation lines."""
        worker = partial(fold_lines, parser=parser, skip_invalid=self.skip_invalid,
                         filename=filename)

        transcripts: TranscriptMap = {}
        self.lines_skipped = 0
        for partial_map, skipped in self._map(worker, chunks):
            self.lines_skipped += skipped
            merge_partials(transcripts, partial_map)
            if self.monitor:
                self.monitor.record_operations(len(partial_map))
                if self.check_memory:
                    self.monitor.check_memory_limit()

        if self.lines_skipped:
            logging.warning(f"Skipped {self.lines_skipped} unparseable annotation lines")
        return transcripts

    def aggregate_file(self, file_path: str, parser: AnnotationRecordParser,
                       chunk_size: int = 10000) -> TranscriptMap:
        """Parse and group every data line of a GTF/GFF file."""
        reader = AnnotationReader(file_path, chunk_size)
        logging.info(f"Parsing {reader.file_type} file: {file_path} "
                     f"(feature: {parser.feature}, workers: {self.parallel_workers})")

        transcripts = self.aggregate_lines(reader.iter_chunks(), parser, file_path)

        logging.info(f"Grouped {sum(g.interval_count for g in transcripts.values())} "
                     f"{parser.feature} intervals into {len(transcripts)} transcripts")
        return transcripts

    def _create_executor(self) -> Executor:
        if self.executor_type == 'thread':
            return ThreadPoolExecutor(max_workers=self.parallel_workers)
        return ProcessPoolExecutor(max_workers=self.parallel_workers)

    def _map(self, func: Callable, partitions: Iterable) -> Iterator:
        """Apply func to every partition, yielding results in submission order."""
        if self.parallel_workers == 1:
            for part in partitions:
                yield func(part)
            return

        # At most max_in_flight partitions are held in pending futures
        max_in_flight = 2 * self.parallel_workers
        pending = deque()
        with self._create_executor() as executor:
            try:
                for part in partitions:
                    pending.append(executor.submit(func, part))
                    if len(pending) >= max_in_flight:
                        yield pending.popleft().result()
                while pending:
                    yield pending.popleft().result()
            except BaseException:
                for future in pending:
                    future.cancel()
                raise


class SequenceAssembler:
    """Build transcript sequences from grouped intervals and a genome."""

    def __init__(self, genome: GenomeIndex, parallel_workers: int = 1,
                 strict_chromosomes: bool = False, check_overlaps: bool = True,
                 skip_invalid: bool = False):
        self.genome = genome
        self.parallel_workers = parallel_workers
        self.strict_chromosomes = strict_chromosomes
        self.check_overlaps = check_overlaps
        self.skip_invalid = skip_invalid

    def assemble(self, transcript_id: str, group: TranscriptGroup) -> Optional[str]:
        """
        Concatenate a transcript's genome slices in transcription order.

        Plus-strand intervals are read in ascending order as-is; minus-strand
        intervals are read in descending order, each reverse-complemented.

        Returns:
            The sequence, or None when the transcript cannot be assembled
            (empty id, unknown strand, chromosome missing from the genome)
        """
        if not transcript_id:
            logging.debug("Skipping transcript with empty ID")
            return None

        if group.strand == Strand.UNKNOWN:
            logging.debug(f"Skipping transcript {transcript_id} with unknown strand")
            return None

        chromosome = self.genome.resolve_chromosome(group.chromosome)
        if chromosome is None:
            if self.strict_chromosomes:
                raise GenomeError(f"Chromosome not found in genome for transcript {transcript_id}",
                                  group.chromosome)
            logging.warning(f"Chromosome {group.chromosome} not found in genome, "
                            f"skipping transcript {transcript_id}")
            return None

        intervals = group.sorted_intervals()
        if self.check_overlaps:
            overlaps = self.find_overlaps(intervals)
            if overlaps:
                logging.warning(f"Transcript {transcript_id} has {len(overlaps)} overlapping "
                                f"interval pair(s), first: {overlaps[0]}")

        try:
            segments = []
            for start, end in intervals:
                segment = self.genome.fetch(chromosome, start, end)
                if group.strand == Strand.MINUS:
                    segment = reverse_complement(segment)
                segments.append(segment)
        except SequenceError as e:
            e.sequence_id = transcript_id
            e.sequence_type = "transcript"
            return self._handle_failure(transcript_id, e)
        except GenomeError as e:
            return self._handle_failure(transcript_id, e)

        return ''.join(segments)

    def _handle_failure(self, transcript_id: str, error: Exception) -> None:
        if not self.skip_invalid:
            raise error
        logging.warning(f"Skipping transcript {transcript_id}: {error}")
        return None

    @staticmethod
    def find_overlaps(intervals: List[Tuple[int, int]]) -> List[Tuple[Tuple[int, int], Tuple[int, int]]]:
        """Return every pair of intervals sharing at least one position."""
        # IntervalTree intervals are half-open
        tree = IntervalTree(Interval(start, end + 1, index)
                            for index, (start, end) in enumerate(intervals))

        pairs = set()
        for index, (start, end) in enumerate(intervals):
            for hit in tree.overlap(start, end + 1):
                if hit.data > index:
                    pairs.add(((start, end), (hit.begin, hit.end - 1)))
        return sorted(pairs)

    def assemble_all(self, transcripts: TranscriptMap) -> List[Tuple[str, str]]:
        """Assemble every transcript, keeping the mapping's order; skipped ones are dropped."""
        items = list(transcripts.items())

        if self.parallel_workers == 1:
            sequences = [self.assemble(transcript_id, group) for transcript_id, group in items]
        else:
            # Transcripts are independent; the genome index is only read
            with ThreadPoolExecutor(max_workers=self.parallel_workers) as executor:
                sequences = list(executor.map(lambda item: self.assemble(*item), items))

        return [(transcript_id, sequence)
                for (transcript_id, _), sequence in zip(items, sequences)
                if sequence is not None]
