#!/usr/bin/env python3

"""
Unit tests for strand-aware sequence assembly and nucleotide complement.
"""

import unittest
import os
import sys

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from transcriptome_builder.core.data_structures import Strand, TranscriptGroup
from transcriptome_builder.core.exceptions import GenomeError, SequenceError
from transcriptome_builder.core.nucleotides import complement, reverse_complement
from transcriptome_builder.core.parsers import GenomeIndex
from transcriptome_builder.core.processors import SequenceAssembler

# 1-based: positions 10-15 are CGTACG, positions 20-25 are TAAAAA
CHR1 = "AAAAAAAAAC" + "GTACGTACGT" + "AAAAA"
# 1-based: positions 2-4 are TGC, positions 10-14 are TTTAA
CHR2 = "ATGCCCGGGTTTAAACCCGG"


class TestNucleotides(unittest.TestCase):
    """Test the complement table."""

    def test_complement(self):
        self.assertEqual(complement("ATCGN"), "TAGCN")
        self.assertEqual(complement("atcgn"), "tagcn")
        self.assertEqual(complement("AcGt"), "TgCa")

    def test_reverse_complement(self):
        self.assertEqual(reverse_complement("AACG"), "CGTT")
        self.assertEqual(reverse_complement("TTTAA"), "TTAAA")
        self.assertEqual(reverse_complement(""), "")

    def test_reverse_complement_is_self_inverse(self):
        for sequence in ("ACGTTGCAAGGCTTAACCGG", "acgtNNNNacgt", CHR1, CHR2, "N"):
            with self.subTest(sequence=sequence):
                self.assertEqual(reverse_complement(reverse_complement(sequence)), sequence)

    def test_unknown_nucleotide_fails(self):
        with self.assertRaises(SequenceError):
            complement("ACGR")
        with self.assertRaises(SequenceError):
            reverse_complement("AC-GT")


class TestSequenceAssembler(unittest.TestCase):
    """Test per-transcript assembly."""

    def setUp(self):
        self.genome = GenomeIndex({"chr1": CHR1, "chr2": CHR2, "chrIUPAC": "ACGTRYACGT"})
        self.assembler = SequenceAssembler(self.genome)

    def test_plus_strand(self):
        group = TranscriptGroup("chr1", Strand.PLUS, [(10, 15), (20, 25)])
        expected = CHR1[9:15] + CHR1[19:25]

        self.assertEqual(self.assembler.assemble("T1", group), expected)
        self.assertEqual(expected, "CGTACGTAAAAA")

    def test_minus_strand(self):
        group = TranscriptGroup("chr1", Strand.MINUS, [(10, 15), (20, 25)])
        # TAAAAA -> TTTTTA, then CGTACG -> CGTACG
        self.assertEqual(self.assembler.assemble("T1", group), "TTTTTACGTACG")

    def test_minus_strand_hand_computed(self):
        group = TranscriptGroup("chr2", Strand.MINUS, [(2, 4), (10, 14)])
        # TTTAA -> TTAAA, then TGC -> GCA
        self.assertEqual(self.assembler.assemble("T2", group), "TTAAAGCA")

    def test_minus_equals_reverse_complement_of_plus(self):
        intervals = [(2, 4), (10, 14), (17, 20)]
        plus = self.assembler.assemble("T", TranscriptGroup("chr2", Strand.PLUS, list(intervals)))
        minus = self.assembler.assemble("T", TranscriptGroup("chr2", Strand.MINUS, list(intervals)))

        self.assertEqual(minus, reverse_complement(plus))

    def test_interval_order_is_irrelevant(self):
        ordered = TranscriptGroup("chr2", Strand.PLUS, [(2, 4), (10, 14)])
        shuffled = TranscriptGroup("chr2", Strand.PLUS, [(10, 14), (2, 4)])

        self.assertEqual(self.assembler.assemble("T", shuffled), "TGCTTTAA")
        self.assertEqual(self.assembler.assemble("T", ordered), "TGCTTTAA")

    def test_empty_transcript_id_is_skipped(self):
        group = TranscriptGroup("chr1", Strand.PLUS, [(10, 15)])
        self.assertIsNone(self.assembler.assemble("", group))

    def test_unknown_strand_is_skipped(self):
        group = TranscriptGroup("chr1", Strand.UNKNOWN, [(10, 15)])
        self.assertIsNone(self.assembler.assemble("T1", group))

    def test_missing_chromosome(self):
        group = TranscriptGroup("chrX", Strand.PLUS, [(10, 15)])

        with self.assertLogs(level='WARNING'):
            self.assertIsNone(self.assembler.assemble("T1", group))

        strict = SequenceAssembler(self.genome, strict_chromosomes=True)
        with self.assertRaises(GenomeError):
            strict.assemble("T1", group)

    def test_containment_fallback(self):
        genome = GenomeIndex({"NC_000001": CHR1})
        group = TranscriptGroup("000001", Strand.PLUS, [(10, 15)])
        self.assertEqual(SequenceAssembler(genome).assemble("T1", group), "CGTACG")

    def test_unknown_nucleotide_on_minus_strand(self):
        group = TranscriptGroup("chrIUPAC", Strand.MINUS, [(1, 10)])

        with self.assertRaises(SequenceError) as ctx:
            self.assembler.assemble("T1", group)
        self.assertEqual(ctx.exception.sequence_id, "T1")

        lenient = SequenceAssembler(self.genome, skip_invalid=True)
        with self.assertLogs(level='WARNING'):
            self.assertIsNone(lenient.assemble("T1", group))

    def test_unknown_nucleotide_on_plus_strand_passes(self):
        group = TranscriptGroup("chrIUPAC", Strand.PLUS, [(4, 6)])
        self.assertEqual(self.assembler.assemble("T1", group), "TRY")

    def test_interval_beyond_chromosome(self):
        group = TranscriptGroup("chr2", Strand.PLUS, [(15, 30)])

        with self.assertRaises(GenomeError):
            self.assembler.assemble("T1", group)

        lenient = SequenceAssembler(self.genome, skip_invalid=True)
        with self.assertLogs(level='WARNING'):
            self.assertIsNone(lenient.assemble("T1", group))

    def test_overlapping_intervals_are_reported(self):
        group = TranscriptGroup("chr1", Strand.PLUS, [(10, 15), (14, 20)])

        with self.assertLogs(level='WARNING') as logs:
            sequence = self.assembler.assemble("T1", group)

        self.assertEqual(sequence, CHR1[9:15] + CHR1[13:20])
        self.assertTrue(any("overlapping" in message for message in logs.output))


class TestFindOverlaps(unittest.TestCase):
    """Test interval overlap detection."""

    def test_disjoint_intervals(self):
        self.assertEqual(SequenceAssembler.find_overlaps([(10, 15), (16, 20), (30, 40)]), [])

    def test_overlap_pairs(self):
        overlaps = SequenceAssembler.find_overlaps([(10, 15), (15, 20), (30, 40), (35, 36)])
        self.assertEqual(overlaps, [((10, 15), (15, 20)), ((30, 40), (35, 36))])

    def test_duplicate_intervals(self):
        self.assertEqual(SequenceAssembler.find_overlaps([(10, 15), (10, 15)]),
                         [((10, 15), (10, 15))])


class TestAssembleAll(unittest.TestCase):
    """Test assembling many transcripts."""

    def setUp(self):
        self.genome = GenomeIndex({"chr1": CHR1, "chr2": CHR2})
        self.transcripts = {
            "T1": TranscriptGroup("chr1", Strand.PLUS, [(10, 15), (20, 25)]),
            "T2": TranscriptGroup("chr2", Strand.MINUS, [(2, 4), (10, 14)]),
            "T3": TranscriptGroup("chr1", Strand.UNKNOWN, [(1, 5)]),
            "T4": TranscriptGroup("chrX", Strand.PLUS, [(1, 5)]),
            "T5": TranscriptGroup("chr2", Strand.PLUS, [(1, 3)]),
        }
        self.expected = [("T1", "CGTACGTAAAAA"), ("T2", "TTAAAGCA"), ("T5", "ATG")]

    def test_sequential(self):
        with self.assertLogs(level='WARNING'):
            sequences = SequenceAssembler(self.genome).assemble_all(self.transcripts)
        self.assertEqual(sequences, self.expected)

    def test_parallel_keeps_order(self):
        with self.assertLogs(level='WARNING'):
            sequences = SequenceAssembler(self.genome, parallel_workers=3).assemble_all(self.transcripts)
        self.assertEqual(sequences, self.expected)

    def test_errors_propagate_from_threads(self):
        self.transcripts["T6"] = TranscriptGroup("chr2", Strand.PLUS, [(1, 99)])
        assembler = SequenceAssembler(self.genome, parallel_workers=2)

        with self.assertRaises(GenomeError):
            assembler.assemble_all(self.transcripts)


if __name__ == '__main__':
    unittest.main()
