#!/usr/bin/env python3

"""
Nucleotide complement table.
"""

from .exceptions import SequenceError

NUCLEOTIDES = 'ATCGNatcgn'
COMPLEMENTS = 'TAGCNtagcn'

_COMPLEMENT_TABLE = str.maketrans(NUCLEOTIDES, COMPLEMENTS)
_VALID_NUCLEOTIDES = frozenset(NUCLEOTIDES)


def complement(sequence: str) -> str:
    """
    Complement each base, preserving case.

    Raises:
        SequenceError: if the sequence holds anything other than A, T, C, G or N
    """
    invalid = set(sequence) - _VALID_NUCLEOTIDES
    if invalid:
        raise SequenceError(f"Cannot complement nucleotide(s): {', '.join(sorted(invalid))}")
    return sequence.translate(_COMPLEMENT_TABLE)


def reverse_complement(sequence: str) -> str:
    """Get reverse complement of DNA sequence."""
    return complement(sequence[::-1])
