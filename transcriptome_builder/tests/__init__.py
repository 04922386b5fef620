#!/usr/bin/env python3

"""
Test suite for the transcriptome builder.

Unit tests covering attribute extraction, annotation parsing, interval
aggregation, sequence assembly and configuration, plus end-to-end runs of
the pipeline and command-line interface on small temporary inputs.
"""
