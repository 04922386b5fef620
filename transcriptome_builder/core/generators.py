#!/usr/bin/env python3

"""
Output generation: transcriptome FASTA and the processing report.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple


class OutputGenerator:
    """Write assembled transcripts and run summaries."""

    def write_fasta(self, sequences: Iterable[Tuple[str, str]], output_file: str) -> int:
        """
        Write one unwrapped FASTA record per transcript.

        Returns:
            Number of records written
        """
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        with open(output_path, 'w') as f:
            for transcript_id, sequence in sequences:
                f.write(f">{transcript_id}\n{sequence}\n")
                written += 1

        logging.info(f"Wrote {written} transcripts to {output_path}")
        return written

    def write_report(self, report_file: str, statistics: Dict[str, Any],
                     performance: Dict[str, Any], config: Dict[str, Any]) -> None:
        """Write a plain-text processing report."""
        with open(report_file, 'w') as f:
            f.write("Transcriptome Builder - Processing Report\n")
            f.write("=" * 50 + "\n\n")

            f.write("RESULTS\n")
            f.write("-" * 20 + "\n")
            for key, value in statistics.items():
                label = key.replace('_', ' ').capitalize()
                if isinstance(value, int):
                    f.write(f"{label}: {value:,}\n")
                else:
                    f.write(f"{label}: {value}\n")
            f.write("\n")

            f.write("PERFORMANCE METRICS\n")
            f.write("-" * 20 + "\n")
            f.write(f"Total processing time: {performance['total_elapsed_time']:.2f} seconds\n")
            f.write(f"Peak memory usage: {performance['peak_memory_mb']:.1f} MB\n\n")

            if performance['phases']:
                f.write("PHASE BREAKDOWN\n")
                f.write("-" * 20 + "\n")
                for phase_name, phase_data in performance['phases'].items():
                    f.write(f"{phase_name}: {phase_data['elapsed_time']:.2f}s ")
                    f.write(f"({phase_data['operations_count']} operations)\n")

            f.write("\nConfiguration used:\n")
            for key, value in config.items():
                f.write(f"  {key}: {value}\n")

        logging.info(f"Generated processing report: {report_file}")
