#!/usr/bin/env python3

"""
Command-line interface for the transcriptome builder.

Builds a transcriptome FASTA from a genome FASTA and a GTF/GFF annotation.
"""

import argparse
import sys
import os
import time
import logging
from typing import List, Optional

from transcriptome_builder.core.config import load_config
from transcriptome_builder.core.exceptions import PipelineError


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Build a transcriptome from a genome FASTA and a GTF/GFF annotation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Exon-based transcripts
  python pipeline_cli.py --genome genome.fa --annotation genes.gtf --output transcriptome.fa

  # Coding sequences with 8 workers, skipping malformed lines
  python pipeline_cli.py -f genome.fa -g genes.gff3 -m CDS -t 8 --error-policy skip -o cds.fa
        """
    )

    # Required arguments
    parser.add_argument(
        '-f', '--genome',
        required=True,
        help='Reference genome FASTA file'
    )
    parser.add_argument(
        '-g', '--annotation',
        required=True,
        help='Gene annotation file (GTF or GFF, optionally gzipped)'
    )

    # Optional parameters
    parser.add_argument(
        '-m', '--mode',
        choices=['exon', 'CDS'],
        help='Feature to extract from the annotation (default: exon)'
    )
    parser.add_argument(
        '-o', '--output',
        default='transcriptome.fa',
        help='Output FASTA file (default: transcriptome.fa)'
    )
    parser.add_argument(
        '-t', '--threads',
        type=int,
        help='Number of parallel workers (default: 1)'
    )
    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--error-policy',
        choices=['fail', 'skip'],
        help='Abort on the first malformed line, or log and skip it (default: fail)'
    )
    parser.add_argument(
        '--attribute-mode',
        choices=['tokenized', 'legacy'],
        help='Attribute column scanner (default: tokenized)'
    )
    parser.add_argument(
        '--strip-version',
        action='store_true',
        help='Drop trailing .N version suffixes from transcript IDs'
    )
    parser.add_argument(
        '--strict-chromosomes',
        action='store_true',
        help='Fail when an annotated chromosome is missing from the genome'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--log-file',
        help='Also write the log to this file'
    )

    # Advanced options
    parser.add_argument(
        '--chunk-size',
        type=int,
        help='Annotation lines per worker task (default: 10000)'
    )
    parser.add_argument(
        '--memory-limit',
        type=int,
        help='Memory limit in MB (default: 4096)'
    )

    return parser


def validate_input_files(args) -> None:
    """Validate that input files exist."""
    input_files = {
        'genome': args.genome,
        'annotation': args.annotation
    }

    for file_type, file_path in input_files.items():
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"{file_type} file not found: {file_path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)
    start_time = time.time()

    try:
        validate_input_files(args)

        config = load_config(config_path=args.config, use_env=True)

        # Override config with command line arguments
        if args.mode is not None:
            config.feature = args.mode
        if args.threads is not None:
            config.parallel_workers = args.threads
        if args.error_policy is not None:
            config.error_policy = args.error_policy
        if args.attribute_mode is not None:
            config.attribute_mode = args.attribute_mode
        if args.strip_version:
            config.strip_version_suffix = True
        if args.strict_chromosomes:
            config.strict_chromosomes = True
        if args.chunk_size is not None:
            config.chunk_size = args.chunk_size
        if args.memory_limit is not None:
            config.memory_limit_mb = args.memory_limit

        # Re-validate after CLI overrides.
        config.validate()

        from transcriptome_builder import TranscriptomePipeline

        pipeline = TranscriptomePipeline(config)
        success = pipeline.run(
            annotation_file=args.annotation,
            genome_file=args.genome,
            output_file=args.output,
            log_file=args.log_file
        )

        logger.info(f"Elapsed: {time.time() - start_time:.2f}s")

        if success:
            logger.info(f"Transcriptome written to {args.output}")
            return 0
        else:
            logger.error("Pipeline failed!")
            return 1

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except PipelineError as e:
        logger.error(f"Pipeline error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
