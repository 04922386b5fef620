#!/usr/bin/env python3

"""
Main pipeline class for transcriptome construction.

Runs annotation parsing, genome loading, sequence assembly and output
generation as monitored phases.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .config import PipelineConfig
from .data_structures import TranscriptGroup
from .exceptions import PipelineError
from ..utils.performance_monitor import PerformanceMonitor

from .parsers import AnnotationRecordParser, GenomeIndex
from .processors import TranscriptAggregator, SequenceAssembler
from .generators import OutputGenerator


class TranscriptomePipeline:
    """Main pipeline class that coordinates all processing phases."""

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.monitor = PerformanceMonitor(memory_limit_mb=config.memory_limit_mb,
                                          enabled=config.enable_memory_monitoring)
        self.transcripts: Dict[str, TranscriptGroup] = {}
        self.sequences: List[Tuple[str, str]] = []
        self.genome: Optional[GenomeIndex] = None
        self.log_handler: Optional[logging.Handler] = None
        self.generator = OutputGenerator()
        self.statistics: Dict[str, int] = {
            'lines_skipped': 0,
            'transcripts_found': 0,
            'transcripts_written': 0,
            'transcripts_skipped': 0,
        }

    def run(self, annotation_file: str, genome_file: str, output_file: str,
            log_file: Optional[str] = None) -> bool:
        """
        Run the complete transcriptome pipeline.

        Args:
            annotation_file: Path to the annotation (GTF/GFF, optionally gzipped)
            genome_file: Path to the genome FASTA file
            output_file: Path of the transcriptome FASTA to write
            log_file: Optional path of an additional log file

        Returns:
            True if pipeline completed successfully
        """
        try:
            self._setup_pipeline_logging(log_file)

            logging.info("Starting transcriptome construction")
            logging.info(f"Configuration: {self.config}")
            logging.info(f"Input files: Annotation={annotation_file}, Genome={genome_file}")
            logging.info(f"Output file: {output_file}")

            self._parse_annotation(annotation_file)
            self._load_genome(genome_file)
            self._assemble_sequences()
            self._generate_outputs(output_file)

            if self.config.generate_reports:
                self._generate_final_report(f"{output_file}.report.txt")

            logging.info("Pipeline completed successfully")
            self.monitor.log_performance_report()
            return True

        except PipelineError as e:
            logging.error(f"Pipeline failed: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False
        except OSError as e:
            logging.error(f"Pipeline failed with I/O error: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False
        finally:
            if self.genome is not None:
                self.genome.close()
            self._teardown_pipeline_logging()

    def _setup_pipeline_logging(self, log_file: Optional[str]) -> None:
        """Set up pipeline-specific logging."""
        root_logger = logging.getLogger()

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(levelname)s - %(message)s'
            ))
            root_logger.addHandler(file_handler)
            self.log_handler = file_handler

        if self.config.debug_mode:
            root_logger.setLevel(logging.DEBUG)

    def _teardown_pipeline_logging(self) -> None:
        if self.log_handler is not None:
            logging.getLogger().removeHandler(self.log_handler)
            self.log_handler.close()
            self.log_handler = None

    def _parse_annotation(self, annotation_file: str) -> None:
        with self.monitor.phase_context("annotation_parsing"):
            parser = AnnotationRecordParser(
                feature=self.config.feature,
                attribute_mode=self.config.attribute_mode,
                strip_version_suffix=self.config.strip_version_suffix
            )
            aggregator = TranscriptAggregator(
                parallel_workers=self.config.parallel_workers,
                executor_type=self.config.executor_type,
                skip_invalid=self.config.skip_invalid,
                monitor=self.monitor,
                check_memory=self.config.enable_memory_monitoring
            )

            self.transcripts = aggregator.aggregate_file(annotation_file, parser,
                                                         self.config.chunk_size)
            self.statistics['lines_skipped'] = aggregator.lines_skipped
            self.statistics['transcripts_found'] = len(self.transcripts)

            if not self.transcripts:
                logging.warning(f"No {self.config.feature} features with a transcript_id "
                                f"found in {annotation_file}")

    def _load_genome(self, genome_file: str) -> None:
        with self.monitor.phase_context("genome_loading") as metrics:
            self.genome = GenomeIndex.from_fasta(
                genome_file,
                allow_fuzzy_match=self.config.allow_fuzzy_chromosome_match
            )
            metrics.operations_count = len(self.genome)

    def _assemble_sequences(self) -> None:
        with self.monitor.phase_context("sequence_assembly") as metrics:
            assembler = SequenceAssembler(
                self.genome,
                parallel_workers=self.config.parallel_workers,
                strict_chromosomes=self.config.strict_chromosomes,
                check_overlaps=self.config.check_overlaps,
                skip_invalid=self.config.skip_invalid
            )

            self.sequences = assembler.assemble_all(self.transcripts)
            metrics.operations_count = len(self.transcripts)

            skipped = len(self.transcripts) - len(self.sequences)
            self.statistics['transcripts_skipped'] = skipped
            logging.info(f"Assembled {len(self.sequences)} transcripts ({skipped} skipped)")

    def _generate_outputs(self, output_file: str) -> None:
        with self.monitor.phase_context("output_generation") as metrics:
            written = self.generator.write_fasta(self.sequences, output_file)
            metrics.operations_count = written
            self.statistics['transcripts_written'] = written

    def _generate_final_report(self, report_file: str) -> None:
        """Write the processing report; failures here do not fail the run."""
        try:
            self.generator.write_report(
                report_file,
                self.statistics,
                self.monitor.get_performance_summary(),
                self.config.to_dict()
            )
        except OSError as e:
            logging.warning(f"Failed to generate processing report: {e}")
