"""Document-level orchestration of chunk analysis."""

import logging
import os
from typing import Optional

from chunkscan.errors import ConfigError, ErrorKind
from chunkscan.models import (
    AggregateReport,
    AnalysisOptions,
    ChunkResult,
    ContainerKind,
    ConversionResult,
    DocumentJob,
)
from chunkscan.pipeline.aggregate import ResultAggregator
from chunkscan.pipeline.job import CancellationToken, run_chunk_job, run_conversion_job
from chunkscan.pipeline.planner import plan_chunks
from chunkscan.pipeline.pool import ConversionFn, JobFn, WorkerPool
from chunkscan.pipeline.quality import QualityScorer
from chunkscan.pipeline.retry import RetryCoordinator

logger = logging.getLogger(__name__)


class DocumentAnalyzer:
    """Run a DocumentJob end to end and produce an AggregateReport.

    The job's own options drive the run; the analyzer's options are the
    defaults for jobs it plans itself (see ``analyze_path``).
    """

    def __init__(
        self,
        options: Optional[AnalysisOptions] = None,
        job_fn: Optional[JobFn] = None,
        conversion_fn: Optional[ConversionFn] = None,
    ):
        if options is not None and not isinstance(options, AnalysisOptions):
            raise ConfigError(
                f"Expected AnalysisOptions, got {type(options).__name__}"
            )
        self.options = options or AnalysisOptions()
        self.job_fn = job_fn or run_chunk_job
        self.conversion_fn = conversion_fn or run_conversion_job
        self.aggregator = ResultAggregator()

    def analyze(
        self, job: DocumentJob, cancel_token: Optional[CancellationToken] = None
    ) -> AggregateReport:
        """Analyze every chunk of a job.

        Args:
            job: File, chunk descriptors and options
            cancel_token: Optional token; setting it stops dispatch

        Returns:
            AggregateReport. Document-level rejections come back as a report
            with ``error_kind`` set and no chunks.
        """
        options = job.options
        rejection = self._validate(job)
        if rejection is not None:
            kind, message = rejection
            logger.warning(f"Rejected {job.file_path}: {message}")
            return AggregateReport(
                file_path=job.file_path,
                success=False,
                error=message,
                error_kind=kind,
            )

        logger.info(f"Analyzing {job.file_path} in {len(job.chunks)} chunks")
        coordinator = RetryCoordinator(options.errors)
        conversions: list[ConversionResult] = []

        with WorkerPool(options, self.job_fn, self.conversion_fn) as pool:
            outcome = coordinator.run(pool, job.chunks, cancel_token)
            if options.ocr.enabled and not outcome.aborted:
                conversions = self._convert(pool, job, outcome.results)

        report = self.aggregator.aggregate(
            job.file_path,
            outcome.results,
            continue_on_error=options.errors.continue_on_error,
            aborted=outcome.aborted,
            skipped=outcome.skipped,
            conversions=conversions,
            events=outcome.events,
        )

        text_chars = sum(r.char_count for r in report.chunks if r.success)
        scorer = QualityScorer(options.quality)
        report.quality = scorer.score(text_chars, [p.confidence for p in report.ocr_pages])

        logger.info(
            f"Finished {job.file_path}: {report.structure.sheets} sheets, "
            f"{report.structure.total_rows} rows, quality {report.quality.tier.value}"
        )
        return report

    def analyze_path(self, file_path: str, chunk_count: int = 4) -> AggregateReport:
        """Plan ``chunk_count`` chunks over a file and analyze them."""
        path = str(file_path)
        chunks = plan_chunks(path, chunk_count) if os.path.isfile(path) else []
        return self.analyze(DocumentJob(file_path=path, chunks=chunks, options=self.options))

    def _validate(self, job: DocumentJob) -> Optional[tuple[ErrorKind, str]]:
        options = job.options
        if not options.supports(job.extension):
            return ErrorKind.UNSUPPORTED_FORMAT, f"Unsupported extension {job.extension!r}"
        if not os.path.isfile(job.file_path):
            return ErrorKind.IO_ERROR, f"File not found: {job.file_path}"

        size = os.path.getsize(job.file_path)
        if size > options.max_file_size:
            return (
                ErrorKind.FILE_TOO_LARGE,
                f"File is {size} bytes, limit is {options.max_file_size}",
            )
        return None

    def _convert(
        self, pool: WorkerPool, job: DocumentJob, results: list[ChunkResult]
    ) -> list[ConversionResult]:
        by_index = {chunk.index: chunk for chunk in job.chunks}
        futures = []
        for result in results:
            if (
                result.success
                and result.sparse_pages
                and result.container_kind is ContainerKind.PDF
            ):
                descriptor = by_index[result.chunk_index]
                logger.info(
                    f"Chunk {descriptor.index}: OCR for sparse pages {result.sparse_pages}"
                )
                futures.append((pool.submit_conversion(descriptor, result.sparse_pages), descriptor))

        return [pool.collect_conversion(future, descriptor) for future, descriptor in futures]


def analyze_file(
    file_path: str,
    chunk_count: int = 4,
    options: Optional[AnalysisOptions] = None,
) -> AggregateReport:
    """Plan and analyze a file with the given (or default) options."""
    return DocumentAnalyzer(options).analyze_path(file_path, chunk_count)
