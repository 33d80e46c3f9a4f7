"""Bounded worker pool for chunk and conversion jobs."""

import logging
import multiprocessing
from concurrent.futures import (
    CancelledError,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
)
from concurrent.futures.process import BrokenProcessPool
from typing import Callable

from chunkscan.errors import ErrorKind
from chunkscan.models import AnalysisOptions, ChunkDescriptor, ChunkResult, ConversionResult
from chunkscan.pipeline.job import CancellationToken, run_chunk_job, run_conversion_job

logger = logging.getLogger(__name__)

JobFn = Callable[..., ChunkResult]
ConversionFn = Callable[..., ConversionResult]


class WorkerPool:
    """Two bounded executors: one for analysis jobs, one for conversions.

    At most ``max_concurrent_analysis`` chunk jobs and
    ``max_concurrent_conversions`` conversion jobs run at once; further
    submissions queue inside the executors. Nothing a job does is raised
    past ``collect``.
    """

    def __init__(
        self,
        options: AnalysisOptions,
        job_fn: JobFn = run_chunk_job,
        conversion_fn: ConversionFn = run_conversion_job,
    ):
        self.options = options
        self._job_fn = job_fn
        self._conversion_fn = conversion_fn
        self._manager = None
        self._pending: set[Future] = set()

        if options.worker_mode == "process":
            self._manager = multiprocessing.Manager()
            self.cancel_token = CancellationToken(self._manager.Event())
        else:
            self.cancel_token = CancellationToken()

        self._analysis = self._make_executor(options.max_concurrent_analysis, "analysis")
        self._conversion = self._make_executor(options.max_concurrent_conversions, "conversion")
        logger.debug(
            f"Worker pool started ({options.worker_mode}): "
            f"{options.max_concurrent_analysis} analysis, "
            f"{options.max_concurrent_conversions} conversion workers"
        )

    def _make_executor(self, workers: int, name: str) -> Executor:
        if self.options.worker_mode == "process":
            return ProcessPoolExecutor(max_workers=workers)
        return ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"chunkscan-{name}")

    def _track(self, future: Future) -> Future:
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)
        return future

    def submit(self, descriptor: ChunkDescriptor) -> "Future[ChunkResult]":
        """Queue a chunk job on the analysis executor."""
        try:
            future = self._analysis.submit(
                self._job_fn, descriptor, self.options, cancel_token=self.cancel_token
            )
        except BrokenProcessPool:
            # A crashed worker poisons the whole executor; start a fresh one
            logger.warning("Analysis workers crashed, restarting the executor")
            self._analysis.shutdown(wait=False, cancel_futures=True)
            self._analysis = self._make_executor(self.options.max_concurrent_analysis, "analysis")
            future = self._analysis.submit(
                self._job_fn, descriptor, self.options, cancel_token=self.cancel_token
            )
        return self._track(future)

    def submit_conversion(
        self, descriptor: ChunkDescriptor, pages: list[int]
    ) -> "Future[ConversionResult]":
        """Queue a rasterize-and-OCR job on the conversion executor."""
        future = self._conversion.submit(
            self._conversion_fn,
            descriptor,
            list(pages),
            self.options,
            cancel_token=self.cancel_token,
        )
        return self._track(future)

    def collect(self, future: Future, descriptor: ChunkDescriptor) -> ChunkResult:
        """Resolve a chunk future into a ChunkResult, whatever happened to it."""
        try:
            return future.result()
        except CancelledError:
            return ChunkResult.failed(
                descriptor.index,
                f"Chunk {descriptor.index} was cancelled before it started",
                ErrorKind.CANCELLED,
            )
        except Exception as e:
            logger.warning(f"Worker for chunk {descriptor.index} crashed: {e!r}")
            return ChunkResult.failed(
                descriptor.index,
                f"Worker crashed: {e!r}",
                ErrorKind.WORKER_CRASHED,
            )

    def collect_conversion(self, future: Future, descriptor: ChunkDescriptor) -> ConversionResult:
        try:
            return future.result()
        except CancelledError:
            return ConversionResult(
                chunk_index=descriptor.index, success=False, error="Conversion cancelled"
            )
        except Exception as e:
            logger.warning(f"Conversion worker for chunk {descriptor.index} crashed: {e!r}")
            return ConversionResult(
                chunk_index=descriptor.index, success=False, error=f"Worker crashed: {e!r}"
            )

    def cancel_pending(self) -> list[Future]:
        """Cancel queued futures. Running jobs are left to finish.

        Returns:
            The futures that were actually cancelled
        """
        cancelled = [f for f in list(self._pending) if f.cancel()]
        if cancelled:
            logger.info(f"Cancelled {len(cancelled)} queued jobs")
        return cancelled

    def cancel(self) -> list[Future]:
        """Signal running jobs to stop and cancel queued ones."""
        self.cancel_token.cancel()
        return self.cancel_pending()

    def shutdown(self, wait: bool = True) -> None:
        self._analysis.shutdown(wait=wait)
        self._conversion.shutdown(wait=wait)
        if self._manager is not None:
            self._manager.shutdown()
            self._manager = None

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
