"""Chunk jobs: the unit of work the worker pool runs.

Both entry points are plain module-level functions so a process pool can
pickle them. They read only their own byte range and report every failure
inside the returned result.
"""

import logging
import threading
from typing import Any, Optional

from chunkscan.errors import ChunkIOError, ChunkScanError, JobCancelled
from chunkscan.extraction import ContainerAnalyzer, FallbackTextExtractor
from chunkscan.models import (
    AnalysisOptions,
    ChunkDescriptor,
    ChunkResult,
    ContainerKind,
    ConversionResult,
    JobState,
    OcrPage,
)
from chunkscan.protocols import OcrEngine, PageRasterizer
from chunkscan.utils import classify, sample_memory

logger = logging.getLogger(__name__)

# Legal moves of the chunk job state machine
_TRANSITIONS: dict[JobState, set[JobState]] = {
    JobState.PENDING: {JobState.READING},
    JobState.READING: {JobState.CLASSIFYING},
    JobState.CLASSIFYING: {JobState.CONTAINER_PARSING, JobState.FALLBACK_EXTRACTING},
    JobState.CONTAINER_PARSING: {JobState.COMPLETED},
    JobState.FALLBACK_EXTRACTING: {JobState.COMPLETED},
}


class CancellationToken:
    """Cooperative cancellation flag shared between a pool and its jobs.

    Wraps any object with ``set()``/``is_set()``. Thread pools use a
    ``threading.Event``; process pools need a ``multiprocessing.Manager``
    event so the flag survives pickling.
    """

    def __init__(self, event: Any = None):
        self._event = event if event is not None else threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def read_chunk(descriptor: ChunkDescriptor) -> bytes:
    """Read exactly the descriptor's byte range.

    Raises:
        ChunkIOError: if the file cannot be read or holds fewer bytes
    """
    try:
        with open(descriptor.file_path, "rb") as f:
            f.seek(descriptor.offset)
            buffer = f.read(descriptor.size)
    except OSError as e:
        raise ChunkIOError(f"Cannot read chunk {descriptor.index}: {e}") from e

    if len(buffer) != descriptor.size:
        raise ChunkIOError(
            f"Short read for chunk {descriptor.index}: "
            f"expected {descriptor.size} bytes at offset {descriptor.offset}, got {len(buffer)}"
        )
    return buffer


class ChunkJob:
    """Analyze one chunk, moving through an explicit state machine.

    Pending -> Reading -> Classifying -> ContainerParsing | FallbackExtracting
    -> Completed, or Failed from any non-terminal state.
    """

    def __init__(
        self,
        descriptor: ChunkDescriptor,
        options: AnalysisOptions,
        analyzer: Optional[ContainerAnalyzer] = None,
        extractor: Optional[FallbackTextExtractor] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.descriptor = descriptor
        self.options = options
        self.analyzer = analyzer or ContainerAnalyzer.from_options(options)
        self.extractor = extractor or FallbackTextExtractor()
        self.cancel_token = cancel_token
        self.state = JobState.PENDING
        self.history: list[JobState] = [JobState.PENDING]

    def _transition(self, new_state: JobState) -> None:
        if self.cancel_token is not None and self.cancel_token.cancelled:
            raise JobCancelled(
                f"Chunk {self.descriptor.index} cancelled in state {self.state.value}"
            )
        if new_state not in _TRANSITIONS.get(self.state, set()):
            raise RuntimeError(f"Illegal transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def run(self) -> ChunkResult:
        """Run the job to a terminal state. Never raises ChunkScanError."""
        index = self.descriptor.index
        buffer = b""
        kind: Optional[ContainerKind] = None

        try:
            self._transition(JobState.READING)
            buffer = read_chunk(self.descriptor)

            self._transition(JobState.CLASSIFYING)
            kind = classify(buffer)
            logger.debug(f"Chunk {index}: {len(buffer)} bytes classified as {kind.value}")

            if kind.is_container:
                self._transition(JobState.CONTAINER_PARSING)
                result = self._parse_container(kind, buffer)
            else:
                self._transition(JobState.FALLBACK_EXTRACTING)
                result = self._extract_fallback(buffer)

            self._transition(JobState.COMPLETED)
        except ChunkScanError as e:
            self.state = JobState.FAILED
            self.history.append(JobState.FAILED)
            logger.warning(f"Chunk {index} failed ({e.kind.value}): {e.message}")
            return ChunkResult.failed(
                index,
                e.message,
                e.kind,
                container_kind=kind,
                memory_usage=sample_memory(len(buffer)),
            )

        result.container_kind = kind
        result.state = JobState.COMPLETED
        result.memory_usage = sample_memory(len(buffer))
        return result

    def _parse_container(self, kind: ContainerKind, buffer: bytes) -> ChunkResult:
        # ParseError propagates: a corrupt container is a failure, not a fragment
        analysis = self.analyzer.analyze(kind, buffer)
        return ChunkResult(
            chunk_index=self.descriptor.index,
            success=True,
            structure=analysis.structure,
            content=analysis.content,
            extraction_strategy="container",
            sparse_pages=list(analysis.sparse_pages),
            char_count=analysis.char_count,
            metadata=dict(analysis.metadata),
        )

    def _extract_fallback(self, buffer: bytes) -> ChunkResult:
        outcome = self.extractor.extract_detailed(buffer)
        warnings = []
        if self.options.errors.log_warnings:
            message = f"Chunk {self.descriptor.index}: {outcome.describe()}"
            logger.warning(message)
            warnings.append(message)

        return ChunkResult(
            chunk_index=self.descriptor.index,
            success=True,
            content=outcome.text,
            extraction_strategy=outcome.strategy,
            warnings=warnings,
            char_count=len(outcome.text),
        )


def run_chunk_job(
    descriptor: ChunkDescriptor,
    options: AnalysisOptions,
    analyzer: Optional[ContainerAnalyzer] = None,
    extractor: Optional[FallbackTextExtractor] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ChunkResult:
    """Pool entry point: build a ChunkJob and run it."""
    return ChunkJob(descriptor, options, analyzer, extractor, cancel_token).run()


def run_conversion_job(
    descriptor: ChunkDescriptor,
    pages: list[int],
    options: AnalysisOptions,
    engine: Optional[OcrEngine] = None,
    rasterizer: Optional[PageRasterizer] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ConversionResult:
    """Rasterize the given pages of a chunk and OCR them.

    Args:
        descriptor: Chunk whose byte range holds a complete PDF
        pages: 1-based page numbers to convert
        options: Analysis options (image limits, OCR languages, confidence floor)
        engine: OCR engine, defaults to TesseractEngine
        rasterizer: Page rasterizer, defaults to FitzRasterizer
        cancel_token: Checked before each page

    Returns:
        ConversionResult; failures are reported in it, never raised
    """
    if engine is None or rasterizer is None:
        from chunkscan.ocr import FitzRasterizer, TesseractEngine

        engine = engine or TesseractEngine(
            options.ocr.language_spec, options.ocr.min_confidence
        )
        rasterizer = rasterizer or FitzRasterizer(options.image)

    result = ConversionResult(chunk_index=descriptor.index, success=True)
    try:
        buffer = read_chunk(descriptor)
        for number, image in rasterizer.rasterize(buffer, pages):
            if cancel_token is not None and cancel_token.cancelled:
                raise JobCancelled(f"Conversion of chunk {descriptor.index} cancelled")
            recognized = engine.recognize(image)
            result.pages.append(
                OcrPage(page=number, text=recognized.text, confidence=recognized.confidence)
            )
            logger.debug(
                f"Chunk {descriptor.index} page {number}: "
                f"{len(recognized.text)} chars, confidence {recognized.confidence:.2f}"
            )
    except Exception as e:
        logger.warning(f"Conversion of chunk {descriptor.index} failed: {e}")
        result.success = False
        result.error = str(e)
    return result
