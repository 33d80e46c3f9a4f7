"""Chunk dispatch, retries, aggregation and scoring."""

from chunkscan.pipeline.aggregate import ResultAggregator
from chunkscan.pipeline.analyzer import DocumentAnalyzer, analyze_file
from chunkscan.pipeline.job import (
    CancellationToken,
    ChunkJob,
    read_chunk,
    run_chunk_job,
    run_conversion_job,
)
from chunkscan.pipeline.planner import plan_chunks
from chunkscan.pipeline.pool import WorkerPool
from chunkscan.pipeline.quality import QualityScorer
from chunkscan.pipeline.retry import DispatchOutcome, RetryCoordinator, RetryEvent

__all__ = [
    "CancellationToken",
    "ChunkJob",
    "DispatchOutcome",
    "DocumentAnalyzer",
    "QualityScorer",
    "ResultAggregator",
    "RetryCoordinator",
    "RetryEvent",
    "WorkerPool",
    "analyze_file",
    "plan_chunks",
    "read_chunk",
    "run_chunk_job",
    "run_conversion_job",
]
