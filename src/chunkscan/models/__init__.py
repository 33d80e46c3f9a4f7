"""Data models for chunkscan."""

from chunkscan.errors import ErrorKind
from chunkscan.models.analysis import (
    AggregateReport,
    ChunkDescriptor,
    ChunkResult,
    ContainerKind,
    ConversionResult,
    JobState,
    MemoryUsage,
    OcrPage,
    QualityAssessment,
    QualityKind,
    QualityTier,
    SheetInfo,
    StructureStats,
)
from chunkscan.models.job import DocumentJob
from chunkscan.models.options import (
    AnalysisOptions,
    ErrorPolicy,
    ImageOptions,
    OcrOptions,
    OcrThresholds,
    QualityThresholds,
    TextThresholds,
)

__all__ = [
    "AggregateReport",
    "AnalysisOptions",
    "ChunkDescriptor",
    "ChunkResult",
    "ContainerKind",
    "ConversionResult",
    "DocumentJob",
    "ErrorKind",
    "ErrorPolicy",
    "ImageOptions",
    "JobState",
    "MemoryUsage",
    "OcrOptions",
    "OcrPage",
    "OcrThresholds",
    "QualityAssessment",
    "QualityKind",
    "QualityThresholds",
    "QualityTier",
    "SheetInfo",
    "StructureStats",
    "TextThresholds",
]
