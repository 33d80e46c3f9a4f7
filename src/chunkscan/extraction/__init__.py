"""Text and structure extraction from chunk buffers."""

from chunkscan.extraction.container import ContainerAnalysis, ContainerAnalyzer
from chunkscan.extraction.fallback import ExtractionOutcome, FallbackTextExtractor

__all__ = [
    "ContainerAnalysis",
    "ContainerAnalyzer",
    "ExtractionOutcome",
    "FallbackTextExtractor",
]
