"""chunkscan - chunked, concurrency-bounded spreadsheet and PDF analysis."""

__version__ = "0.1.0"

from chunkscan.config import load_options
from chunkscan.errors import ChunkScanError, ConfigError, ErrorKind, ParseError
from chunkscan.models import AggregateReport, AnalysisOptions, ChunkDescriptor, DocumentJob
from chunkscan.pipeline import DocumentAnalyzer, analyze_file, plan_chunks

__all__ = [
    "AggregateReport",
    "AnalysisOptions",
    "ChunkDescriptor",
    "ChunkScanError",
    "ConfigError",
    "DocumentAnalyzer",
    "DocumentJob",
    "ErrorKind",
    "ParseError",
    "__version__",
    "load_options",
    "analyze_file",
    "plan_chunks",
]
