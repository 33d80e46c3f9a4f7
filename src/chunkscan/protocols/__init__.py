"""Protocol definitions for extensible components."""

from chunkscan.protocols.ocr import OcrEngine, PageRasterizer, RecognizedText
from chunkscan.protocols.parser import ContainerParser, ParsedContainer, ParsedSheet

__all__ = [
    "ContainerParser",
    "OcrEngine",
    "PageRasterizer",
    "ParsedContainer",
    "ParsedSheet",
    "RecognizedText",
]
