"""Protocols for the rasterize-then-OCR conversion path."""

from dataclasses import dataclass
from typing import Iterator, Protocol, runtime_checkable


@dataclass(frozen=True)
class RecognizedText:
    """Text and mean confidence (0..1) for one image."""

    text: str
    confidence: float


@runtime_checkable
class OcrEngine(Protocol):
    """Protocol for OCR backends.

    OCR is an external capability; the pipeline only drives it.
    """

    def recognize(self, image_bytes: bytes) -> RecognizedText:
        """Recognize text in an encoded image."""
        ...


@runtime_checkable
class PageRasterizer(Protocol):
    """Protocol for turning document pages into encoded images."""

    def rasterize(self, buffer: bytes, pages: list[int]) -> Iterator[tuple[int, bytes]]:
        """Yield (page_number, image_bytes) for the requested pages."""
        ...
