"""OCR capability: page rasterization and text recognition."""

from chunkscan.ocr.rasterizer import FitzRasterizer
from chunkscan.ocr.tesseract_engine import TesseractEngine

__all__ = ["FitzRasterizer", "TesseractEngine"]
