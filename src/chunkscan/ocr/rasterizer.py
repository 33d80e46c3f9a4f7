"""Page rasterization for the conversion path."""

import io
import logging
from typing import Iterator

import fitz  # PyMuPDF
from PIL import Image

from chunkscan.errors import ParseError
from chunkscan.models import ImageOptions

logger = logging.getLogger(__name__)

# Pillow format names for ImageOptions.format
_PIL_FORMATS = {"png": "PNG", "jpeg": "JPEG", "ppm": "PPM", "tiff": "TIFF"}


class FitzRasterizer:
    """Render PDF pages with PyMuPDF and fit them into the image limits."""

    def __init__(self, image_options: ImageOptions | None = None):
        self.options = image_options or ImageOptions()

    def rasterize(self, buffer: bytes, pages: list[int]) -> Iterator[tuple[int, bytes]]:
        """Yield (page_number, image_bytes) for up to ``max_pages`` pages.

        Page numbers are 1-based. Numbers outside the document are skipped.

        Raises:
            ParseError: if the buffer is not a readable PDF
        """
        try:
            doc = fitz.open(stream=bytes(buffer), filetype="pdf")
        except Exception as e:
            raise ParseError(f"Cannot open PDF for rasterization: {e}") from e

        with doc:
            wanted = [p for p in pages if 1 <= p <= doc.page_count]
            if len(wanted) > self.options.max_pages:
                logger.info(
                    f"Rasterizing {self.options.max_pages} of {len(wanted)} requested pages"
                )
            for number in wanted[: self.options.max_pages]:
                pix = doc.load_page(number - 1).get_pixmap(dpi=self.options.dpi)
                yield number, self._encode(pix)

    def _encode(self, pix: "fitz.Pixmap") -> bytes:
        mode = "RGBA" if pix.alpha else "RGB"
        image = Image.frombytes(mode, (pix.width, pix.height), pix.samples)
        if mode == "RGBA":
            image = image.convert("RGB")
        # thumbnail keeps the aspect ratio and never upscales
        image.thumbnail((self.options.max_width, self.options.max_height))

        out = io.BytesIO()
        image.save(out, format=_PIL_FORMATS[self.options.format])
        return out.getvalue()
