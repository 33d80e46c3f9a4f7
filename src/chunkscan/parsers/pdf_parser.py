"""Parser for PDF documents."""

import logging
from typing import Iterator

import fitz  # PyMuPDF

from chunkscan.errors import ParseError
from chunkscan.models import ContainerKind
from chunkscan.protocols import ParsedContainer, ParsedSheet

logger = logging.getLogger(__name__)


class PdfParser:
    """Expose PDF pages as sheets: each text line is a row, each span a cell."""

    kind = ContainerKind.PDF

    def parse(self, buffer: bytes) -> ParsedContainer:
        try:
            doc = fitz.open(stream=buffer, filetype="pdf")
        except Exception as e:  # FileDataError and friends
            raise ParseError(f"PDF rejected: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise ParseError("PDF is encrypted")

        sheets = [
            ParsedSheet(name=f"Page {i + 1}", rows=self._lines(doc, i))
            for i in range(doc.page_count)
        ]
        metadata = {k: v for k, v in (doc.metadata or {}).items() if v}
        logger.debug(f"Opened PDF with {doc.page_count} pages")

        return ParsedContainer(
            kind=self.kind,
            sheets=sheets,
            unit="page",
            metadata=metadata,
            on_close=doc.close,
        )

    @staticmethod
    def _lines(doc: "fitz.Document", page_index: int) -> Iterator[list[str]]:
        page = doc.load_page(page_index)
        layout = page.get_text("dict")
        for block in layout.get("blocks", []):
            # type 1 blocks are images
            if block.get("type") != 0:
                continue
            for line in block.get("lines", []):
                cells = [
                    span["text"].strip()
                    for span in line.get("spans", [])
                    if span.get("text", "").strip()
                ]
                if cells:
                    yield cells
