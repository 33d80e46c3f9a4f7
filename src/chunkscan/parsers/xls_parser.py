"""Parser for legacy compound-binary workbooks (.xls)."""

import logging
from typing import Any, Iterator

import xlrd

from chunkscan.errors import ParseError
from chunkscan.models import ContainerKind
from chunkscan.protocols import ParsedContainer, ParsedSheet

logger = logging.getLogger(__name__)


class XlsParser:
    """Parse a BIFF workbook with xlrd, loading one sheet at a time."""

    kind = ContainerKind.COMPOUND_BINARY

    def parse(self, buffer: bytes) -> ParsedContainer:
        try:
            book = xlrd.open_workbook(file_contents=buffer, on_demand=True)
        except Exception as e:  # XLRDError, CompDocError, struct errors
            raise ParseError(f"Legacy workbook rejected: {e}") from e

        names = book.sheet_names()
        sheets = [
            ParsedSheet(name=name, rows=self._rows(book, index))
            for index, name in enumerate(names)
        ]
        logger.debug(f"Opened legacy workbook with {len(sheets)} sheets")

        return ParsedContainer(
            kind=self.kind,
            sheets=sheets,
            unit="sheet",
            metadata={"biff_version": book.biff_version},
            on_close=book.release_resources,
        )

    @staticmethod
    def _rows(book: "xlrd.book.Book", index: int) -> Iterator[list[Any]]:
        sheet = book.sheet_by_index(index)
        for row_index in range(sheet.nrows):
            yield sheet.row_values(row_index)
        book.unload_sheet(index)
