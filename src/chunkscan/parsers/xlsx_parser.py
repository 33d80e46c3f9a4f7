"""Parser for ZIP-packaged spreadsheets (.xlsx, .xlsm)."""

import io
import logging

import openpyxl

from chunkscan.errors import ParseError
from chunkscan.models import ContainerKind
from chunkscan.protocols import ParsedContainer, ParsedSheet

logger = logging.getLogger(__name__)


class XlsxParser:
    """Parse an Office Open XML workbook with openpyxl in read-only mode."""

    kind = ContainerKind.ZIP_PACKAGE

    def parse(self, buffer: bytes) -> ParsedContainer:
        """Open the workbook and expose each worksheet's rows lazily.

        Args:
            buffer: Complete ZIP container bytes

        Returns:
            ParsedContainer whose sheets stream cell values

        Raises:
            ParseError: if openpyxl cannot open the package
        """
        try:
            workbook = openpyxl.load_workbook(
                io.BytesIO(buffer),
                read_only=True,
                data_only=True,
            )
        except Exception as e:  # openpyxl surfaces zip, xml and key errors
            raise ParseError(f"Spreadsheet package rejected: {e}") from e

        sheets = [
            ParsedSheet(name=ws.title, rows=ws.iter_rows(values_only=True))
            for ws in workbook.worksheets
        ]
        props = workbook.properties
        metadata = {
            key: value
            for key, value in (
                ("title", props.title),
                ("creator", props.creator),
                ("last_modified_by", props.lastModifiedBy),
            )
            if value
        }
        logger.debug(f"Opened workbook with {len(sheets)} sheets")

        return ParsedContainer(
            kind=self.kind,
            sheets=sheets,
            unit="sheet",
            metadata=metadata,
            on_close=workbook.close,
        )
