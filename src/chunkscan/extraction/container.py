"""Structural analysis of complete containers."""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from chunkscan.errors import ParseError
from chunkscan.models import AnalysisOptions, ContainerKind, SheetInfo, StructureStats
from chunkscan.protocols import ContainerParser, ParsedContainer, ParsedSheet

logger = logging.getLogger(__name__)


@dataclass
class ContainerAnalysis:
    structure: StructureStats
    content: str
    char_count: int = 0
    unit: str = "sheet"
    sparse_pages: list[int] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)


class ContainerAnalyzer:
    """Delegate a container buffer to a parser and collect statistics.

    Rows are streamed; only the first ``sample_rows`` rows of each sheet
    are kept, formatted as pipe-delimited text.
    """

    def __init__(
        self,
        parsers: Optional[Mapping[ContainerKind, ContainerParser]] = None,
        sample_rows: int = 10,
        max_pages: int = 10000,
        sparse_page_chars: int = 50,
    ):
        if parsers is None:
            from chunkscan.parsers import default_parsers

            parsers = default_parsers()
        self._parsers = dict(parsers)
        self.sample_rows = sample_rows
        self.max_pages = max_pages
        self.sparse_page_chars = sparse_page_chars

    @classmethod
    def from_options(
        cls,
        options: AnalysisOptions,
        parsers: Optional[Mapping[ContainerKind, ContainerParser]] = None,
    ) -> "ContainerAnalyzer":
        return cls(
            parsers=parsers,
            sample_rows=options.sample_rows,
            max_pages=options.max_pages,
            sparse_page_chars=options.ocr.trigger_chars,
        )

    def analyze(self, kind: ContainerKind, buffer: bytes) -> ContainerAnalysis:
        """Parse a complete container and summarize it.

        Raises:
            ParseError: if no parser handles the kind, the parser rejects the
                buffer, or reading its content fails part-way
        """
        parser = self._parsers.get(kind)
        if parser is None:
            raise ParseError(f"No parser registered for {kind.value}")

        try:
            parsed = parser.parse(buffer)
        except ParseError:
            raise
        except Exception as e:
            raise ParseError(f"{kind.value} parser rejected the buffer: {e}") from e

        with parsed:
            try:
                return self._summarize(parsed)
            except ParseError:
                raise
            except Exception as e:
                raise ParseError(f"Failed reading {kind.value} content: {e}") from e

    def _summarize(self, parsed: ParsedContainer) -> ContainerAnalysis:
        details: list[SheetInfo] = []
        sections: list[str] = []
        sparse_pages: list[int] = []
        char_count = 0
        is_paged = parsed.unit == "page"

        for number, sheet in enumerate(parsed.sheets, start=1):
            if is_paged and number > self.max_pages:
                logger.info(f"Page ceiling reached, skipping pages after {self.max_pages}")
                break

            info, sample, sheet_chars = self._scan(sheet)
            details.append(info)
            char_count += sheet_chars

            if sample:
                header = f"[Page: {number}]" if is_paged else f"[Sheet: {sheet.name}]"
                sections.append("\n".join([header, *sample]))
            if is_paged and sheet_chars < self.sparse_page_chars:
                sparse_pages.append(number)

        return ContainerAnalysis(
            structure=StructureStats.from_sheets(details),
            content="\n\n".join(sections),
            char_count=char_count,
            unit=parsed.unit,
            sparse_pages=sparse_pages,
            metadata=dict(parsed.metadata),
        )

    def _scan(self, sheet: ParsedSheet) -> tuple[SheetInfo, list[str], int]:
        rows = columns = cells = chars = 0
        sample: list[str] = []

        for row in sheet.rows:
            values = ["" if v is None else str(v).strip() for v in row]
            while values and not values[-1]:
                values.pop()

            filled = [v for v in values if v]
            rows += 1
            columns = max(columns, len(values))
            cells += len(filled)
            chars += sum(len(v) for v in filled)

            if filled and len(sample) < self.sample_rows:
                sample.append(" | ".join(values))

        info = SheetInfo(name=sheet.name, rows=rows, columns=columns, cells=cells)
        return info, sample, chars
