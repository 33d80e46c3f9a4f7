import pytest

from chunkscan.errors import ParseError
from chunkscan.extraction import ContainerAnalyzer
from chunkscan.models import AnalysisOptions, ContainerKind, OcrOptions
from chunkscan.protocols import ContainerParser, ParsedContainer, ParsedSheet


class FakeParser:
    """ContainerParser double serving fixed rows."""

    kind = ContainerKind.ZIP_PACKAGE

    def __init__(self, sheets, unit="sheet"):
        self.sheets = sheets
        self.unit = unit
        self.closed = False

    def parse(self, buffer):
        def close():
            self.closed = True

        return ParsedContainer(
            kind=self.kind,
            sheets=[ParsedSheet(name, rows) for name, rows in self.sheets],
            unit=self.unit,
            on_close=close,
        )


def _broken_rows():
    yield ["ok", "row"]
    raise KeyError("xl/worksheets/sheet2.xml")


def test_fake_parser_satisfies_protocol():
    assert isinstance(FakeParser([]), ContainerParser)


def test_counts_rows_columns_and_cells():
    parser = FakeParser([("Sheet1", [["a", "b", None], ["c", None, None], [None, None, None]])])
    analyzer = ContainerAnalyzer(parsers={ContainerKind.ZIP_PACKAGE: parser})

    analysis = analyzer.analyze(ContainerKind.ZIP_PACKAGE, b"PK\x03\x04")

    detail = analysis.structure.sheet_details[0]
    assert (detail.rows, detail.columns, detail.cells) == (3, 2, 3)
    assert analysis.structure.total_rows == 3
    assert analysis.content == "[Sheet: Sheet1]\na | b\nc"
    assert parser.closed


def test_sample_rows_limits_content_not_counts():
    rows = [[f"r{i}", i] for i in range(20)]
    parser = FakeParser([("Big", rows)])
    analyzer = ContainerAnalyzer(parsers={ContainerKind.ZIP_PACKAGE: parser}, sample_rows=3)

    analysis = analyzer.analyze(ContainerKind.ZIP_PACKAGE, b"")

    assert analysis.structure.total_rows == 20
    assert analysis.content.splitlines() == ["[Sheet: Big]", "r0 | 0", "r1 | 1", "r2 | 2"]


def test_iteration_error_becomes_parse_error():
    parser = FakeParser([("Broken", _broken_rows())])
    analyzer = ContainerAnalyzer(parsers={ContainerKind.ZIP_PACKAGE: parser})

    with pytest.raises(ParseError):
        analyzer.analyze(ContainerKind.ZIP_PACKAGE, b"")
    assert parser.closed


def test_missing_parser_is_parse_error():
    analyzer = ContainerAnalyzer(parsers={})
    with pytest.raises(ParseError):
        analyzer.analyze(ContainerKind.PDF, b"%PDF-")


def test_xlsx_workbook(xlsx_bytes):
    analysis = ContainerAnalyzer().analyze(ContainerKind.ZIP_PACKAGE, xlsx_bytes)

    structure = analysis.structure
    assert structure.sheets == 2
    assert [d.name for d in structure.sheet_details] == ["Data", "Notes"]
    assert structure.total_rows == 7
    assert structure.total_cells == 13
    assert structure.sheet_details[0].columns == 2
    assert "[Sheet: Data]\nname | qty\nitem0 | 0" in analysis.content
    assert "[Sheet: Notes]\nhello" in analysis.content


def test_truncated_xlsx_is_parse_error(xlsx_bytes):
    with pytest.raises(ParseError):
        ContainerAnalyzer().analyze(ContainerKind.ZIP_PACKAGE, xlsx_bytes[: len(xlsx_bytes) // 2])


def test_garbage_compound_binary_is_parse_error():
    buffer = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 100
    with pytest.raises(ParseError):
        ContainerAnalyzer().analyze(ContainerKind.COMPOUND_BINARY, buffer)


def test_pdf_pages_and_sparse_pages(pdf_bytes):
    analysis = ContainerAnalyzer().analyze(ContainerKind.PDF, pdf_bytes)

    assert analysis.unit == "page"
    assert analysis.structure.sheets == 2
    assert analysis.structure.sheet_details[0].rows >= 1
    assert analysis.structure.sheet_details[1].rows == 0
    assert analysis.content.startswith("[Page: 1]\n")
    assert "northern region" in analysis.content
    assert analysis.sparse_pages == [2]
    assert analysis.char_count >= 50


def test_max_pages_stops_analysis(pdf_bytes):
    analyzer = ContainerAnalyzer(max_pages=1)
    analysis = analyzer.analyze(ContainerKind.PDF, pdf_bytes)
    assert analysis.structure.sheets == 1
    assert analysis.sparse_pages == []


def test_from_options_uses_trigger_chars():
    options = AnalysisOptions(sample_rows=2, max_pages=5, ocr=OcrOptions(trigger_chars=7))
    analyzer = ContainerAnalyzer.from_options(options, parsers={})
    assert (analyzer.sample_rows, analyzer.max_pages, analyzer.sparse_page_chars) == (2, 5, 7)


class RaisingParser:
    kind = ContainerKind.ZIP_PACKAGE

    def parse(self, buffer):
        raise ValueError("delegate rejected")


def test_parser_exception_becomes_parse_error():
    analyzer = ContainerAnalyzer(parsers={ContainerKind.ZIP_PACKAGE: RaisingParser()})

    with pytest.raises(ParseError) as excinfo:
        analyzer.analyze(ContainerKind.ZIP_PACKAGE, b"PK\x03\x04")
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_parser_metadata_is_kept():
    parser = FakeParser([("Sheet1", [["a"]])])
    original_parse = parser.parse

    def parse(buffer):
        parsed = original_parse(buffer)
        parsed.metadata = {"title": "Budget"}
        return parsed

    parser.parse = parse
    analyzer = ContainerAnalyzer(parsers={ContainerKind.ZIP_PACKAGE: parser})

    analysis = analyzer.analyze(ContainerKind.ZIP_PACKAGE, b"")

    assert analysis.metadata == {"title": "Budget"}


def test_xlsx_metadata(xlsx_bytes):
    analysis = ContainerAnalyzer().analyze(ContainerKind.ZIP_PACKAGE, xlsx_bytes)
    assert analysis.metadata["title"] == "Inventory"
