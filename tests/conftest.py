import io

import fitz
import openpyxl
import pytest

from chunkscan.models import AnalysisOptions, OcrOptions

REPORT_LINE = "Quarterly revenue report for the northern region, fiscal year 2024"


@pytest.fixture
def xlsx_bytes():
    """Workbook titled Inventory.

    Two sheets: Data (6 rows, 2 columns, 12 cells) and Notes (1 row, 1 cell).
    """
    wb = openpyxl.Workbook()
    wb.properties.title = "Inventory"
    ws = wb.active
    ws.title = "Data"
    ws.append(["name", "qty"])
    for i in range(5):
        ws.append([f"item{i}", i])
    notes = wb.create_sheet("Notes")
    notes.append(["hello"])

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def pdf_bytes():
    """Two pages: one line of text, then a blank page."""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), REPORT_LINE, fontsize=11)
    doc.new_page()
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def thread_options():
    return AnalysisOptions(worker_mode="thread", ocr=OcrOptions(enabled=False))
