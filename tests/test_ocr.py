import io

from PIL import Image

from chunkscan.models import ImageOptions
from chunkscan.ocr import FitzRasterizer, TesseractEngine
from chunkscan.protocols import OcrEngine, PageRasterizer
from chunkscan.utils import sample_memory


def test_rasterizer_fits_images_into_limits(pdf_bytes):
    rasterizer = FitzRasterizer(ImageOptions(dpi=72, max_width=200, max_height=150, format="png"))

    pages = list(rasterizer.rasterize(pdf_bytes, [1, 2]))

    assert [number for number, _ in pages] == [1, 2]
    for _, data in pages:
        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "PNG"
            assert image.width <= 200 and image.height <= 150


def test_rasterizer_caps_page_count_and_skips_unknown_pages(pdf_bytes):
    rasterizer = FitzRasterizer(ImageOptions(dpi=50, max_pages=1, format="jpeg"))

    pages = list(rasterizer.rasterize(pdf_bytes, [9, 2, 1]))

    assert [number for number, _ in pages] == [2]


def test_tesseract_engine_filters_low_confidence_words(monkeypatch):
    data = {
        "text": ["", "Invoice", "total", "~~", "42"],
        "conf": ["-1", "96", "88", "12", "90.5"],
        "block_num": [0, 1, 1, 1, 1],
        "par_num": [0, 1, 1, 1, 1],
        "line_num": [0, 1, 1, 1, 2],
    }
    captured = {}

    def fake_image_to_data(image, lang=None, output_type=None):
        captured["lang"] = lang
        return data

    monkeypatch.setattr("chunkscan.ocr.tesseract_engine.pytesseract.image_to_data", fake_image_to_data)

    buf = io.BytesIO()
    Image.new("RGB", (10, 10), "white").save(buf, format="PNG")
    result = TesseractEngine("kor+eng", min_confidence=0.3).recognize(buf.getvalue())

    assert captured["lang"] == "kor+eng"
    assert result.text == "Invoice total\n42"
    assert abs(result.confidence - (0.96 + 0.88 + 0.905) / 3) < 1e-9


def test_capabilities_satisfy_protocols():
    assert isinstance(TesseractEngine(), OcrEngine)
    assert isinstance(FitzRasterizer(), PageRasterizer)


def test_sample_memory_reports_buffer_and_rss():
    usage = sample_memory(1234)
    assert usage.buffer_bytes == 1234
    assert usage.rss_bytes > 0
