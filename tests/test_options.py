import dataclasses

import pytest

from chunkscan.errors import ConfigError
from chunkscan.models import AnalysisOptions, ChunkDescriptor, DocumentJob

CUSTOM = {
    "supportedExtensions": [".xlsx", ".pdf"],
    "maxFileSize": 1048576,
    "maxPages": 50,
    "sampleRows": 3,
    "maxConcurrentAnalysis": 6,
    "maxConcurrentConversions": 1,
    "workerMode": "thread",
    "ocr": {"enabled": False, "languages": ["eng"], "minConfidence": 0.45, "triggerChars": 20},
    "image": {"dpi": 150, "maxWidth": 640, "maxHeight": 480, "format": "jpeg", "maxPages": 1},
    "quality": {
        "text": {"excellent": 500, "good": 50, "poor": 5},
        "ocr": {"good": 0.7, "poor": 0.2},
    },
    "errorHandling": {"continueOnError": False, "logWarnings": False, "maxRetries": 0},
}


def test_defaults():
    options = AnalysisOptions()
    assert options.max_concurrent_analysis == 4
    assert options.max_concurrent_conversions == 2
    assert options.max_file_size == 2 * 1024 * 1024 * 1024
    assert options.max_pages == 10000
    assert options.ocr.languages == ("kor", "eng")
    assert options.ocr.language_spec == "kor+eng"
    assert options.ocr.min_confidence == 0.3
    assert options.image.dpi == 300
    assert (options.image.max_width, options.image.max_height) == (800, 1000)
    assert options.errors.max_retries == 2


def test_mapping_round_trip_is_exact():
    options = AnalysisOptions.from_mapping(CUSTOM)

    assert options.to_mapping() == CUSTOM
    assert options.sample_rows == 3
    assert options.ocr.min_confidence == 0.45
    assert options.quality.text.good == 50
    assert options.errors.continue_on_error is False


def test_default_round_trip():
    assert AnalysisOptions.from_mapping(AnalysisOptions().to_mapping()) == AnalysisOptions()


def test_partial_mapping_keeps_defaults():
    options = AnalysisOptions.from_mapping({"ocr": {"enabled": False}})
    assert options.ocr.enabled is False
    assert options.ocr.languages == ("kor", "eng")
    assert options.sample_rows == 10


@pytest.mark.parametrize(
    "mapping",
    [
        {"maxRetries": 2},
        {"sampleRows": True},
        {"sampleRows": "10"},
        {"maxConcurrentAnalysis": 0},
        {"maxFileSize": -1},
        {"workerMode": "fibers"},
        {"supportedExtensions": "xlsx"},
        {"supportedExtensions": ["xlsx"]},
        {"ocr": {"minConfidence": 1.5}},
        {"ocr": {"enabled": 1}},
        {"image": {"format": "bmp"}},
        {"image": {"dpi": 0}},
        {"quality": {"text": {"excellent": 10, "good": 100}}},
        {"quality": {"ocr": {"good": 0.1, "poor": 0.5}}},
        {"errorHandling": {"maxRetries": -1}},
        {"errorHandling": "strict"},
    ],
)
def test_invalid_values_raise_config_error(mapping):
    with pytest.raises(ConfigError):
        AnalysisOptions.from_mapping(mapping)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        AnalysisOptions(worker_mode="gpu")


def test_options_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        AnalysisOptions().sample_rows = 5


def test_supports_extension():
    options = AnalysisOptions()
    assert options.supports(".XLSX")
    assert options.supports("pdf")
    assert not options.supports(".docx")
    assert not options.supports(".xlsb")
    assert not options.supports("")


def test_chunk_descriptor_rejects_negative_fields():
    with pytest.raises(ValueError):
        ChunkDescriptor(0, "a.xlsx", -1, 10)


def test_document_job_extension_and_ownership():
    chunk = ChunkDescriptor(0, "a.XLSX", 0, 10)
    job = DocumentJob("a.XLSX", [chunk])
    assert job.extension == ".xlsx"
    assert job.chunks == (chunk,)

    with pytest.raises(ValueError):
        DocumentJob("b.xlsx", [chunk])
