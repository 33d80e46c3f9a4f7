from chunkscan.extraction import FallbackTextExtractor
from chunkscan.extraction.fallback import BYTE_ENCODING, WIDE_ENCODING


def test_wide_decoding_wins_when_it_has_more_script_matches():
    wide_words = ["가나"] * 50
    wide_part = " ".join(wide_words).encode("utf-16-le")
    # " 한" is 20 ED 95 9C in UTF-8; read as UTF-16LE it holds no Hangul
    narrow_part = (" 한" * 10).encode("utf-8")

    outcome = FallbackTextExtractor().extract_detailed(wide_part + narrow_part)

    assert outcome.strategy == WIDE_ENCODING
    assert outcome.wide_script_matches == 50
    assert outcome.byte_script_matches == 10
    assert outcome.text == " ".join(wide_words)
    assert "한" not in outcome.text


def test_byte_decoding_keeps_script_runs_and_tokens():
    buffer = "보고서 report 2024 ab".encode("utf-8")

    outcome = FallbackTextExtractor().extract_detailed(buffer)

    assert outcome.strategy == BYTE_ENCODING
    assert outcome.wide_script_matches <= outcome.byte_script_matches
    assert outcome.text == "보고서 report 2024"


def test_short_tokens_are_dropped():
    extractor = FallbackTextExtractor()
    assert extractor.extract(b"ab cd ef") == ""
    assert extractor.extract(b"abc \x00\xff xyz9") == "abc xyz9"


def test_extraction_is_pure():
    buffer = "매출 합계 Total 12345".encode("utf-8") + b"\x00\x01\xfe"
    extractor = FallbackTextExtractor()
    assert extractor.extract_detailed(buffer) == extractor.extract_detailed(buffer)


def test_never_raises():
    outcome = FallbackTextExtractor().extract_detailed(None)
    assert outcome.text == ""
    assert outcome.strategy == "none"


def test_describe_names_both_encodings():
    outcome = FallbackTextExtractor().extract_detailed(b"hello world")
    message = outcome.describe()
    assert BYTE_ENCODING in message
    assert WIDE_ENCODING in message
