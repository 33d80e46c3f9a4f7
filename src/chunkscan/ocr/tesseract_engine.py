"""Tesseract-backed OCR engine."""

import io
import logging

import numpy as np
import pytesseract
from PIL import Image

from chunkscan.protocols import RecognizedText

logger = logging.getLogger(__name__)


class TesseractEngine:
    """OCR engine driving the tesseract binary through pytesseract.

    Words whose confidence falls below ``min_confidence`` are dropped; the
    page confidence is the mean confidence of the words that remain.
    """

    def __init__(self, languages: str = "kor+eng", min_confidence: float = 0.3):
        """Initialize the engine.

        Args:
            languages: Tesseract language spec, languages joined with "+"
            min_confidence: Word confidence floor, 0..1
        """
        self.languages = languages
        self.min_confidence = min_confidence

    def recognize(self, image_bytes: bytes) -> RecognizedText:
        """Recognize text in an encoded image.

        Args:
            image_bytes: PNG/JPEG/... encoded page image

        Returns:
            RecognizedText with the kept words space-joined per line and a
            0..1 mean confidence (0.0 when nothing was kept)
        """
        with Image.open(io.BytesIO(image_bytes)) as image:
            data = pytesseract.image_to_data(
                image,
                lang=self.languages,
                output_type=pytesseract.Output.DICT,
            )

        lines: dict[tuple, list[str]] = {}
        confidences: list[float] = []
        for i, word in enumerate(data.get("text", [])):
            word = (word or "").strip()
            conf = float(data["conf"][i])
            # tesseract reports -1 for non-word boxes
            if not word or conf < 0:
                continue
            conf /= 100.0
            if conf < self.min_confidence:
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(word)
            confidences.append(conf)

        text = "\n".join(" ".join(words) for words in lines.values())
        confidence = float(np.mean(confidences)) if confidences else 0.0
        logger.debug(f"OCR kept {len(confidences)} words, confidence {confidence:.2f}")
        return RecognizedText(text=text, confidence=confidence)
