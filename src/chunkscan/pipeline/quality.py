"""Coarse quality tiers for extracted content."""

from typing import Sequence

import numpy as np

from chunkscan.models import QualityAssessment, QualityKind, QualityThresholds, QualityTier


class QualityScorer:
    """Classify extraction output as excellent, good or poor."""

    def __init__(self, thresholds: QualityThresholds | None = None):
        self.thresholds = thresholds or QualityThresholds()

    def score_text(self, text_chars: int) -> QualityAssessment:
        t = self.thresholds.text
        if text_chars >= t.excellent:
            tier = QualityTier.EXCELLENT
        elif text_chars >= t.good:
            tier = QualityTier.GOOD
        else:
            tier = QualityTier.POOR
        return QualityAssessment(
            tier=tier,
            kind=QualityKind.TEXT,
            score=float(text_chars),
            below_floor=text_chars < t.poor,
        )

    def score_ocr(self, confidences: Sequence[float]) -> QualityAssessment:
        t = self.thresholds.ocr
        mean = float(np.mean(confidences)) if len(confidences) else 0.0
        tier = QualityTier.GOOD if mean >= t.good else QualityTier.POOR
        return QualityAssessment(
            tier=tier,
            kind=QualityKind.OCR,
            score=mean,
            below_floor=mean < t.poor,
        )

    def score(
        self, text_chars: int, ocr_confidences: Sequence[float] = ()
    ) -> QualityAssessment:
        """Score a document.

        Args:
            text_chars: Characters recovered by text extraction
            ocr_confidences: Per-page OCR confidences, empty when OCR did not run

        Returns:
            The text assessment, or the OCR one when OCR ran and ranked higher
        """
        text = self.score_text(text_chars)
        if not len(ocr_confidences):
            return text
        ocr = self.score_ocr(ocr_confidences)
        return ocr if ocr.tier.rank > text.tier.rank else text
