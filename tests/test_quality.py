from chunkscan.models import (
    OcrThresholds,
    QualityKind,
    QualityThresholds,
    QualityTier,
    TextThresholds,
)
from chunkscan.pipeline import QualityScorer


def test_text_tiers_at_default_cut_points():
    scorer = QualityScorer()
    assert scorer.score(1000).tier is QualityTier.EXCELLENT
    assert scorer.score(999).tier is QualityTier.GOOD
    assert scorer.score(100).tier is QualityTier.GOOD
    assert scorer.score(99).tier is QualityTier.POOR
    assert scorer.score(0).kind is QualityKind.TEXT


def test_below_floor_flag():
    scorer = QualityScorer()
    assert scorer.score(9).below_floor
    assert not scorer.score(10).below_floor


def test_custom_thresholds():
    scorer = QualityScorer(QualityThresholds(text=TextThresholds(excellent=50, good=20, poor=5)))
    assert scorer.score(50).tier is QualityTier.EXCELLENT
    assert scorer.score(20).tier is QualityTier.GOOD


def test_ocr_mean_confidence():
    scorer = QualityScorer(QualityThresholds(ocr=OcrThresholds(good=0.6, poor=0.2)))
    good = scorer.score_ocr([0.5, 0.7, 0.9])
    assert good.tier is QualityTier.GOOD
    assert abs(good.score - 0.7) < 1e-9

    poor = scorer.score_ocr([0.1, 0.2])
    assert poor.tier is QualityTier.POOR
    assert poor.below_floor


def test_better_of_text_and_ocr_is_reported():
    scorer = QualityScorer()

    ocr_wins = scorer.score(5, [0.9])
    assert ocr_wins.kind is QualityKind.OCR
    assert ocr_wins.tier is QualityTier.GOOD

    text_wins = scorer.score(5000, [0.9])
    assert text_wins.kind is QualityKind.TEXT
    assert text_wins.tier is QualityTier.EXCELLENT


def test_no_ocr_means_text_assessment():
    assert QualityScorer().score(5, []).kind is QualityKind.TEXT
