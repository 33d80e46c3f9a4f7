"""Analysis options.

Options are built once per document job and passed by reference to every
component. ``from_mapping`` accepts the camelCase configuration map used by
config files; ``to_mapping`` produces the same map back.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from chunkscan.errors import ConfigError

DEFAULT_EXTENSIONS = (".xls", ".xlsx", ".xlsm", ".pdf")
WORKER_MODES = ("process", "thread")
IMAGE_FORMATS = ("png", "jpeg", "ppm", "tiff")


def _check_int(name: str, value: Any, minimum: int = 0) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {type(value).__name__}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")


def _check_number(name: str, value: Any, minimum: float = 0.0) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {type(value).__name__}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")


def _check_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be a boolean, got {type(value).__name__}")


def _check_str_list(name: str, value: Any) -> None:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"{name} must be a list of strings")
    if not all(isinstance(item, str) and item for item in value):
        raise ConfigError(f"{name} must contain only non-empty strings")


def _section(data: Any, name: str, allowed: set[str]) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigError(f"{name} must be a mapping")
    unknown = set(data) - allowed
    if unknown:
        raise ConfigError(f"Unknown keys in {name}: {sorted(unknown)}")
    return data


@dataclass(frozen=True)
class OcrOptions:
    enabled: bool = True
    languages: tuple[str, ...] = ("kor", "eng")
    min_confidence: float = 0.3
    trigger_chars: int = 50

    def __post_init__(self) -> None:
        _check_bool("ocr.enabled", self.enabled)
        _check_str_list("ocr.languages", self.languages)
        _check_number("ocr.minConfidence", self.min_confidence)
        if self.min_confidence > 1:
            raise ConfigError("ocr.minConfidence must be between 0 and 1")
        _check_int("ocr.triggerChars", self.trigger_chars)
        object.__setattr__(self, "languages", tuple(self.languages))

    @property
    def language_spec(self) -> str:
        """Tesseract language argument, e.g. ``kor+eng``."""
        return "+".join(self.languages)


@dataclass(frozen=True)
class ImageOptions:
    """Rasterization limits for conversion work."""

    dpi: int = 300
    max_width: int = 800
    max_height: int = 1000
    format: str = "png"
    max_pages: int = 3

    def __post_init__(self) -> None:
        _check_int("image.dpi", self.dpi, 1)
        _check_int("image.maxWidth", self.max_width, 1)
        _check_int("image.maxHeight", self.max_height, 1)
        _check_int("image.maxPages", self.max_pages, 0)
        if self.format not in IMAGE_FORMATS:
            raise ConfigError(
                f"image.format must be one of {IMAGE_FORMATS}, got {self.format!r}"
            )


@dataclass(frozen=True)
class TextThresholds:
    """Extracted-character cut points."""

    excellent: int = 1000
    good: int = 100
    poor: int = 10

    def __post_init__(self) -> None:
        for name in ("excellent", "good", "poor"):
            _check_number(f"quality.text.{name}", getattr(self, name))
        if not self.excellent >= self.good >= self.poor:
            raise ConfigError("quality.text thresholds must satisfy excellent >= good >= poor")


@dataclass(frozen=True)
class OcrThresholds:
    """Mean OCR confidence cut points, 0..1."""

    good: float = 0.5
    poor: float = 0.1

    def __post_init__(self) -> None:
        _check_number("quality.ocr.good", self.good)
        _check_number("quality.ocr.poor", self.poor)
        if self.good > 1 or not self.good >= self.poor:
            raise ConfigError("quality.ocr thresholds must satisfy 1 >= good >= poor")


@dataclass(frozen=True)
class QualityThresholds:
    text: TextThresholds = field(default_factory=TextThresholds)
    ocr: OcrThresholds = field(default_factory=OcrThresholds)


@dataclass(frozen=True)
class ErrorPolicy:
    continue_on_error: bool = True
    log_warnings: bool = True
    max_retries: int = 2

    def __post_init__(self) -> None:
        _check_bool("errorHandling.continueOnError", self.continue_on_error)
        _check_bool("errorHandling.logWarnings", self.log_warnings)
        _check_int("errorHandling.maxRetries", self.max_retries)


@dataclass(frozen=True)
class AnalysisOptions:
    """Configuration for one document job."""

    supported_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    max_file_size: int = 2 * 1024 * 1024 * 1024
    max_pages: int = 10000
    sample_rows: int = 10
    max_concurrent_analysis: int = 4
    max_concurrent_conversions: int = 2
    worker_mode: str = "process"
    ocr: OcrOptions = field(default_factory=OcrOptions)
    image: ImageOptions = field(default_factory=ImageOptions)
    quality: QualityThresholds = field(default_factory=QualityThresholds)
    errors: ErrorPolicy = field(default_factory=ErrorPolicy)

    def __post_init__(self) -> None:
        _check_str_list("supportedExtensions", self.supported_extensions)
        if not all(ext.startswith(".") for ext in self.supported_extensions):
            raise ConfigError("supportedExtensions entries must start with '.'")
        object.__setattr__(
            self,
            "supported_extensions",
            tuple(self.supported_extensions),
        )
        _check_int("maxFileSize", self.max_file_size)
        _check_int("maxPages", self.max_pages)
        _check_int("sampleRows", self.sample_rows)
        _check_int("maxConcurrentAnalysis", self.max_concurrent_analysis, 1)
        _check_int("maxConcurrentConversions", self.max_concurrent_conversions, 1)
        if self.worker_mode not in WORKER_MODES:
            raise ConfigError(
                f"workerMode must be one of {WORKER_MODES}, got {self.worker_mode!r}"
            )

    def supports(self, extension: str) -> bool:
        ext = extension.lower()
        if ext and not ext.startswith("."):
            ext = "." + ext
        return ext in {e.lower() for e in self.supported_extensions}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AnalysisOptions":
        """Build options from a camelCase configuration map.

        Missing keys take their defaults. Unknown keys and values of the
        wrong type raise ConfigError; nothing is coerced or clamped.
        """
        data = _section(data, "options", set(_TOP_LEVEL) | set(_NESTED))
        kwargs: dict[str, Any] = {}
        for key, attr in _TOP_LEVEL.items():
            if key in data:
                kwargs[attr] = data[key]

        if "ocr" in data:
            ocr = _section(data["ocr"], "ocr", set(_OCR))
            kwargs["ocr"] = OcrOptions(**{_OCR[k]: v for k, v in ocr.items()})
        if "image" in data:
            image = _section(data["image"], "image", set(_IMAGE))
            kwargs["image"] = ImageOptions(**{_IMAGE[k]: v for k, v in image.items()})
        if "quality" in data:
            quality = _section(data["quality"], "quality", {"text", "ocr"})
            text = _section(quality.get("text", {}), "quality.text", {"excellent", "good", "poor"})
            ocr_q = _section(quality.get("ocr", {}), "quality.ocr", {"good", "poor"})
            kwargs["quality"] = QualityThresholds(
                text=TextThresholds(**text),
                ocr=OcrThresholds(**ocr_q),
            )
        if "errorHandling" in data:
            policy = _section(data["errorHandling"], "errorHandling", set(_POLICY))
            kwargs["errors"] = ErrorPolicy(**{_POLICY[k]: v for k, v in policy.items()})

        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    def to_mapping(self) -> dict[str, Any]:
        """Inverse of from_mapping."""
        data: dict[str, Any] = {}
        for key, attr in _TOP_LEVEL.items():
            value = getattr(self, attr)
            data[key] = list(value) if isinstance(value, tuple) else value
        data["ocr"] = {
            key: list(getattr(self.ocr, attr)) if attr == "languages" else getattr(self.ocr, attr)
            for key, attr in _OCR.items()
        }
        data["image"] = {key: getattr(self.image, attr) for key, attr in _IMAGE.items()}
        data["quality"] = {
            "text": {f.name: getattr(self.quality.text, f.name) for f in fields(TextThresholds)},
            "ocr": {f.name: getattr(self.quality.ocr, f.name) for f in fields(OcrThresholds)},
        }
        data["errorHandling"] = {key: getattr(self.errors, attr) for key, attr in _POLICY.items()}
        return data


# camelCase key -> attribute name
_TOP_LEVEL = {
    "supportedExtensions": "supported_extensions",
    "maxFileSize": "max_file_size",
    "maxPages": "max_pages",
    "sampleRows": "sample_rows",
    "maxConcurrentAnalysis": "max_concurrent_analysis",
    "maxConcurrentConversions": "max_concurrent_conversions",
    "workerMode": "worker_mode",
}
_NESTED = ("ocr", "image", "quality", "errorHandling")
_OCR = {
    "enabled": "enabled",
    "languages": "languages",
    "minConfidence": "min_confidence",
    "triggerChars": "trigger_chars",
}
_IMAGE = {
    "dpi": "dpi",
    "maxWidth": "max_width",
    "maxHeight": "max_height",
    "format": "format",
    "maxPages": "max_pages",
}
_POLICY = {
    "continueOnError": "continue_on_error",
    "logWarnings": "log_warnings",
    "maxRetries": "max_retries",
}
