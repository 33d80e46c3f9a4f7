"""Core data models for chunks, per-chunk results and the aggregate report."""

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from chunkscan.errors import ErrorKind


class ContainerKind(str, Enum):
    """What a chunk's leading bytes say about it."""

    ZIP_PACKAGE = "zip_package"
    COMPOUND_BINARY = "compound_binary"
    PDF = "pdf"
    FRAGMENT = "fragment"

    @property
    def is_container(self) -> bool:
        return self is not ContainerKind.FRAGMENT


class JobState(str, Enum):
    """States a chunk job moves through."""

    PENDING = "pending"
    READING = "reading"
    CLASSIFYING = "classifying"
    CONTAINER_PARSING = "container_parsing"
    FALLBACK_EXTRACTING = "fallback_extracting"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)


class QualityTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    POOR = "poor"

    @property
    def rank(self) -> int:
        return {"poor": 0, "good": 1, "excellent": 2}[self.value]


class QualityKind(str, Enum):
    TEXT = "text"
    OCR = "ocr"


def _plain(value: Any) -> Any:
    """Convert enums nested in asdict() output to their values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class ChunkDescriptor:
    """One byte range of one file, consumed by exactly one chunk job."""

    index: int
    file_path: str
    offset: int
    size: int

    def __post_init__(self) -> None:
        if self.index < 0 or self.offset < 0 or self.size < 0:
            raise ValueError(
                f"Chunk descriptor fields must be non-negative: {self!r}"
            )

    @property
    def end(self) -> int:
        return self.offset + self.size

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SheetInfo:
    """Per-sheet (or per-page) structural counts."""

    name: str
    rows: int = 0
    columns: int = 0
    cells: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StructureStats:
    """Structural statistics for a chunk or a whole document.

    total_rows and total_cells are kept equal to the sums over
    sheet_details by merge().
    """

    sheets: int = 0
    total_rows: int = 0
    total_cells: int = 0
    sheet_details: list[SheetInfo] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "StructureStats":
        return cls()

    @classmethod
    def from_sheets(cls, details: list[SheetInfo]) -> "StructureStats":
        return cls(
            sheets=len(details),
            total_rows=sum(d.rows for d in details),
            total_cells=sum(d.cells for d in details),
            sheet_details=list(details),
        )

    def merge(self, other: "StructureStats") -> "StructureStats":
        """Field-wise sum. Returns a new instance."""
        return StructureStats(
            sheets=self.sheets + other.sheets,
            total_rows=self.total_rows + other.total_rows,
            total_cells=self.total_cells + other.total_cells,
            sheet_details=[*self.sheet_details, *other.sheet_details],
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MemoryUsage:
    """Resource usage reported by a job."""

    rss_bytes: int = 0
    buffer_bytes: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ChunkResult:
    """Outcome of one chunk job attempt."""

    chunk_index: int
    success: bool
    structure: StructureStats = field(default_factory=StructureStats)
    content: str = ""
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    memory_usage: MemoryUsage = field(default_factory=MemoryUsage)
    container_kind: Optional[ContainerKind] = None
    state: JobState = JobState.PENDING
    attempts: int = 1
    extraction_strategy: Optional[str] = None
    sparse_pages: list[int] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    char_count: int = 0
    metadata: dict = field(default_factory=dict)

    @classmethod
    def failed(
        cls,
        chunk_index: int,
        error: str,
        error_kind: ErrorKind,
        **kwargs: Any,
    ) -> "ChunkResult":
        return cls(
            chunk_index=chunk_index,
            success=False,
            error=error,
            error_kind=error_kind,
            state=JobState.FAILED,
            **kwargs,
        )

    def to_dict(self) -> dict:
        return _plain(asdict(self))


@dataclass(frozen=True)
class OcrPage:
    """OCR output for one rasterized page."""

    page: int
    text: str
    confidence: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ConversionResult:
    """Outcome of a rasterize-and-OCR job for one chunk."""

    chunk_index: int
    success: bool
    pages: list[OcrPage] = field(default_factory=list)
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.pages if p.text)

    def to_dict(self) -> dict:
        return _plain(asdict(self))


@dataclass(frozen=True)
class QualityAssessment:
    tier: QualityTier
    kind: QualityKind
    score: float
    below_floor: bool = False

    def to_dict(self) -> dict:
        return _plain(asdict(self))


@dataclass
class AggregateReport:
    """Document-level merge of all retained chunk results."""

    file_path: str
    success: bool
    structure: StructureStats = field(default_factory=StructureStats)
    content: str = ""
    chunks: list[ChunkResult] = field(default_factory=list)
    quality: Optional[QualityAssessment] = None
    failed_chunks: list[int] = field(default_factory=list)
    skipped_chunks: list[int] = field(default_factory=list)
    aborted: bool = False
    ocr_pages: list[OcrPage] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def partial_failure(self) -> bool:
        return bool(self.failed_chunks) or bool(self.skipped_chunks)

    def to_dict(self) -> dict:
        data = _plain(asdict(self))
        data["partial_failure"] = self.partial_failure
        return data

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
