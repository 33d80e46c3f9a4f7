"""Document job descriptor submitted by a caller."""

from dataclasses import dataclass, field
from pathlib import Path

from chunkscan.models.analysis import ChunkDescriptor
from chunkscan.models.options import AnalysisOptions


@dataclass(frozen=True)
class DocumentJob:
    """A file plus its planned chunks and the options to analyze it with."""

    file_path: str
    chunks: tuple[ChunkDescriptor, ...]
    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    extension: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "chunks", tuple(self.chunks))
        if not self.extension:
            object.__setattr__(self, "extension", Path(self.file_path).suffix.lower())
        for chunk in self.chunks:
            if chunk.file_path != self.file_path:
                raise ValueError(
                    f"Chunk {chunk.index} targets {chunk.file_path}, "
                    f"job targets {self.file_path}"
                )

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "extension": self.extension,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "options": self.options.to_mapping(),
        }
