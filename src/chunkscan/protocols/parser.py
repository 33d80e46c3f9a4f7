"""Protocol for container parsing capabilities."""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence, runtime_checkable

from chunkscan.models import ContainerKind


@dataclass
class ParsedSheet:
    """One logical sheet or page.

    rows is consumed lazily; it may only be valid until the owning
    ParsedContainer is closed.
    """

    name: str
    rows: Iterable[Sequence[Any]]


@dataclass
class ParsedContainer:
    """A parsed container handed back by a ContainerParser."""

    kind: ContainerKind
    sheets: list[ParsedSheet]
    unit: str = "sheet"  # "sheet" or "page"
    metadata: dict = field(default_factory=dict)
    on_close: Optional[Callable[[], None]] = None

    def close(self) -> None:
        if self.on_close is not None:
            self.on_close()
            self.on_close = None

    def __enter__(self) -> "ParsedContainer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@runtime_checkable
class ContainerParser(Protocol):
    """Protocol for spreadsheet/PDF parsing backends.

    The analyzer only depends on this interface, so the concrete parsing
    library can be swapped (or replaced with a test double).
    """

    @property
    def kind(self) -> ContainerKind:
        """Return the container kind this parser accepts."""
        ...

    def parse(self, buffer: bytes) -> ParsedContainer:
        """Parse a complete container buffer.

        Raises:
            ParseError: if the buffer is rejected
        """
        ...
