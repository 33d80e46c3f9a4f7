"""Container parsing backends."""

from typing import Optional

from chunkscan.models import ContainerKind
from chunkscan.parsers.pdf_parser import PdfParser
from chunkscan.parsers.xls_parser import XlsParser
from chunkscan.parsers.xlsx_parser import XlsxParser
from chunkscan.protocols import ContainerParser

# Registry of available parsers, keyed by the container kind they accept
_PARSERS: dict[ContainerKind, ContainerParser] = {
    ContainerKind.ZIP_PACKAGE: XlsxParser(),
    ContainerKind.COMPOUND_BINARY: XlsParser(),
    ContainerKind.PDF: PdfParser(),
}


def get_parser(kind: ContainerKind) -> Optional[ContainerParser]:
    """Find the parser registered for a container kind.

    Args:
        kind: Classified container kind

    Returns:
        A ContainerParser, or None when no backend handles the kind
    """
    return _PARSERS.get(kind)


def register_parser(parser: ContainerParser) -> None:
    """Register (or replace) the parser for parser.kind.

    Args:
        parser: An object implementing the ContainerParser protocol
    """
    _PARSERS[parser.kind] = parser


def default_parsers() -> dict[ContainerKind, ContainerParser]:
    """Return a copy of the current registry."""
    return dict(_PARSERS)


__all__ = [
    "PdfParser",
    "XlsParser",
    "XlsxParser",
    "default_parsers",
    "get_parser",
    "register_parser",
]
