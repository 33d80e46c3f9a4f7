"""Binary signature detection for chunk buffers."""

from pathlib import Path

from chunkscan.models import ContainerKind

# Known container magic sequences, longest first within a family
SIGNATURES: list[tuple[bytes, ContainerKind]] = [
    # OLE2 compound file (legacy .xls and other binary Office documents)
    (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", ContainerKind.COMPOUND_BINARY),
    # PDF header
    (b"%PDF-", ContainerKind.PDF),
    # ZIP family: local file header, empty archive, spanned archive
    (b"PK\x03\x04", ContainerKind.ZIP_PACKAGE),
    (b"PK\x05\x06", ContainerKind.ZIP_PACKAGE),
    (b"PK\x07\x08", ContainerKind.ZIP_PACKAGE),
]

MIN_SIGNATURE_LENGTH = min(len(magic) for magic, _ in SIGNATURES)
MAX_SIGNATURE_LENGTH = max(len(magic) for magic, _ in SIGNATURES)


def classify(buffer: bytes) -> ContainerKind:
    """Classify a buffer as a complete container kind or a fragment.

    Only the leading bytes are inspected. A mid-file chunk will almost always
    come back as FRAGMENT.

    Args:
        buffer: Raw chunk bytes

    Returns:
        The matching ContainerKind, or ContainerKind.FRAGMENT
    """
    if len(buffer) < MIN_SIGNATURE_LENGTH:
        return ContainerKind.FRAGMENT

    head = bytes(buffer[:MAX_SIGNATURE_LENGTH])
    for magic, kind in SIGNATURES:
        if head.startswith(magic):
            return kind

    return ContainerKind.FRAGMENT


def classify_file(path: str | Path) -> ContainerKind:
    """Classify a file by reading only its leading bytes."""
    with open(path, "rb") as f:
        head = f.read(MAX_SIGNATURE_LENGTH)
    return classify(head)
