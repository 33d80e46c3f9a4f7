"""Error kinds and exception types raised by the analysis pipeline."""

from enum import Enum


class ErrorKind(str, Enum):
    """Error kinds emitted by the core. Localized messages live elsewhere."""

    IO_ERROR = "io_error"
    PARSE_ERROR = "parse_error"
    CONFIG_ERROR = "config_error"
    CANCELLED = "cancelled"
    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_FORMAT = "unsupported_format"
    WORKER_CRASHED = "worker_crashed"


class ChunkScanError(Exception):
    """Base class for pipeline errors. Each carries an error kind."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ChunkIOError(ChunkScanError):
    """Opening, seeking or reading a chunk's byte range failed."""

    kind = ErrorKind.IO_ERROR


class ParseError(ChunkScanError):
    """A container signature matched but the delegate parser rejected it."""

    kind = ErrorKind.PARSE_ERROR


class ConfigError(ChunkScanError, ValueError):
    """Invalid analysis options. Raised before any work starts."""

    kind = ErrorKind.CONFIG_ERROR


class JobCancelled(ChunkScanError):
    """The cancellation token was set between two job states."""

    kind = ErrorKind.CANCELLED
