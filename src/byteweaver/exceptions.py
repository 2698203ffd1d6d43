from dataclasses import dataclass
from enum import StrEnum, auto
from pathlib import Path
from typing import ClassVar


class ErrorKind(StrEnum):
    """Closed set of failure categories surfaced to callers."""

    CONFIG = auto()
    IO = auto()
    TEMPLATE = auto()
    FILE = auto()


@dataclass(frozen=True)
class ByteWeaverError(Exception):
    """Base exception for errors in the byteweaver package."""

    message: str
    kind: ClassVar[ErrorKind]

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ConfigError(ByteWeaverError):
    """Raised when options or the input directory are invalid."""

    kind: ClassVar[ErrorKind] = ErrorKind.CONFIG


@dataclass(frozen=True)
class TraversalError(ByteWeaverError):
    """Raised when a directory cannot be listed."""

    directory: Path | None = None
    kind: ClassVar[ErrorKind] = ErrorKind.IO


@dataclass(frozen=True)
class OutputWriteError(ByteWeaverError):
    """Raised when the output file cannot be written."""

    output: Path | None = None
    kind: ClassVar[ErrorKind] = ErrorKind.IO


@dataclass(frozen=True)
class TemplateError(ByteWeaverError):
    """Raised when the template file is unreadable or has no content marker."""

    template: Path | None = None
    kind: ClassVar[ErrorKind] = ErrorKind.TEMPLATE


@dataclass(frozen=True)
class FileProcessingError(ByteWeaverError):
    """Raised when a single candidate file cannot be read or encoded.

    This one is recoverable: the pipeline skips the file and carries on.
    """

    file: Path | None = None
    kind: ClassVar[ErrorKind] = ErrorKind.FILE
