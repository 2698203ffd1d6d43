from __future__ import annotations

from enum import StrEnum, auto
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

IGNORE_FILE_NAME = ".bwignore"
CONTENT_MARKER = "{{content}}"
DEFAULT_MIME_TYPE = "application/octet-stream"

IMAGE_MIME_TYPES: dict[str, str] = {
    ".gif": "image/gif",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}


class FileKind(StrEnum):
    """How a candidate file is represented in the output."""

    TEXT = auto()
    IMAGE = auto()


class ImageMode(StrEnum):
    """Rendering of image files in the output.

    - ``HTML``: an ``<img>`` tag with a ``data:`` URI source.
    - ``MARKDOWN``: a Markdown image link with a ``data:`` URI target.
    - ``NONE``: no embedding, a placeholder comment naming the file.
    """

    HTML = auto()
    MARKDOWN = auto()
    NONE = auto()


class PipelineState(StrEnum):
    """States of a single pipeline run."""

    IDLE = auto()
    TRAVERSING = auto()
    TRANSFORMING = auto()
    ASSEMBLING = auto()
    WRITING = auto()
    DONE = auto()
    FAILED = auto()


class CandidateFile(BaseModel):
    """A file selected by traversal, pending transformation.

    Attributes:
        path: Resolved absolute path to the file on disk.
        name: Base name of the file.
        rel: Path relative to the traversal root, with POSIX separators.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    path: Path = Field(..., description="Resolved absolute file path")
    name: str = Field(..., description="Base name of the file")
    rel: str = Field(..., description="File path relative to the traversal root")


class TransformedBlock(BaseModel):
    """The delimited fragment representing one processed file."""

    model_config = ConfigDict(frozen=True)

    candidate: CandidateFile
    kind: FileKind
    text: str


class PipelineResult(BaseModel):
    """Summary of a successful pipeline run."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    success: bool = Field(default=True, description="Whether the run completed")
    file_count: int = Field(..., ge=0, description="Number of files written to the output")
    output_file: Path = Field(..., description="Destination of the assembled output")
    processed_files: list[Path] = Field(
        default_factory=list,
        description="Files included in the output, in output order",
    )
    skipped_files: list[Path] = Field(
        default_factory=list,
        description="Candidates dropped because they could not be read",
    )
