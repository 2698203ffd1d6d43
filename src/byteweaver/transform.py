from __future__ import annotations

import base64
import re
from functools import wraps
from typing import TYPE_CHECKING, Any

from byteweaver.config import (
    DEFAULT_MIME_TYPE,
    IMAGE_MIME_TYPES,
    CandidateFile,
    FileKind,
    ImageMode,
    TransformedBlock,
)
from byteweaver.exceptions import FileProcessingError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from byteweaver.settings import AssemblyOptions

    ImageRendererFn = Callable[[CandidateFile], str]

_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_EMPTY_LINE = re.compile(r"^\s*\n", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")

IMAGE_RENDERER: dict[ImageMode, Callable[[CandidateFile], str]] = {}


def register_image_renderer(
    mode: ImageMode | list[ImageMode],
) -> Callable[[ImageRendererFn], ImageRendererFn]:
    """Decorator to register how images are rendered for an image mode.

    Args:
        mode (ImageMode | list[ImageMode]): the mode(s) the decorated function renders.

    Returns:
        Callable[[ImageRendererFn], ImageRendererFn]: A decorator that registers the given function
        in the IMAGE_RENDERER mapping under the specified mode(s) and returns the original function.
    """

    def decorator(func: ImageRendererFn) -> ImageRendererFn:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
            return func(*args, **kwargs)

        for m in mode if isinstance(mode, list) else [mode]:
            IMAGE_RENDERER[m] = wrapper
        return wrapper

    return decorator


def is_image(path: Path) -> bool:
    """Check the extension of a path against the image allow-list (case-insensitive)."""
    return path.suffix.lower() in IMAGE_MIME_TYPES


def mime_type_for(path: Path) -> str:
    """Return the MIME type for an image path, or ``application/octet-stream``."""
    return IMAGE_MIME_TYPES.get(path.suffix.lower(), DEFAULT_MIME_TYPE)


def minify_content(content: str) -> str:
    """Strip C-style comments and collapse whitespace.

    Removes ``// ...`` up to the end of each line and ``/* ... */`` blocks
    (non-greedy, across lines), drops the lines left empty, then collapses
    every whitespace run to a single space and trims the result.

    This is not a parser: comment markers inside string literals (URLs such
    as ``http://...`` included) are treated as comments.

    Args:
        content (str): the text to minify

    Returns:
        str: the minified text
    """
    text = _LINE_COMMENT.sub("", content)
    text = _BLOCK_COMMENT.sub("", text)
    text = _EMPTY_LINE.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def file_header(candidate: CandidateFile) -> str:
    """Comment line opening the block of a file."""
    return f"<!-- File: {candidate.rel} -->"


def encode_image(path: Path) -> str:
    """Read an image and return it as a base64 ``data:`` URI.

    Args:
        path (Path): the image file

    Raises:
        FileProcessingError: if the file cannot be read

    Returns:
        str: ``data:<mime>;base64,<data>``
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FileProcessingError(message=f"Cannot read image {path}: {e}", file=path) from e
    data = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type_for(path)};base64,{data}"


@register_image_renderer(ImageMode.HTML)
def render_html_image(candidate: CandidateFile) -> str:
    """Render an image as an HTML ``<img>`` tag with an inline source."""
    return f'<img src="{encode_image(candidate.path)}" alt="{candidate.name}" />'


@register_image_renderer(ImageMode.MARKDOWN)
def render_markdown_image(candidate: CandidateFile) -> str:
    """Render an image as a Markdown image with an inline target."""
    return f"![{candidate.name}]({encode_image(candidate.path)})"


@register_image_renderer(ImageMode.NONE)
def render_image_placeholder(candidate: CandidateFile) -> str:
    """Name the image without reading it."""
    return f"<!-- Image not embedded: {candidate.name} -->"


def read_text(path: Path) -> str:
    """Read a text file as UTF-8.

    Raises:
        FileProcessingError: if the file cannot be read or is not valid UTF-8
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileProcessingError(message=f"Cannot read file {path}: {e}", file=path) from e


def transform(candidate: CandidateFile, options: AssemblyOptions) -> TransformedBlock:
    """Turn one candidate file into its output block.

    Images are rendered according to ``options.image_mode``; text files are
    read, minified when ``options.minify`` is set, and wrapped in a block
    headed by a comment naming the file.

    Args:
        candidate (CandidateFile): the file to transform
        options (AssemblyOptions): the resolved run options

    Raises:
        FileProcessingError: if the file cannot be read or encoded

    Returns:
        TransformedBlock: the block to splice into the output
    """
    kind = FileKind.IMAGE if is_image(candidate.path) else FileKind.TEXT
    if kind is FileKind.IMAGE:
        body = IMAGE_RENDERER[options.image_mode](candidate)
    else:
        body = read_text(candidate.path)
        if options.minify:
            body = minify_content(body)
    return TransformedBlock(
        candidate=candidate,
        kind=kind,
        text=f"{file_header(candidate)}\n{body}\n",
    )
