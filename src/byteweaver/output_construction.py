from __future__ import annotations

import io
from typing import TYPE_CHECKING

from byteweaver.config import CONTENT_MARKER
from byteweaver.exceptions import OutputWriteError, TemplateError
from byteweaver.logging import logger
from byteweaver.transform import minify_content

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from byteweaver.config import TransformedBlock
    from byteweaver.settings import AssemblyOptions


def apply_template(content: str, template: Path) -> str:
    """Substitute assembled content into a template file.

    Only the first ``{{content}}`` marker is replaced; later markers are kept
    as they are.

    Args:
        content (str): the assembled content
        template (Path): the template file (UTF-8)

    Raises:
        TemplateError: if the template cannot be read or has no marker

    Returns:
        str: the template with its first marker replaced by `content`
    """
    try:
        template_content = template.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(message=f"Error reading template file {template}: {e}", template=template) from e
    if CONTENT_MARKER not in template_content:
        raise TemplateError(
            message=f"Template file {template} has no {CONTENT_MARKER} marker",
            template=template,
        )
    logger.info("template_applied", template=str(template))
    return template_content.replace(CONTENT_MARKER, content, 1)


def assemble(blocks: Sequence[TransformedBlock], options: AssemblyOptions) -> str:
    """Build the final output from the transformed blocks.

    The header (if any) comes first followed by a blank line, then every block
    in the given order, then the footer (if any) after a blank line. With
    ``minify`` the whole string is minified once more, which also affects
    inlined image data that happens to contain ``//``. The template, if
    configured, wraps the result last.

    Args:
        blocks (Sequence[TransformedBlock]): the blocks, in traversal order
        options (AssemblyOptions): the resolved run options

    Raises:
        TemplateError: if the template cannot be applied

    Returns:
        str: the final output text
    """
    out = io.StringIO()
    if options.header:
        out.write(f"{options.header}\n\n")
    out.write("\n".join(block.text for block in blocks))
    if options.footer:
        out.write(f"\n\n{options.footer}")

    content = out.getvalue()
    if options.minify:
        content = minify_content(content)
    if options.template is not None:
        content = apply_template(content, options.template)
    return content


def write_output(output: Path, content: str) -> None:
    """Write the output file, replacing any previous content.

    Raises:
        OutputWriteError: if the file cannot be written
    """
    try:
        output.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(message=f"Cannot write output file {output}: {e}", output=output) from e
    logger.info("output_written", output=str(output), chars=len(content))
