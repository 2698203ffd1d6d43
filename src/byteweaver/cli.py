"""byteweaver: concatenate the files of a directory into a single document.

Run `byteweaver --help` for the options and usage examples.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import TYPE_CHECKING

from byteweaver import __version__
from byteweaver.config import ImageMode
from byteweaver.exceptions import ByteWeaverError
from byteweaver.logging import setup_logging
from byteweaver.pipeline import run_pipeline
from byteweaver.settings import LOG_FILE_ENV_VAR, Settings, load_environment

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = setup_logging()

USAGE_EXAMPLES = """\
examples:
  Flat directory:
    byteweaver src output.js

  Recursive, skipping a directory and JSON files:
    byteweaver -r -e "node_modules,*.json" src output.js

  Only JS/TS sources, minified:
    byteweaver -m -r -i "*.js,*.ts" src output.min.js

  Wrapped in a template, images as Markdown:
    byteweaver -r -t page.tpl --image-mode markdown docs bundle.md

Patterns are either *.<ext> (file name suffix) or a literal substring of the
file name or path. A .bwignore file in any visited directory adds one exclude
pattern per line for that directory and below.
"""


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse command-line arguments into Settings.

    Args:
        argv (Sequence[str] | None): the arguments, defaults to ``sys.argv[1:]``

    Returns:
        Settings: the parsed settings
    """
    load_environment()
    p = argparse.ArgumentParser(
        prog="byteweaver",
        description="Concatenate the files of a directory into a single output file.",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("directory", type=str, help="Directory to concatenate.")
    p.add_argument("output", type=str, help="Output file.")
    p.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        default=None,
        help="Search recursively through subdirectories.",
    )
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        help="Patterns to exclude (comma separated, repeatable, *.ext for extensions).",
    )
    p.add_argument(
        "-i",
        "--include",
        action="append",
        default=[],
        help="Patterns to include (comma separated, repeatable, *.ext for extensions).",
    )
    p.add_argument(
        "-m",
        "--minify",
        action="store_true",
        default=None,
        help="Minify each file and the whole output.",
    )
    p.add_argument("-t", "--template", type=str, default=None, help="Template file with a {{content}} marker.")
    p.add_argument("--header", type=str, default=None, help="Text placed before the content.")
    p.add_argument("--footer", type=str, default=None, help="Text placed after the content.")
    p.add_argument(
        "--image-mode",
        choices=[m.value for m in ImageMode],
        default=None,
        help="How images are embedded.",
    )
    p.add_argument("-c", "--config", type=str, default=None, help="YAML options file.")
    p.add_argument(
        "--log-file",
        type=str,
        default=os.environ.get(LOG_FILE_ENV_VAR, ""),
        help="Log file path.",
    )
    p.add_argument("-d", "--debug", action="store_true", help="Debug logging.")
    p.add_argument("-v", "--version", action="version", version=f"byteweaver {__version__}")
    args = p.parse_args(argv)
    return Settings(**vars(args))


def main(argv: Sequence[str] | None = None) -> int:
    """Run byteweaver from the command line.

    Returns:
        int: the process exit code, 0 on success and 1 on a fatal error
    """
    settings = parse_args(argv)
    try:
        options = settings.assembly_options()
        # the options file may turn on debug as well as the -d flag
        if settings.log_file or options.debug:
            setup_logging(settings.log_file or None, debug=options.debug)
        result = run_pipeline(settings.directory, settings.output, options)
    except ByteWeaverError as e:
        print(f"Error concatenating files: {e.message}", file=sys.stderr)
        return 1

    logger.info("run_completed", files=result.file_count, skipped=len(result.skipped_files))
    print(f"Successfully concatenated {result.file_count} files to {result.output_file}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
