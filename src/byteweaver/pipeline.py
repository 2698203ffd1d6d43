"""Run driver: traverse, transform, assemble and write, in that order."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from byteweaver.config import PipelineResult, PipelineState
from byteweaver.exceptions import ByteWeaverError, ConfigError, FileProcessingError
from byteweaver.file_manipulation import drop_output_file, traverse
from byteweaver.logging import logger, setup_logging
from byteweaver.output_construction import assemble, write_output
from byteweaver.settings import resolve_options
from byteweaver.transform import transform

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from byteweaver.config import CandidateFile, TransformedBlock
    from byteweaver.settings import AssemblyOptions


class Pipeline:
    """One byteweaver run over a directory.

    The run moves through ``IDLE -> TRAVERSING -> TRANSFORMING -> ASSEMBLING
    -> WRITING -> DONE``. A fatal error moves it to ``FAILED`` and is raised
    to the caller; unreadable files only produce warnings.
    """

    def __init__(
        self,
        directory: str | Path,
        output: str | Path,
        options: AssemblyOptions,
        *,
        cwd: Path,
    ) -> None:
        self.directory = Path(directory)
        self.output = Path(output)
        self.options = options
        self.cwd = cwd
        self.state = PipelineState.IDLE
        self.skipped: list[Path] = []

    def _enter(self, state: PipelineState) -> None:
        logger.debug("state_changed", previous=self.state.value, state=state.value)
        self.state = state

    def _collect(self) -> list[CandidateFile]:
        if not self.directory.is_dir():
            raise ConfigError(message=f"Directory not found or not a directory: {self.directory}")
        candidates = traverse(
            self.directory,
            self.options.exclude,
            self.options.include,
            recursive=self.options.recursive,
            cwd=self.cwd,
        )
        return drop_output_file(candidates, self.output)

    def _transform_all(self, candidates: Sequence[CandidateFile]) -> list[TransformedBlock]:
        blocks: list[TransformedBlock] = []
        for candidate in candidates:
            try:
                blocks.append(transform(candidate, self.options))
            except FileProcessingError as e:
                logger.warning("file_skipped", path=str(candidate.path), error=e.message)
                self.skipped.append(candidate.path)
        return blocks

    def run(self) -> PipelineResult:
        """Execute the run.

        Raises:
            ByteWeaverError: on a fatal error (missing directory, unreadable
                template, unwritable output...)

        Returns:
            PipelineResult: the summary of the processed files
        """
        try:
            self._enter(PipelineState.TRAVERSING)
            candidates = self._collect()
            self._enter(PipelineState.TRANSFORMING)
            blocks = self._transform_all(candidates)
            self._enter(PipelineState.ASSEMBLING)
            content = assemble(blocks, self.options)
            self._enter(PipelineState.WRITING)
            write_output(self.output, content)
        except ByteWeaverError as e:
            logger.error("pipeline_failed", state=self.state.value, kind=e.kind.value, error=e.message)
            self._enter(PipelineState.FAILED)
            raise
        self._enter(PipelineState.DONE)
        processed = [b.candidate.path for b in blocks]
        return PipelineResult(
            success=True,
            file_count=len(processed),
            output_file=self.output,
            processed_files=processed,
            skipped_files=list(self.skipped),
        )


def run_pipeline(
    directory: str | Path,
    output_path: str | Path,
    options: AssemblyOptions | Mapping[str, Any] | None = None,
    *,
    cwd: Path | None = None,
) -> PipelineResult:
    """Concatenate the files of `directory` into `output_path`.

    Args:
        directory (str | Path): the directory to bundle
        output_path (str | Path): the file to create or overwrite
        options (AssemblyOptions | Mapping[str, Any] | None): run options; a
            mapping is validated into AssemblyOptions, None means defaults
        cwd (Path | None): working directory for relative-path matching;
            defaults to the process working directory

    Raises:
        ByteWeaverError: on any fatal error

    Returns:
        PipelineResult: the summary of the run
    """
    resolved = resolve_options(options)
    if resolved.debug:
        setup_logging(debug=True)
    pipeline = Pipeline(directory, output_path, resolved, cwd=cwd or Path.cwd())
    return pipeline.run()
