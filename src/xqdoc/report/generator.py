"""XQuery documentation report lifecycle.

One generation run extracts the bundled implementation into a scratch
folder, runs the xquerydoc pipeline, copies the report's static assets and
removes the scratch folder, whatever happened in between.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from xqdoc.assets.extractor import AssetExtractionError, extract_assets
from xqdoc.assets.locator import locate_archive
from xqdoc.config import ReportConfig
from xqdoc.process.runner import ProcessError, ProcessResult, build_command, run_process
from xqdoc.report.descriptor import REPORT_DESCRIPTOR, ReportDescriptor
from xqdoc.report.resources import ResourceCopyError, copy_resources

logger = logging.getLogger(__name__)

Runner = Callable[[Sequence[str]], ProcessResult]
Locator = Callable[[Path | None], Path]


class Phase(str, Enum):
    """Lifecycle phases of one generation run."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    RUNNING = "running"
    COPYING_RESOURCES = "copying_resources"
    FAILED = "failed"
    CLEANING_UP = "cleaning_up"
    DONE = "done"


@dataclass
class GenerationResult:
    """Outcome of one run: the phases it went through and why it failed, if it did."""

    report_path: Path
    phases: list[Phase] = field(default_factory=lambda: [Phase.IDLE])
    returncode: int | None = None
    error: str | None = None
    skipped: bool = False

    def advance(self, phase: Phase) -> None:
        self.phases.append(phase)

    def fail(self, message: str) -> None:
        self.error = message
        self.advance(Phase.FAILED)

    @property
    def failed(self) -> bool:
        return Phase.FAILED in self.phases

    @property
    def succeeded(self) -> bool:
        return not self.skipped and not self.failed and Phase.COPYING_RESOURCES in self.phases


def remove_implementation(folder: Path) -> None:
    shutil.rmtree(folder, ignore_errors=True)


@contextmanager
def materialized_implementation(archive: Path, folder: Path) -> Iterator[Path]:
    """Extract the bundled implementation into ``folder`` for the duration of the block.

    The folder is removed on every exit path, including a failed extraction.
    """
    try:
        extract_assets(archive, folder)
        yield folder
    finally:
        remove_implementation(folder)


class XQueryDocReport:
    """Generates the XQuery documentation report for one project."""

    def __init__(
        self,
        config: ReportConfig,
        *,
        runner: Runner = run_process,
        locator: Locator = locate_archive,
        descriptor: ReportDescriptor = REPORT_DESCRIPTOR,
    ):
        self.config = config
        self.descriptor = descriptor
        self._runner = runner
        self._locator = locator

    @property
    def report_output_directory(self) -> Path:
        return self.config.output_directory

    @report_output_directory.setter
    def report_output_directory(self, directory: Path) -> None:
        self.config = self.config.with_output_directory(directory)

    @property
    def report_file(self) -> Path:
        return self.report_output_directory / self.descriptor.output_filename

    def execute(self) -> GenerationResult:
        """Generate the report unless skipping is configured."""
        if self.config.skip:
            logger.info("Skipping xquery doc generation")
            result = GenerationResult(report_path=self.report_file, skipped=True)
            result.advance(Phase.DONE)
            return result
        return self.generate()

    def generate(self) -> GenerationResult:
        """Run extraction, the pipeline and resource finalization, then clean up.

        Failures are logged and recorded on the result rather than raised.
        """
        result = GenerationResult(report_path=self.report_file)
        folder = self.config.implementation_folder
        result.advance(Phase.EXTRACTING)
        try:
            archive = self._locator(self.config.archive)
            with materialized_implementation(archive, folder):
                result.advance(Phase.RUNNING)
                self._run_pipeline(result)
        except AssetExtractionError as e:
            logger.error("Unable to extract xquerydoc implementation: %s", e)
            result.fail(str(e))
        finally:
            result.advance(Phase.CLEANING_UP)
            result.advance(Phase.DONE)
        return result

    def _run_pipeline(self, result: GenerationResult) -> None:
        config = self.config
        try:
            self.report_file.parent.mkdir(parents=True, exist_ok=True)
            argv = build_command(
                implementation_folder=config.implementation_folder,
                report_file=self.report_file,
                xquery_dir_entry=config.xquery_dir_entry,
                basedir=config.basedir,
                java_executable=config.java_executable,
            )
            logger.info("... this may take a while, be patient...")
            process = self._runner(argv)
        except (ProcessError, OSError) as e:
            logger.error("while generating XQuery doc: %s", e)
            result.fail(str(e))
            return

        result.returncode = process.returncode
        if not process.ok:
            message = f"xquerydoc pipeline exited with code {process.returncode}"
            logger.error(message)
            result.fail(message)
            return

        result.advance(Phase.COPYING_RESOURCES)
        try:
            copy_resources(config.implementation_folder, config.output_folder)
        except ResourceCopyError as e:
            logger.error("while copying XQuery doc resources: %s", e)
            result.fail(str(e))
