"""Command line construction and execution for the xquerydoc pipeline."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from xqdoc.assets.locator import CALABASH_JAR, PIPELINE_XPL

JAVA_MAX_HEAP = "-Xmx1024m"
OUTPUT_FORMAT = "html"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Result envelope for one pipeline process."""

    argv: tuple[str, ...]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessError(RuntimeError):
    """Base class for failures launching or talking to the pipeline process."""


class ProcessLaunchError(ProcessError):
    """Raised when the process cannot be spawned or its streams cannot be read."""


class ProcessInterruptedError(ProcessError):
    """Raised when waiting for the process is interrupted."""


def build_command(
    *,
    implementation_folder: Path,
    report_file: Path,
    xquery_dir_entry: Path,
    basedir: Path,
    java_executable: str = "java",
) -> list[str]:
    """Build the XML Calabash invocation running the xquerydoc pipeline."""
    impl = implementation_folder.resolve()
    report = report_file.resolve()
    return [
        java_executable,
        JAVA_MAX_HEAP,
        "-jar",
        str(impl.joinpath(*CALABASH_JAR.split("/"))),
        f"-oresult={report}",
        str(impl / PIPELINE_XPL),
        f"xquery={xquery_dir_entry.resolve()}",
        f"output={report.parent}",
        f"currentdir={basedir.resolve()}",
        f"format={OUTPUT_FORMAT}",
    ]


def _drain(stream: IO[str], log: logging.Logger, errors: list[BaseException]) -> None:
    try:
        for line in stream:
            log.info(line.rstrip("\r\n"))
    except (OSError, ValueError) as e:
        errors.append(e)
    finally:
        stream.close()


def run_process(
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    log: logging.Logger | None = None,
) -> ProcessResult:
    """Run ``argv`` to completion, forwarding its output line by line to ``log``.

    Standard output and standard error are drained by two reader threads so a
    child filling one pipe cannot block on the other. A non-zero exit code is
    returned, not raised.

    Raises:
        ProcessLaunchError: If the process cannot start or a stream read fails
        ProcessInterruptedError: If waiting is interrupted; the child is killed
    """
    sink = log or logger
    logger.debug("CmdLine: %s", subprocess.list2cmdline(list(argv)))
    try:
        process = subprocess.Popen(
            list(argv),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise ProcessLaunchError(f"Unable to start {argv[0]}: {e}") from e

    errors: list[BaseException] = []
    readers = [
        threading.Thread(target=_drain, args=(stream, sink, errors), daemon=True)
        for stream in (process.stdout, process.stderr)
    ]
    for reader in readers:
        reader.start()

    try:
        returncode = process.wait()
        for reader in readers:
            reader.join()
    except KeyboardInterrupt as e:
        process.kill()
        process.wait()
        raise ProcessInterruptedError(f"Interrupted while waiting for {argv[0]}") from e

    if errors:
        raise ProcessLaunchError(f"Unable to read output of {argv[0]}: {errors[0]}") from errors[0]

    return ProcessResult(argv=tuple(argv), returncode=returncode)
