"""xqdoc environment checker (doctor command).

Validates that a Java runtime and the bundled xquerydoc archive are available
before a generation run is attempted.
"""

import platform
import shutil
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Literal

from xqdoc.assets.extractor import AssetExtractionError
from xqdoc.assets.locator import locate_archive, missing_entries
from xqdoc.config import ReportConfig


@dataclass
class CheckItem:
    """Individual check result."""

    id: str
    status: Literal["pass", "fail", "warn"]
    message: str
    remediation: list[str] = field(default_factory=list)


@dataclass
class DoctorReport:
    """Complete doctor check report."""

    schema_version: str = "1.0"
    status: Literal["passed", "failed"] = "passed"
    environment: dict = field(default_factory=dict)
    archive: dict = field(default_factory=dict)
    checks: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def _check_java(java_executable: str) -> CheckItem:
    """Check A: Java runtime on PATH."""
    java = shutil.which(java_executable)
    if java is None:
        return CheckItem(
            id="java_runtime",
            status="fail",
            message=f"Java executable not found: {java_executable}",
            remediation=[
                "Install a Java runtime (11 or newer) and put it on PATH",
                "Or point java_executable in xqdoc.yaml at an existing java binary",
            ],
        )
    return CheckItem(
        id="java_runtime",
        status="pass",
        message=f"Java executable found: {java}",
    )


def _check_archive(archive: Path | None) -> tuple[CheckItem, Path | None]:
    """Check B: bundled archive can be located."""
    try:
        located = locate_archive(archive)
    except AssetExtractionError as e:
        return (
            CheckItem(
                id="bundled_archive",
                status="fail",
                message=str(e),
                remediation=[
                    "Pass --archive pointing at a zip holding a xquerydoc/ tree",
                    "Or set XQDOC_ARCHIVE",
                ],
            ),
            None,
        )
    return CheckItem(id="bundled_archive", status="pass", message=f"Bundled archive: {located}"), located


def _check_archive_entries(archive: Path | None) -> tuple[CheckItem, list[str]]:
    """Check C: archive carries the calabash jar, the pipeline and the static assets."""
    if archive is None:
        return (
            CheckItem(
                id="archive_entries",
                status="fail",
                message="Skipped: no archive located",
            ),
            [],
        )
    try:
        missing = missing_entries(archive)
    except AssetExtractionError as e:
        return CheckItem(id="archive_entries", status="fail", message=str(e)), []

    if missing:
        return (
            CheckItem(
                id="archive_entries",
                status="fail",
                message=f"Archive is missing entries: {', '.join(missing)}",
                remediation=["Rebuild the archive from a complete xquerydoc checkout"],
            ),
            missing,
        )
    return CheckItem(id="archive_entries", status="pass", message="All required entries present"), []


def _check_sources(xquery_dir_entry: Path) -> CheckItem:
    """Check D: XQuery sources (warning only)."""
    if xquery_dir_entry.is_dir():
        return CheckItem(
            id="xquery_sources",
            status="pass",
            message=f"XQuery sources: {xquery_dir_entry}",
        )
    return CheckItem(
        id="xquery_sources",
        status="warn",
        message=f"XQuery source directory does not exist: {xquery_dir_entry}",
        remediation=["Set xquery_dir_entry in xqdoc.yaml or pass --xquery-dir"],
    )


def run_doctor(config: ReportConfig) -> DoctorReport:
    """Run xqdoc environment checks for ``config``."""
    import xqdoc

    report = DoctorReport()
    report.environment = {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "xqdoc_version": xqdoc.__version__,
        "basedir": str(config.basedir),
    }

    checks: list[CheckItem] = [_check_java(config.java_executable)]

    archive_check, archive = _check_archive(config.archive)
    checks.append(archive_check)

    entries_check, missing = _check_archive_entries(archive)
    checks.append(entries_check)

    checks.append(_check_sources(config.xquery_dir_entry))

    report.archive = {
        "path": str(archive) if archive else None,
        "missing_entries": missing,
    }

    failed = sum(1 for c in checks if c.status == "fail")
    report.checks = {
        "passed": sum(1 for c in checks if c.status == "pass"),
        "failed": failed,
        "warnings": sum(1 for c in checks if c.status == "warn"),
        "items": [asdict(c) for c in checks],
    }
    report.status = "passed" if failed == 0 else "failed"
    return report
