"""Pytest configuration and fixtures for xqdoc tests."""
import zipfile
from dataclasses import replace
from pathlib import Path

import pytest

from xqdoc.config import ReportConfig

BUNDLE_FILES = {
    "xquerydoc/deps/xmlcalabash/calabash.jar": b"PK-fake-calabash",
    "xquerydoc/xquerydoc.xpl": b"<p:declare-step/>\n",
    "xquerydoc/src/lib/prettify.js": b"window.prettyPrint = function () {};\n",
    "xquerydoc/src/lib/prettify.css": b".pln { color: #000 }\n",
    "xquerydoc/src/lib/lang-xq.js": b"PR.registerLangHandler();\n",
}


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    This prevents silent "no data collected" scenarios that produce 0% coverage
    without failing the test run.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)

    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))

    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'xqdoc' (the package) not 'src/xqdoc' (filesystem path).",
            returncode=1
        )


def write_archive(path: Path, entries: dict[str, bytes | None]) -> Path:
    """Write a zip archive; a ``None`` value adds a directory entry."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            if data is None:
                zf.writestr(zipfile.ZipInfo(name.rstrip("/") + "/"), b"")
            else:
                zf.writestr(name, data)
    return path


@pytest.fixture
def bundle_archive(tmp_path: Path) -> Path:
    """A complete bundled xquerydoc archive with directory entries interleaved."""
    entries: dict[str, bytes | None] = {
        "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
        "xquerydoc/": None,
        "xquerydoc/deps/": None,
        "xquerydoc/deps/xmlcalabash/": None,
        "xquerydoc/src/": None,
        "xquerydoc/src/lib/": None,
    }
    entries.update(BUNDLE_FILES)
    return write_archive(tmp_path / "bundle" / "xqdoc-plugin.zip", entries)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with a couple of XQuery modules."""
    root = tmp_path / "project"
    sources = root / "src" / "main" / "xquery"
    sources.mkdir(parents=True)
    (sources / "hello.xqm").write_text('module namespace h = "urn:hello";\n')
    return root


@pytest.fixture
def report_config(project: Path, bundle_archive: Path) -> ReportConfig:
    return replace(ReportConfig.defaults(project), archive=bundle_archive)


@pytest.fixture
def make_archive(tmp_path: Path):
    """Factory writing ad-hoc archives under tmp_path."""

    def _make(entries: dict[str, bytes | None], name: str = "custom.zip") -> Path:
        return write_archive(tmp_path / "archives" / name, entries)

    return _make


@pytest.fixture
def bundle_files() -> dict[str, bytes]:
    return dict(BUNDLE_FILES)


@pytest.fixture
def corrupt_archive(tmp_path: Path) -> Path:
    """An archive whose deflated pipeline entry has damaged compressed bytes."""
    path = tmp_path / "archives" / "corrupt.zip"
    path.parent.mkdir(parents=True, exist_ok=True)
    name = "xquerydoc/xquerydoc.xpl"
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(name, b"<p:declare-step/>\n" * 500)
    raw = bytearray(path.read_bytes())
    # Local header is 30 bytes plus the name; writestr adds no extra field
    start = 30 + len(name)
    for i in range(start + 2, start + 12):
        raw[i] ^= 0xFF
    path.write_bytes(bytes(raw))
    return path
