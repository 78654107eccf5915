"""Location of the archive carrying the bundled xquerydoc implementation.

Resolution order:
1. An explicit path (configuration, ``XQDOC_ARCHIVE`` or ``--archive``)
2. The zip archive xqdoc itself is imported from (zipapp / zipimport)
3. Package data ``xqdoc/_bundled/xquerydoc.zip``
"""

from __future__ import annotations

import zipfile
import zipimport
from importlib.resources import files
from pathlib import Path

from xqdoc.assets.extractor import ARCHIVE_PREFIX, AssetExtractionError

BUNDLED_ARCHIVE = ("_bundled", "xquerydoc.zip")

CALABASH_JAR = "deps/xmlcalabash/calabash.jar"
PIPELINE_XPL = "xquerydoc.xpl"
STATIC_ASSETS: tuple[str, ...] = (
    "src/lib/prettify.js",
    "src/lib/prettify.css",
    "src/lib/lang-xq.js",
)

# Relative to the archive prefix; consumed by the process runner and resource finalizer
REQUIRED_ENTRIES: tuple[str, ...] = (CALABASH_JAR, PIPELINE_XPL, *STATIC_ASSETS)


def _own_archive() -> Path | None:
    import xqdoc

    loader = getattr(xqdoc.__spec__, "loader", None)
    if isinstance(loader, zipimport.zipimporter):
        return Path(loader.archive)
    return None


def _contains_prefix(archive: Path, prefix: str) -> bool:
    try:
        with zipfile.ZipFile(archive) as zf:
            return any(name.startswith(prefix) for name in zf.namelist())
    except (OSError, zipfile.BadZipFile):
        return False


def _package_archive() -> Path | None:
    resource = files("xqdoc").joinpath(*BUNDLED_ARCHIVE)
    if resource.is_file():
        return Path(str(resource))
    return None


def locate_archive(explicit: Path | None = None) -> Path:
    """Return the archive holding the bundled implementation.

    Args:
        explicit: Archive path that takes precedence over discovery

    Returns:
        Path to a zip archive

    Raises:
        AssetExtractionError: If no archive can be found
    """
    if explicit is not None:
        if not explicit.is_file():
            raise AssetExtractionError(f"Bundled archive not found: {explicit}")
        return explicit

    own = _own_archive()
    if own is not None and _contains_prefix(own, ARCHIVE_PREFIX):
        return own

    packaged = _package_archive()
    if packaged is not None:
        return packaged

    raise AssetExtractionError(
        "Unable to locate the bundled xquerydoc archive; "
        "pass --archive or set XQDOC_ARCHIVE"
    )


def missing_entries(archive: Path, prefix: str = ARCHIVE_PREFIX) -> list[str]:
    """List required implementation entries absent from ``archive``.

    Raises:
        AssetExtractionError: If the archive cannot be read
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            names = set(zf.namelist())
    except (OSError, zipfile.BadZipFile) as e:
        raise AssetExtractionError(f"Unable to read {archive}: {e}") from e
    return [entry for entry in REQUIRED_ENTRIES if prefix + entry not in names]
