"""Extraction of the bundled xquerydoc implementation."""

from __future__ import annotations

import logging
import shutil
import zipfile
import zlib
from pathlib import Path, PurePosixPath

ARCHIVE_PREFIX = "xquerydoc/"

logger = logging.getLogger(__name__)


class AssetExtractionError(RuntimeError):
    """Raised when the bundled archive or one of its entries cannot be read."""


def _destination(target: Path, relative_name: str) -> Path:
    relative = PurePosixPath(relative_name)
    if relative.is_absolute() or ".." in relative.parts:
        raise AssetExtractionError(f"Refusing archive entry outside target: {relative_name}")
    return target.joinpath(*relative.parts)


def extract_assets(archive: Path, target: Path, prefix: str = ARCHIVE_PREFIX) -> list[Path]:
    """Extract every file entry under ``prefix`` into ``target``.

    The prefix is stripped from entry names, so ``xquerydoc/xpl/main.xpl``
    lands at ``target/xpl/main.xpl``. Directory entries are skipped and parent
    directories are created on demand. Existing files are overwritten; the
    target is not cleared first.

    Args:
        archive: Zip archive holding the bundled implementation
        target: Directory to extract into
        prefix: Entry name prefix selecting the implementation files

    Returns:
        Extracted file paths, in archive entry order

    Raises:
        AssetExtractionError: If the archive or an entry cannot be read or written
    """
    extracted: list[Path] = []
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if info.is_dir() or not info.filename.startswith(prefix):
                    continue
                relative_name = info.filename[len(prefix):]
                # the prefix directory itself
                if not relative_name:
                    continue
                output = _destination(target, relative_name)
                output.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(output, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                extracted.append(output)
    except AssetExtractionError:
        raise
    except (OSError, EOFError, zlib.error, zipfile.BadZipFile) as e:
        raise AssetExtractionError(f"Unable to extract {prefix} from {archive}: {e}") from e

    logger.debug("Extracted %d implementation files to %s", len(extracted), target)
    return extracted
