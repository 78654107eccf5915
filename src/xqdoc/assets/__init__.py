"""Bundled xquerydoc implementation assets."""

from xqdoc.assets.extractor import ARCHIVE_PREFIX, AssetExtractionError, extract_assets
from xqdoc.assets.locator import REQUIRED_ENTRIES, locate_archive, missing_entries

__all__ = [
    "ARCHIVE_PREFIX",
    "AssetExtractionError",
    "REQUIRED_ENTRIES",
    "extract_assets",
    "locate_archive",
    "missing_entries",
]
