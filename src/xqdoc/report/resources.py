"""Copy of the static assets referenced by the generated report."""

from __future__ import annotations

import shutil
from pathlib import Path

from xqdoc.assets.locator import STATIC_ASSETS

LIB_DIRNAME = "lib"


class ResourceCopyError(RuntimeError):
    """Raised when a static asset cannot be copied next to the report."""


def copy_resources(implementation_folder: Path, output_folder: Path) -> list[Path]:
    """Copy prettify and the XQuery language handler into ``output_folder/lib``.

    Returns:
        Destination paths of the copied files

    Raises:
        ResourceCopyError: If a source is missing or a destination cannot be written
    """
    lib = output_folder / LIB_DIRNAME
    copied: list[Path] = []
    try:
        lib.mkdir(parents=True, exist_ok=True)
        for asset in STATIC_ASSETS:
            source = implementation_folder.joinpath(*asset.split("/"))
            destination = lib / source.name
            shutil.copyfile(source, destination)
            copied.append(destination)
    except OSError as e:
        raise ResourceCopyError(f"Unable to copy report resources to {lib}: {e}") from e
    return copied
