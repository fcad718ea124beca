"""
Copies company logo files into the served assets directory.
"""

import shutil
from pathlib import Path

from loguru import logger


def sync_logos(source_dir: Path, dest_dir: Path) -> int:
    """
    Copy every file from source_dir into dest_dir, overwriting same-named files.

    Args:
        source_dir: Directory of logo images named as in the ``logo`` metadata field
        dest_dir: Served logos directory (created if missing)

    Returns:
        Number of files copied; 0 when the source directory does not exist
    """
    dest_dir.mkdir(parents=True, exist_ok=True)

    if not source_dir.is_dir():
        logger.warning(f"Logos source folder not found: {source_dir}")
        return 0

    copied = 0
    for logo in sorted(source_dir.iterdir()):
        if not logo.is_file():
            continue
        shutil.copyfile(logo, dest_dir / logo.name)
        copied += 1

    logger.info(f"Copied {copied} logos to {dest_dir}")
    return copied
