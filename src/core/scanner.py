"""
Directory discovery for HEIC source files.

The scan is an inventory, not a validation: unreadable entries are skipped
and the full candidate list is built before any conversion starts so the
total is known up front.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import SOURCE_EXTENSION
from .conversion_job import FileCandidate
from .errors import ScanAccessError

logger = logging.getLogger(__name__)


def is_candidate(path: Path | str) -> bool:
    """
    Check whether a file name matches the source format.

    Args:
        path: File path or name

    Returns:
        True if the extension equals ``heic`` ignoring case
    """
    suffix = Path(path).suffix
    return suffix[1:].lower() == SOURCE_EXTENSION if suffix else False


def scan_for_candidates(input_root: Path | str) -> list[FileCandidate]:
    """
    Recursively collect every HEIC file under ``input_root``.

    Symbolic links are followed and mount points are crossed. Order is
    deterministic: a directory's files come first in ascending name order,
    then its subdirectories are walked in ascending name order. A link back
    to one of the directories above it is not followed, which ends symlink
    loops; any other link is walked under its own path.

    Args:
        input_root: Folder to scan

    Returns:
        Absolute candidate paths in scan order; empty if the root is unusable
    """
    root = Path(os.path.abspath(input_root))
    candidates: list[FileCandidate] = []
    # (st_dev, st_ino) of every directory from the root down to the one being walked
    ancestors: dict[str, frozenset[tuple[int, int]]] = {}

    def on_error(error: OSError) -> None:
        _skip(error.filename or root, error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=True):
        chain = ancestors.pop(dirpath, frozenset())
        try:
            stat = os.stat(dirpath)
        except OSError as e:
            _skip(dirpath, e)
            dirnames[:] = []
            continue

        key = (stat.st_dev, stat.st_ino)
        if key in chain:
            logger.debug(f"Skipping symlink loop at {dirpath}")
            dirnames[:] = []
            continue
        chain = chain | {key}

        # Sorting in place fixes the descent order of os.walk
        dirnames.sort()
        for name in dirnames:
            ancestors[os.path.join(dirpath, name)] = chain

        for name in sorted(filenames):
            if not is_candidate(name):
                continue
            path = Path(dirpath) / name
            try:
                regular = path.is_file()
            except OSError as e:
                _skip(path, e)
                continue
            if not regular:
                # Broken symlink or special file
                _skip(path, None)
                continue
            candidates.append(FileCandidate(path))

    logger.info(f"Found {len(candidates)} {SOURCE_EXTENSION} files under {root}")
    return candidates


def _skip(path: Path | str, error: OSError | None) -> None:
    skipped = ScanAccessError(path, technical_message=str(error) if error else "not a regular file")
    logger.debug(f"{skipped.user_message} ({skipped.technical_message}), skipping")
