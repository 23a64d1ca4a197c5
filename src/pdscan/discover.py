"""Patch file discovery.

Expands a list of command-line paths into the .pd files to scan: files are
taken as given, directories are searched for .pd files.
"""

import os
from typing import List, Sequence

PATCH_EXTENSION = ".pd"


def _scan_directory(directory: str, recursive: bool) -> List[str]:
    """Return the .pd files in a directory, sorted by path."""
    found: List[str] = []
    if recursive:
        for root, dirs, files in os.walk(directory):
            dirs.sort()
            for entry in sorted(files):
                if entry.endswith(PATCH_EXTENSION):
                    found.append(os.path.join(root, entry))
        return found

    for entry in sorted(os.listdir(directory)):
        full_path = os.path.join(directory, entry)
        if entry.endswith(PATCH_EXTENSION) and os.path.isfile(full_path):
            found.append(full_path)
    return found


def find_patches(paths: Sequence[str], *, recursive: bool = True) -> List[str]:
    """Expand files and directories into a list of patch files.

    Parameters
    ----------
    paths : sequence of str
        Files or directories, in the order to process them.
    recursive : bool
        Whether to descend into subdirectories (default True).

    Returns
    -------
    list of str
        Patch file paths in order. Paths that are not directories are kept
        as given, including ones that do not exist, so that the caller can
        report them. A file reached twice is listed once.
    """
    result: List[str] = []
    seen = set()
    for path in paths:
        if os.path.isdir(path):
            candidates = _scan_directory(path, recursive)
        else:
            candidates = [path]
        for candidate in candidates:
            key = os.path.normpath(candidate)
            if key not in seen:
                seen.add(key)
                result.append(candidate)
    return result
