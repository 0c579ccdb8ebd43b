from __future__ import annotations

"""
FileSystem Helpers.

Path utilities used by the file destination.
"""

import os

# -----------------------------------------------------------------------------
# PATH API
# -----------------------------------------------------------------------------

def ensure_parent_dir(path: str) -> None:
    """
    Create the parent directory hierarchy of a target file.

    Args:
        path: Path to the target file.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)


def has_content(path: str) -> bool:
    """Check whether path is an existing, non-empty regular file."""
    try:
        return os.path.isfile(path) and os.path.getsize(path) > 0
    except OSError:
        return False
