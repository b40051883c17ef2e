"""Project root discovery."""

from pathlib import Path

from schemadoc.exceptions import RootNotFoundError
from schemadoc.settings import settings


def find_project_root(start: Path | None = None, marker: str | None = None) -> Path:
    """Return the nearest directory at or above ``start`` containing the marker file.

    ``start`` defaults to the working directory and ``marker`` to
    ``settings.root_marker``. A directory named like the marker does not count.

    Raises:
        RootNotFoundError: no marker file up to the filesystem root.
    """
    marker = marker or settings.root_marker
    start = (start or Path.cwd()).resolve()
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        if (candidate / marker).is_file():
            return candidate
    raise RootNotFoundError(start, marker)
