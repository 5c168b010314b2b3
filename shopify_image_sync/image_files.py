"""
Local image discovery.

Each regular file in the image directory becomes an ImageFile whose handle
is the file name without its extension. The handle is matched against
Shopify product handles, so ``blue-shirt.jpg`` targets the product
``blue-shirt``.
"""

import logging
import mimetypes
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .errors import DirectoryUnreadable

DEFAULT_MIME_TYPE = 'image/jpeg'

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageFile:
    """A local image ready to be pushed to Shopify."""
    path: Path
    size: int
    mime_type: str
    handle: str

    @property
    def name(self) -> str:
        return self.path.name


def derive_handle(filename: str) -> str:
    """Strip the final extension from a file name, preserving case."""
    return os.path.splitext(os.path.basename(filename))[0]


def guess_mime_type(filename: str) -> str:
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_MIME_TYPE


def list_image_files(directory: Union[str, Path]) -> List[ImageFile]:
    """
    List candidate image files in a directory (not recursive).

    Sub-directories, hidden files and entries whose metadata cannot be read
    are skipped. Entries are returned sorted by name.

    Raises:
        DirectoryUnreadable: if the path is missing, not a directory, or cannot be listed.
    """
    root = Path(directory)
    if not root.exists():
        raise DirectoryUnreadable(str(root), 'path does not exist')
    if not root.is_dir():
        raise DirectoryUnreadable(str(root), 'path is not a directory')

    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as e:
        raise DirectoryUnreadable(str(root), str(e))

    images = []
    for entry in entries:
        if entry.name.startswith('.'):
            logger.info(f"Skipping hidden file: {entry.name}")
            continue
        try:
            info = entry.stat()
        except OSError as e:
            # removed or unreadable since the directory was listed
            logger.warning(f"Skipping {entry.name}: {e}")
            continue
        if not stat.S_ISREG(info.st_mode):
            logger.debug(f"Skipping non-file entry: {entry.name}")
            continue

        images.append(ImageFile(
            path=entry,
            size=info.st_size,
            mime_type=guess_mime_type(entry.name),
            handle=derive_handle(entry.name)
        ))

    logger.debug(f"list_image_files: dir={root} count={len(images)}")
    return images
