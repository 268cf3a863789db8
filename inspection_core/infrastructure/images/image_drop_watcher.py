# Standard library imports
import asyncio
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _is_ready(path: Path) -> bool:
    """
    A file is ready when it can be opened for reading and is not empty.

    Exclusive read is not expressible portably; a file the camera is still
    writing either fails to open or still reports zero length.
    """
    try:
        with open(path, "rb") as handle:
            handle.seek(0, 2)
            return handle.tell() > 0
    except OSError:
        return False


def find_newest_ready_image(folder: Path, pattern: str = "*.bmp") -> Optional[Path]:
    """Return the newest-by-write-time image in the folder if it is ready."""
    newest: Optional[Path] = None
    newest_mtime = float("-inf")
    for candidate in folder.glob(pattern):
        try:
            mtime = candidate.stat().st_mtime
        except OSError:
            continue
        if candidate.is_file() and mtime > newest_mtime:
            newest, newest_mtime = candidate, mtime
    if newest is not None and _is_ready(newest):
        return newest
    return None


class ImageDropWatcher:
    """
    Waits for the camera to drop a new image into the temp folder.

    Polls at a fixed cadence up to a deadline. A missing drop folder or the
    deadline passing both yield None.
    """

    def __init__(
        self,
        folder: Path,
        poll_interval: float = 0.2,
        timeout: float = 10.0,
        pattern: str = "*.bmp",
    ):
        self.folder = Path(folder)
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.pattern = pattern

    async def wait_for_image(self) -> Optional[Path]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        while loop.time() < deadline:
            if not self.folder.is_dir():
                logger.error(f"Image drop folder does not exist: {self.folder}")
                return None
            image = await asyncio.to_thread(find_newest_ready_image, self.folder, self.pattern)
            if image is not None:
                return image
            await asyncio.sleep(self.poll_interval)
        logger.error(f"No image appeared in {self.folder} within {self.timeout:.1f}s")
        return None
