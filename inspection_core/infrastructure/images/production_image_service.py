# Standard library imports
import asyncio
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

# Local application imports
from ...core.exceptions import ImageHandoffError
from ...utils.datetime_utils import now

logger = logging.getLogger(__name__)


class ProductionImageService:
    """
    Moves a captured image out of the drop folder.

    The raw image is copied to `<base>/<code>_<dd-MM-yyyy>/` and to the UI
    folder, then the temp file is deleted. The UI copy path is returned; a
    vanished source or a failed copy raises `ImageHandoffError`.
    """

    def __init__(
        self,
        base_output_dir: Path,
        ui_folder: Path,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.base_output_dir = Path(base_output_dir)
        self.ui_folder = Path(ui_folder)
        self._clock = clock or now

    async def process_and_move(self, temp_path: Path, code: str, station_number: int) -> str:
        return await asyncio.to_thread(self._process_and_move, Path(temp_path), code, station_number)

    def build_names(self, code: str, station_number: int, moment: datetime) -> tuple[str, str]:
        """Return (batch folder name, raw file name)."""
        folder_name = f"{code}_{moment.strftime('%d-%m-%Y')}".replace("\0", "_")
        time_str = moment.strftime("%H-%M-%S-") + f"{moment.microsecond // 1000:03d}"
        return folder_name, f"{station_number}_{folder_name}_{time_str}_raw.bmp"

    def _process_and_move(self, temp_path: Path, code: str, station_number: int) -> str:
        if not temp_path.is_file():
            raise ImageHandoffError(f"Source image not found: {temp_path}")

        try:
            folder_name, file_name = self.build_names(code, station_number, self._clock())
            target_folder = self.base_output_dir / folder_name
            target_folder.mkdir(parents=True, exist_ok=True)
            self.ui_folder.mkdir(parents=True, exist_ok=True)

            raw_path = target_folder / file_name
            ui_path = self.ui_folder / file_name
            shutil.copyfile(temp_path, raw_path)
            shutil.copyfile(temp_path, ui_path)
            logger.info(f"Raw image saved: {raw_path}")
        except OSError as e:
            raise ImageHandoffError(
                f"Image hand-off failed for station {station_number}: {e}",
                details={"source": str(temp_path)},
            ) from e

        try:
            temp_path.unlink()
        except OSError as e:
            logger.warning(f"Could not delete temp image {temp_path}: {e}")

        return str(ui_path)
