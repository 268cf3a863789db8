# Standard library imports
import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Final, Optional

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class TagMap:
    """
    Controller tag ids used by the core.

    Defaults match the standard line configuration. Any subset can be
    overridden from a JSON file whose keys are the field names below.
    """
    # Production cycle / CCD
    cycle_start: int = 10
    ccd_trigger: int = 15
    trigger_ack: int = 16
    code: int = 11
    station_status: int = 12
    value_x: int = 13
    value_y: int = 14
    value_z: int = 17

    # OEE
    cycle_time_a1: int = 21
    cycle_time: int = 22
    cycle_time_b1: int = 23
    uptime: int = 30
    downtime: int = 31
    in_flow: int = 32
    ok_count: int = 33
    ng_count: int = 34

    # Shift reset
    reset: int = 26
    reset_ack: int = 27

    # Heartbeat / time sync
    heartbeat_plc: int = 40
    heartbeat_ipc: int = 41
    time_sync_request: int = 42
    time_sync_ack: int = 43
    time_year: int = 44
    time_month: int = 45
    time_day: int = 46
    time_hour: int = 47
    time_minute: int = 48
    time_second: int = 49

    # External quality interface
    cavity_status: int = 520
    data_ready: int = 521
    external_not_connected: int = 522

    @classmethod
    def from_file(cls, path: Optional[str]) -> "TagMap":
        """
        Build a tag map from defaults, overridden by a JSON file when present.

        Unknown keys and non-integer values are ignored with a warning so a
        bad override never prevents the service from starting.
        """
        tag_map = cls()
        if not path:
            return tag_map

        file_path = Path(path)
        if not file_path.is_file():
            logger.warning(f"Tag map file not found: {file_path}. Using defaults.")
            return tag_map

        try:
            overrides = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read tag map file {file_path}: {e}. Using defaults.")
            return tag_map

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                logger.warning(f"Ignoring unknown tag map key '{key}'")
                continue
            try:
                setattr(tag_map, key, int(value))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring non-integer tag id for '{key}': {value!r}")
        return tag_map


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the inspection core.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Data / configuration files
        self.data_folder: Final[str] = os.getenv("DATA_FOLDER", "Data")
        self.plc_tags_file_name: Final[str] = os.getenv("PLC_TAGS_FILE_NAME", "PLCTags.csv")
        self.servo_positions_file_name: Final[str] = os.getenv(
            "SERVO_POSITIONS_FILE_NAME", "ServoCalibration.json"
        )
        self.shift_file_name: Final[str] = os.getenv("SHIFT_FILE_NAME", "Shifts.csv")
        self.tag_map_file: Final[Optional[str]] = os.getenv("TAG_MAP_FILE") or None

        # Production log
        self.production_log_folder: Final[str] = os.getenv("PRODUCTION_LOG_FOLDER", "ProductionLogs")
        self.production_log_file_name: Final[str] = os.getenv(
            "PRODUCTION_LOG_FILE_NAME", "Production_{%Y%m%d}.csv"
        )

        # CCD / images
        self.temp_image_folder: Final[str] = os.getenv("CCD_TEMP_IMAGE_FOLDER", "CCD/Temp")
        self.ui_image_folder: Final[str] = os.getenv("CCD_UI_IMAGE_FOLDER", "CCD/UI")
        self.base_output_dir: Final[str] = os.getenv("CCD_BASE_OUTPUT_DIR", "CCD/Production")
        self.cycle_state_file_name: Final[str] = os.getenv(
            "CYCLE_STATE_FILE_NAME", "CurrentCycleState.json"
        )
        self.image_poll_interval_seconds: Final[float] = float(
            os.getenv("IMAGE_POLL_INTERVAL_SECONDS", "0.2")
        )
        self.image_wait_timeout_seconds: Final[float] = float(
            os.getenv("IMAGE_WAIT_TIMEOUT_SECONDS", "10")
        )
        self.cycle_reset_delay_seconds: Final[float] = float(
            os.getenv("CYCLE_RESET_DELAY_SECONDS", "1.5")
        )

        # External quality system
        self.external_enabled: Final[bool] = _env_bool("EXTERNAL_ENABLED", "false")
        self.external_protocol: Final[str] = os.getenv("EXTERNAL_PROTOCOL", "http")
        self.external_host: Final[str] = os.getenv("EXTERNAL_HOST", "127.0.0.1")
        self.external_port: Final[Optional[int]] = (
            int(os.getenv("EXTERNAL_PORT")) if os.getenv("EXTERNAL_PORT") else None
        )
        self.external_endpoint: Final[str] = os.getenv("EXTERNAL_ENDPOINT", "/api/sfc")
        self.previous_machine_code: Final[str] = os.getenv("PREVIOUS_MACHINE_CODE", "")
        self.this_machine_code: Final[str] = os.getenv("THIS_MACHINE_CODE", "")
        self.external_http_timeout_seconds: Final[float] = float(
            os.getenv("EXTERNAL_HTTP_TIMEOUT_SECONDS", "5")
        )
        self.external_ping_timeout_ms: Final[int] = int(os.getenv("EXTERNAL_PING_TIMEOUT_MS", "1000"))
        self.external_connect_wait_seconds: Final[float] = float(
            os.getenv("EXTERNAL_CONNECT_WAIT_SECONDS", "8")
        )
        self.external_connect_poll_seconds: Final[float] = float(
            os.getenv("EXTERNAL_CONNECT_POLL_SECONDS", "0.5")
        )
        self.external_monitor_interval_seconds: Final[float] = float(
            os.getenv("EXTERNAL_MONITOR_INTERVAL_SECONDS", "1")
        )
        self.total_items: Final[int] = int(os.getenv("TOTAL_ITEMS", "12"))

        # Heartbeat / time sync
        self.read_timeout_seconds: Final[float] = float(os.getenv("READ_TIMEOUT_SECONDS", "3"))
        self.heartbeat_timeout_seconds: Final[float] = float(
            os.getenv("HEARTBEAT_TIMEOUT_SECONDS", "5")
        )
        self.ipc_toggle_interval_seconds: Final[float] = float(
            os.getenv("IPC_TOGGLE_INTERVAL_SECONDS", "1")
        )
        self.time_sync_settle_seconds: Final[float] = float(
            os.getenv("TIME_SYNC_SETTLE_SECONDS", "0.1")
        )

        # Shift auto-reset
        self.shift_reload_interval_seconds: Final[float] = float(
            os.getenv("SHIFT_RELOAD_INTERVAL_SECONDS", "60")
        )
        self.reset_ack_timeout_seconds: Final[float] = float(
            os.getenv("RESET_ACK_TIMEOUT_SECONDS", "5")
        )

        # OEE
        self.ideal_cycle_time_seconds: Final[float] = float(os.getenv("IDEAL_CYCLE_TIME_SECONDS", "0"))

        # Runtime
        self.poll_interval_seconds: Final[float] = float(os.getenv("POLL_INTERVAL_SECONDS", "0.1"))
        self.local_timezone: Final[str] = os.getenv("LOCAL_TIMEZONE", "UTC")
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO")

        self.tag_map: TagMap = TagMap.from_file(self.tag_map_file)

    def data_file(self, file_name: str) -> Path:
        """Resolve a configuration file name inside the data folder."""
        return Path(self.data_folder) / file_name


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
