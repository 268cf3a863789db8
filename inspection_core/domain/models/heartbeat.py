# Standard library imports
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class HeartbeatState:
    """Liveness bookkeeping for the controller pulse and the local IPC pulse."""
    last_plc_value: Optional[Any] = None
    last_plc_change: Optional[float] = None
    last_read: Optional[float] = None
    ipc_value: bool = False
    last_ipc_toggle: Optional[float] = None
    connected: bool = False
