from .heartbeat_monitor import HeartbeatMonitor
from .time_sync import TimeSyncService

__all__ = ["HeartbeatMonitor", "TimeSyncService"]
