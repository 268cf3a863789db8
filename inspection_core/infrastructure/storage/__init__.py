from .cycle_state_store import CycleStateStore
from .production_log_csv import CsvProductionLog

__all__ = ["CycleStateStore", "CsvProductionLog"]
