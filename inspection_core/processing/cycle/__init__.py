from .cycle_workflow import CycleWorkflow
from .cycle_engine import ProductionCycleEngine

__all__ = ["CycleWorkflow", "ProductionCycleEngine"]
