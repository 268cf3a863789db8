from .oee_calculator import compute_oee
from .oee_engine import OeeEngine

__all__ = ["compute_oee", "OeeEngine"]
