from .shift_auto_reset import ShiftAutoReset

__all__ = ["ShiftAutoReset"]
