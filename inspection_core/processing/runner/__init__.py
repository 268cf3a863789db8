from .line_runtime import LineRuntime

__all__ = ["LineRuntime"]
