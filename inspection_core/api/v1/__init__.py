from .line_controller import router as line_router


__all__ = ["line_router"]
