# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Optional
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI

# Local application imports
from .api.v1 import line_router
from .core.config import get_settings
from .di.container import get_container
from .infrastructure.http_client_factory import close_shared_http_client
from .processing.runner import LineRuntime

logger = logging.getLogger(__name__)

# Global instances
_runtime: Optional[LineRuntime] = None


def configure_logging(level_name: str) -> None:
    """Configure the root logger once; repeated calls only adjust the level."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    root.setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Builds the engines, starts the tag writer, the external connection
    monitor and the poll loop, and stops them again on shutdown.
    """
    global _runtime

    try:
        _runtime = get_container().get(LineRuntime)
        await _runtime.start()
        logger.info("Line runtime started during application startup")
    except Exception as e:
        logger.error(f"Failed to start line runtime: {e}", exc_info=True)
        _runtime = None

    yield

    if _runtime:
        try:
            await _runtime.stop()
            logger.info("Line runtime stopped during application shutdown")
        except Exception as e:
            logger.error(f"Error stopping line runtime: {e}", exc_info=True)

    try:
        await close_shared_http_client()
    except Exception as e:
        logger.error(f"Error closing shared HTTP client: {e}", exc_info=True)

    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - Logging configuration
    - API route registration

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    configure_logging(get_settings().log_level)

    application = FastAPI(
        title="Inspection Core API",
        version="1.0.0",
        description="Tag-driven orchestration core for the multi-station inspection line",
        lifespan=lifespan,
    )

    application.include_router(line_router, prefix="/api/v1/line")

    return application


# Create application instance
app = create_application()
