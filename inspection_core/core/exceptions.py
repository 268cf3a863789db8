"""
Custom exception hierarchy for the inspection core.

Raised inside collaborators and engines, caught at every per-tick entry point
and background-task boundary. Nothing here is allowed to reach the poll loop.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class InspectionCoreError(Exception):
    """Base exception for all inspection core errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


class ConfigurationError(InspectionCoreError):
    """Raised when a configuration source is missing or cannot be parsed."""
    pass


# -----------------------------------------------------------------------------
# Controller I/O
# -----------------------------------------------------------------------------


class TagWriteError(InspectionCoreError):
    """Raised when a tag cannot be resolved or the controller rejects a write."""

    def __init__(
        self,
        message: str,
        tag_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.tag_id = tag_id


class ImageNotFoundError(InspectionCoreError):
    """Raised when no ready image appears in the drop folder before the deadline."""
    pass


class ImageHandoffError(InspectionCoreError):
    """Raised when a ready image cannot be moved out of the drop folder."""
    pass


# -----------------------------------------------------------------------------
# External quality system
# -----------------------------------------------------------------------------


class ExternalSyncError(InspectionCoreError):
    """Raised when the external quality system cannot be queried."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
