"""
Controller gateway registry
---------------------------

Single place to get/set the controller transport.

- The host application registers its gateway once at startup.
- The tag writer and the poll loop look it up on every use, so a gateway
  registered after the runtime has started is picked up without a restart.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Optional

# -----------------------------------------------------------------------------
# Local application imports
# -----------------------------------------------------------------------------
from ...domain.repositories.controller_gateway import ControllerGateway

_gateway: Optional[ControllerGateway] = None


def set_controller_gateway(gateway: Optional[ControllerGateway]) -> None:
    """Register (or clear, with None) the controller gateway."""
    global _gateway
    _gateway = gateway


def get_controller_gateway() -> Optional[ControllerGateway]:
    """Return the registered gateway, or None if none is registered yet."""
    return _gateway
