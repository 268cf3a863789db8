# Standard library imports
import asyncio
import logging
import platform

logger = logging.getLogger(__name__)


class HostProbe:
    """Reachability check for the external quality host using the system ping."""

    def __init__(self, host: str, timeout_ms: int = 1000):
        self.host = host
        self.timeout_ms = timeout_ms

    def _command(self) -> list[str]:
        if platform.system().lower() == "windows":
            return ["ping", "-n", "1", "-w", str(self.timeout_ms), self.host]
        seconds = max(1, int(round(self.timeout_ms / 1000)))
        return ["ping", "-c", "1", "-W", str(seconds), self.host]

    async def ping(self) -> bool:
        """Return True when the host answers one echo request before the timeout."""
        process = await asyncio.create_subprocess_exec(
            *self._command(),
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            return_code = await asyncio.wait_for(
                process.wait(), timeout=self.timeout_ms / 1000 + 1
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.debug(f"Ping to {self.host} timed out")
            return False
        return return_code == 0
