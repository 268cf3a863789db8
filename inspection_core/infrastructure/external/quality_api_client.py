# Standard library imports
import logging
from typing import Optional

# External package imports
import httpx

# Local application imports
from ...core.config import get_settings

logger = logging.getLogger(__name__)

QUERY_COMMAND = "QUERY_4_SFC"
QUERY_SUBCOMMAND = "carrier_query"


class QualityApiClient:
    """
    HTTP client for the external quality (SFC) system.

    One GET per carrier returns a plain-text verdict list of the form
    `<id>.<serial>,<STATUS>;...`. The client never raises: transport errors
    and non-success statuses are logged and reported as None.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or self.build_base_url(
            settings.external_protocol, settings.external_host, settings.external_port
        )
        self.endpoint = endpoint if endpoint is not None else settings.external_endpoint
        self.timeout = timeout if timeout is not None else settings.external_http_timeout_seconds
        self._http_client = http_client

    @staticmethod
    def build_base_url(protocol: str, host: str, port: Optional[int] = None) -> str:
        scheme = "http" if (protocol or "").lower() == "http" else "https"
        netloc = f"{host}:{port}" if port else host
        return f"{scheme}://{netloc}"

    @property
    def url(self) -> str:
        path = self.endpoint if self.endpoint.startswith("/") else f"/{self.endpoint}"
        return f"{self.base_url.rstrip('/')}{path}"

    @staticmethod
    def build_query(carrier_sn: str, previous_machine: str, this_machine: str) -> dict[str, str]:
        return {
            "c": QUERY_COMMAND,
            "subcmd": QUERY_SUBCOMMAND,
            "carrier_sn": carrier_sn,
            "station_code": previous_machine,
            "station_id": this_machine,
        }

    async def fetch_carrier_status(
        self,
        carrier_sn: str,
        previous_machine: str,
        this_machine: str,
    ) -> Optional[str]:
        """
        Query the verdict list for one carrier.

        Args:
            carrier_sn: Carrier / QR code of the part
            previous_machine: Code of the upstream machine
            this_machine: Code of this inspection machine

        Returns:
            Raw response body, or None on any failure
        """
        params = self.build_query(carrier_sn, previous_machine, this_machine)
        try:
            if self._http_client is not None:
                response = await self._http_client.get(self.url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url, params=params)
            response.raise_for_status()
            return response.text
        except httpx.TimeoutException:
            logger.error(f"Timeout querying external quality system for carrier {carrier_sn}")
            return None
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error querying external quality system for carrier {carrier_sn}: "
                f"{e.response.status_code}"
            )
            return None
        except Exception as e:
            logger.error(
                f"Unexpected error querying external quality system for carrier {carrier_sn}: {e}",
                exc_info=True,
            )
            return None
