import logging
from typing import Any, Optional

import httpx

from src.core.config import DEFAULT_API_BASE
from src.core.errors import UpstreamError
from src.core.interfaces.datasource import IActivitySource

logger = logging.getLogger(__name__)

class PolymarketDataGateway(IActivitySource):
    """
    Implementation of IActivitySource for the public Polymarket data API.
    One GET per page against `<base>/activity`; no retries.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        :param base_url: API root, without the `/activity` path.
        :param timeout: Transport timeout in seconds, ignored when `client` is given.
        :param client: Pre-built client (tests inject one with a MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        logger.info(f"PolymarketDataGateway initialized. URL: {self.base_url}")

    async def get_activity_page(self, user: str, limit: int, offset: int) -> Any:
        url = f"{self.base_url}/activity"
        params = {"user": user, "limit": limit, "offset": offset}

        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Activity request failed: {e}") from e

        if not response.is_success:
            raise UpstreamError(
                f"Activity API request failed: {response.status_code}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Activity API returned invalid JSON: {e}") from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
