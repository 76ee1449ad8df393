from abc import ABC, abstractmethod
from typing import Any

class IActivitySource(ABC):
    @abstractmethod
    async def get_activity_page(
        self,
        user: str,
        limit: int,
        offset: int
    ) -> Any:
        """
        Returns the decoded body of one activity page.
        A list of trade records on success; anything else is treated as
        end of data by the fetcher. Raises UpstreamError on a non-success
        status or transport failure.
        """
        pass

    async def aclose(self) -> None:
        """Release transport resources, if any."""
        return None
