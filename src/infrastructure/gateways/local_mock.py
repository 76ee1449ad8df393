from typing import Any, List, Optional, Tuple

from src.core.errors import UpstreamError
from src.core.interfaces.datasource import IActivitySource
from src.core.entities.activity import TradeRecord

class LocalMockActivitySource(IActivitySource):
    """
    In-memory activity source for offline runs and tests.
    Serves `records` sliced by offset/limit, like the real API, and keeps
    a log of every (user, limit, offset) request.
    """

    def __init__(
        self,
        records: Optional[List[TradeRecord]] = None,
        pages: Optional[List[Any]] = None,
        fail_at: Optional[int] = None,
        status_code: int = 500
    ):
        # `pages` replays fixed responses in order instead of slicing `records`
        self.records = records or []
        self.pages = pages
        self.fail_at = fail_at
        self.status_code = status_code
        self.calls: List[Tuple[str, int, int]] = []

    async def get_activity_page(self, user: str, limit: int, offset: int) -> Any:
        index = len(self.calls)
        self.calls.append((user, limit, offset))

        if self.fail_at is not None and index >= self.fail_at:
            raise UpstreamError(
                f"Activity API request failed: {self.status_code}",
                status_code=self.status_code
            )

        if self.pages is not None:
            return self.pages[index] if index < len(self.pages) else []

        return [dict(r) for r in self.records[offset:offset + limit]]
