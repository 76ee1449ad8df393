from pydantic import BaseModel, Field
from typing import List, Optional

from src.core.entities.activity import TradeRecord


class FetchSession(BaseModel):
    """
    State of one fetch invocation.
    Created per request or per CLI run, never shared or persisted.
    """
    wallet_address: str
    target_limit: int = 100
    accumulated: List[TradeRecord] = Field(default_factory=list)
    offset: int = 0
    has_more: bool = True
    pages_requested: int = 0
    error: Optional[str] = None

    @property
    def partial(self) -> bool:
        # Upstream failed before the target or end of data was reached
        return self.error is not None
