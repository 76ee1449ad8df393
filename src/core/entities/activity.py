from pydantic import BaseModel
from typing import Any, Dict, Optional

# Activity records are opaque upstream objects; key order is kept as received.
TradeRecord = Dict[str, Any]


class ActivitySummary(BaseModel):
    """
    Aggregate view of a fetched record set.
    Timestamps are Unix seconds; None when no record carries one.
    """
    record_count: int
    total_volume: float
    start_timestamp: Optional[int] = None
    end_timestamp: Optional[int] = None


class PreviewRow(BaseModel):
    time: str
    title: str
    event_url: str
    side: str
    outcome: str
    size: str
    price: str
    usdc: str


class ExportFile(BaseModel):
    filename: str
    media_type: str
    content: str

    class Config:
        json_schema_extra = {
            "example": {
                "filename": "pm_0x31ca8395cf837de08b24da3f660e77761dfb974b_2.json",
                "media_type": "application/json",
                "content": "[]"
            }
        }
