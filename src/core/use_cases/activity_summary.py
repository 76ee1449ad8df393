from datetime import datetime
from typing import Any, List, Sequence

from src.core.entities.activity import ActivitySummary, PreviewRow, TradeRecord

PREVIEW_PAGE = 20
TITLE_WIDTH = 30
EVENT_URL = "https://polymarket.com/event/{slug}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def summarize(records: Sequence[TradeRecord]) -> ActivitySummary:
    volume = sum(r.get("usdcSize") for r in records if _is_number(r.get("usdcSize")))
    timestamps = [r["timestamp"] for r in records if _is_number(r.get("timestamp"))]

    return ActivitySummary(
        record_count=len(records),
        total_volume=float(volume),
        start_timestamp=int(min(timestamps)) if timestamps else None,
        end_timestamp=int(max(timestamps)) if timestamps else None
    )


def format_timestamp(timestamp: Any) -> str:
    if not _is_number(timestamp):
        return "-"
    try:
        moment = datetime.fromtimestamp(timestamp)
    except (OverflowError, OSError, ValueError):
        return "-"
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def _fixed(value: Any, prefix: str = "") -> str:
    if not _is_number(value):
        return "-"
    return f"{prefix}{value:.2f}"


def preview_rows(records: Sequence[TradeRecord], limit: int = PREVIEW_PAGE) -> List[PreviewRow]:
    rows = []
    for r in records[:max(limit, 0)]:
        title = r.get("title") or "-"
        short_title = title[:TITLE_WIDTH] + "..." if len(title) > TITLE_WIDTH else title
        event_slug = r.get("eventSlug")

        rows.append(PreviewRow(
            time=format_timestamp(r.get("timestamp")),
            title=short_title,
            event_url=EVENT_URL.format(slug=event_slug) if event_slug else "#",
            side=r.get("side") or "-",
            outcome=r.get("outcome") or "-",
            size=_fixed(r.get("size")),
            price=_fixed(r.get("price")),
            usdc=_fixed(r.get("usdcSize"), prefix="$")
        ))
    return rows
