import csv
import io
import json
from datetime import datetime, timezone
from typing import Any, List, Sequence

from src.core.entities.activity import ExportFile, TradeRecord

CSV_COLUMNS = [
    "timestamp", "datetime", "type", "title", "slug", "side", "outcome",
    "size", "price", "usdcSize", "transactionHash", "conditionId"
]

MEDIA_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
}


def export_filename(address: str, record_count: int, ext: str) -> str:
    return f"pm_{address}_{record_count}.{ext}"


def iso_datetime(timestamp: Any) -> str:
    """Unix seconds -> `YYYY-MM-DDTHH:MM:SS.mmmZ`; empty for missing or non-numeric values."""
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return ""
    try:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return ""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    return value


def to_csv(records: Sequence[TradeRecord]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)

    for r in records:
        writer.writerow([
            _cell(r.get("timestamp")),
            iso_datetime(r.get("timestamp")),
            _cell(r.get("type")),
            _cell(r.get("title")),
            _cell(r.get("slug")),
            _cell(r.get("side")),
            _cell(r.get("outcome")),
            _cell(r.get("size")),
            _cell(r.get("price")),
            _cell(r.get("usdcSize")),
            _cell(r.get("transactionHash")),
            _cell(r.get("conditionId")),
        ])

    # No trailing newline after the last row
    return buffer.getvalue().rstrip("\n")


def to_json(records: Sequence[TradeRecord]) -> str:
    return json.dumps(list(records), indent=2, ensure_ascii=False)


def build_export(records: List[TradeRecord], address: str, fmt: str = "json") -> ExportFile:
    """Renders normalized records as a downloadable file (`csv` or `json`)."""
    fmt = fmt.lower()
    if fmt == "csv":
        content = to_csv(records)
    elif fmt == "json":
        content = to_json(records)
    else:
        raise ValueError(f"Unsupported export format: {fmt}")

    return ExportFile(
        filename=export_filename(address, len(records), fmt),
        media_type=MEDIA_TYPES[fmt],
        content=content
    )
