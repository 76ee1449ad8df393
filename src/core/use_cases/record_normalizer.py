from typing import Iterable, List

from src.core.entities.activity import TradeRecord


def normalize_record(record: TradeRecord, denylist: Iterable[str]) -> TradeRecord:
    """Shallow copy of `record` without the denylisted keys. Values are untouched."""
    removed = set(denylist)
    return {key: value for key, value in record.items() if key not in removed}


def normalize_records(records: Iterable[TradeRecord], denylist: Iterable[str]) -> List[TradeRecord]:
    removed = list(denylist)
    return [normalize_record(r, removed) for r in records]
