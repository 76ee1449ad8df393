import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Optional

from src.core.entities.session import FetchSession
from src.core.errors import UpstreamError
from src.core.interfaces.datasource import IActivitySource

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
DEFAULT_LIMIT = 100

ProgressCallback = Callable[[FetchSession, int], None]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_target_limit(raw: Any, default: int = DEFAULT_LIMIT) -> int:
    """
    Reads a leading integer ("250", " 50abc") from user input.
    Absent or non-numeric values give `default`.
    """
    if raw is None:
        return default
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    match = _LEADING_INT.match(str(raw))
    if not match:
        return default
    return int(match.group(1))


async def fetch_activity(
    session: FetchSession,
    source: IActivitySource,
    page_size: int = PAGE_SIZE,
    throttle_seconds: float = 0.0,
    on_page: Optional[ProgressCallback] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
) -> FetchSession:
    """
    Fills `session.accumulated` page by page until the target limit is reached
    or the API signals end of data (empty, malformed or short page).

    A failing page raises UpstreamError with the records collected so far;
    the session keeps them too, with `session.error` set.
    """
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    session.offset = 0
    session.has_more = session.target_limit > 0

    while session.has_more and len(session.accumulated) < session.target_limit:
        batch_size = min(page_size, session.target_limit - len(session.accumulated))
        logger.info(
            f"Requesting page {session.pages_requested + 1} for {session.wallet_address} "
            f"(offset={session.offset}, limit={batch_size})"
        )

        session.pages_requested += 1
        try:
            page = await source.get_activity_page(session.wallet_address, batch_size, session.offset)
        except UpstreamError as e:
            session.error = str(e)
            session.has_more = False
            e.records = list(session.accumulated)
            logger.error(
                f"Fetch aborted for {session.wallet_address} after "
                f"{len(session.accumulated)} records: {e}"
            )
            raise

        if not isinstance(page, list) or len(page) == 0:
            logger.info("All available data fetched")
            session.has_more = False
            break

        # The API never pads pages; an oversized one is cut to the request
        received = page[:batch_size]
        session.accumulated.extend(received)
        logger.info(f"Got {len(received)} records, total: {len(session.accumulated)}")

        if len(page) < batch_size:
            session.has_more = False
        else:
            session.offset += batch_size

        if on_page is not None:
            on_page(session, len(received))

        if session.has_more and throttle_seconds > 0 and len(session.accumulated) < session.target_limit:
            await sleep(throttle_seconds)

    return session
