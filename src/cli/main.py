"""
Interactive command-line client.

Fetches a wallet's activity with a flat delay between pages, logs progress,
prints a summary and a growing preview table, and saves CSV/JSON exports
to a local directory.

Usage:
    pm-export https://polymarket.com/profile/0x... --limit 500 --csv --json
    pm-export --interactive
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from src.core.config import Settings, get_settings, setup_logging
from src.core.entities.session import FetchSession
from src.core.errors import AddressNotFound, UpstreamError
from src.core.interfaces.datasource import IActivitySource
from src.core.use_cases.activity_summary import (
    PREVIEW_PAGE, format_timestamp, preview_rows, summarize
)
from src.core.use_cases.address_extractor import extract_wallet_address
from src.core.use_cases.exporter import build_export
from src.core.use_cases.paginated_fetcher import fetch_activity, parse_target_limit
from src.core.use_cases.record_normalizer import normalize_records
from src.infrastructure.gateways.polymarket_data_api import PolymarketDataGateway

logger = logging.getLogger("TradeExport")

PREVIEW_HEADERS = ["Time", "Market", "Side", "Outcome", "Size", "Price", "USDC", "Event"]


class InteractiveExporter:
    """
    Client-side adapter around the fetch core.
    Holds display state only; each fetch gets its own FetchSession.
    """

    def __init__(
        self,
        source: IActivitySource,
        settings: Settings,
        output_dir: Path = Path("."),
        throttle_seconds: Optional[float] = None
    ):
        self.source = source
        self.settings = settings
        self.output_dir = Path(output_dir)
        self.throttle_seconds = settings.client_delay if throttle_seconds is None else throttle_seconds
        self.is_running = False
        self.preview_limit = PREVIEW_PAGE
        self.session: Optional[FetchSession] = None

    async def start_fetch(self, raw_input: str, raw_limit=None) -> Optional[FetchSession]:
        if self.is_running:
            logger.warning("A fetch is already running")
            return None

        if not raw_input or not raw_input.strip():
            logger.error("Please enter a wallet address or profile link")
            return None

        try:
            address = extract_wallet_address(raw_input)
        except AddressNotFound:
            logger.error("Could not recognise a wallet address, check the input format")
            return None

        session = FetchSession(
            wallet_address=address,
            target_limit=parse_target_limit(raw_limit, self.settings.default_limit)
        )
        self.session = None
        self.preview_limit = PREVIEW_PAGE
        self.is_running = True

        logger.info(f"Fetching activity for {address}")
        logger.info(f"Target records: {session.target_limit}")

        try:
            await fetch_activity(
                session,
                self.source,
                page_size=self.settings.page_size,
                throttle_seconds=self.throttle_seconds,
                on_page=self._log_page
            )
        except UpstreamError as e:
            # Partial pages are dropped; the log above keeps the progress trail
            logger.error(f"Fetch failed: {e}")
            return None
        finally:
            self.is_running = False

        if not session.accumulated:
            logger.warning("No trade records found")
        else:
            logger.info(f"Done! Fetched {len(session.accumulated)} trade records")
        self.session = session
        return session

    def _log_page(self, session: FetchSession, received: int):
        logger.info(
            f"Page {session.pages_requested}: {received} records, "
            f"progress {len(session.accumulated)}/{session.target_limit}"
        )

    @property
    def records(self) -> List[dict]:
        return self.session.accumulated if self.session else []

    def summary_lines(self) -> List[str]:
        summary = summarize(self.records)
        lines = [
            f"Records: {summary.record_count}",
            f"Volume:  ${summary.total_volume:.2f}",
        ]
        if summary.start_timestamp is not None:
            start = format_timestamp(summary.start_timestamp)
            end = format_timestamp(summary.end_timestamp)
            lines.append(f"Range:   {start} to {end}")
        return lines

    def render_preview(self) -> str:
        rows = [
            [r.time, r.title, r.side, r.outcome, r.size, r.price, r.usdc, r.event_url]
            for r in preview_rows(self.records, self.preview_limit)
        ]
        widths = [
            max([len(PREVIEW_HEADERS[i])] + [len(row[i]) for row in rows])
            for i in range(len(PREVIEW_HEADERS))
        ]
        lines = [
            "  ".join(h.ljust(w) for h, w in zip(PREVIEW_HEADERS, widths)),
            "  ".join("-" * w for w in widths),
        ]
        lines += ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)) for row in rows]

        remaining = len(self.records) - self.preview_limit
        if remaining > 0:
            lines.append(f"... {remaining} more (type 'more' to load)")
        return "\n".join(lines)

    def load_more(self):
        self.preview_limit += PREVIEW_PAGE

    def save(self, fmt: str) -> Optional[Path]:
        if not self.records:
            logger.warning("Nothing to export")
            return None

        records = normalize_records(self.records, self.settings.client_denylist)
        export = build_export(records, self.session.wallet_address, fmt)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / export.filename
        path.write_text(export.content, encoding="utf-8")
        logger.info(f"{fmt.upper()} file saved: {path}")
        return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pm-export",
        description="Fetch and export Polymarket wallet trade activity"
    )
    parser.add_argument("address", nargs="?", help="Wallet address or profile URL")
    parser.add_argument("--limit", default=None, help="Target number of records (default 100)")
    parser.add_argument("--delay", type=float, default=None, help="Seconds to wait between pages")
    parser.add_argument("--output-dir", default=".", help="Directory for exported files")
    parser.add_argument("--csv", action="store_true", help="Save a CSV export")
    parser.add_argument("--json", action="store_true", help="Save a JSON export")
    parser.add_argument("--preview", type=int, default=PREVIEW_PAGE, help="Rows shown in the preview table")
    parser.add_argument("--interactive", action="store_true", help="Open the command menu after fetching")
    return parser


def show_results(client: InteractiveExporter, out: Callable[[str], None]):
    for line in client.summary_lines():
        out(line)
    out("")
    out(client.render_preview())


async def interactive_loop(client: InteractiveExporter, prompt: Callable[[str], str], out: Callable[[str], None]):
    while True:
        command = prompt("[fetch/more/csv/json/quit] > ").strip().lower()

        if command in ("q", "quit", "exit"):
            return
        elif command == "fetch":
            raw_input = prompt("Wallet address or profile URL: ")
            raw_limit = prompt(f"Target records [{client.settings.default_limit}]: ")
            if await client.start_fetch(raw_input, raw_limit or None) and client.records:
                show_results(client, out)
        elif command == "more":
            client.load_more()
            out(client.render_preview())
        elif command in ("csv", "json"):
            client.save(command)
        elif command:
            out(f"Unknown command: {command}")


async def run(
    args: argparse.Namespace,
    source: IActivitySource,
    settings: Settings,
    prompt: Callable[[str], str] = input,
    out: Callable[[str], None] = print
) -> int:
    client = InteractiveExporter(source, settings, Path(args.output_dir), args.delay)
    client.preview_limit = args.preview

    raw_input = args.address
    if raw_input is None and not args.interactive:
        raw_input = prompt("Wallet address or profile URL: ")

    if raw_input:
        session = await client.start_fetch(raw_input, args.limit)
        if session is None:
            if not args.interactive:
                return 1
        elif session.accumulated:
            client.preview_limit = args.preview
            show_results(client, out)
            if args.csv:
                client.save("csv")
            if args.json:
                client.save("json")

    if args.interactive:
        await interactive_loop(client, prompt, out)
    return 0


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    gateway = PolymarketDataGateway(base_url=settings.api_base, timeout=settings.http_timeout)
    try:
        return await run(args, gateway, settings)
    finally:
        await gateway.aclose()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)
    return asyncio.run(_main(args, settings))


if __name__ == "__main__":
    sys.exit(main())
