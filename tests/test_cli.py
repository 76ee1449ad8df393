"""
Tests for the interactive command-line client.
"""
import json
import logging

import pytest

from src.cli.main import InteractiveExporter, build_parser, run, show_results
from src.core.config import Settings
from src.infrastructure.gateways.local_mock import LocalMockActivitySource
from factories import TEST_USER, make_record, make_records

PROFILE_URL = f"https://polymarket.com/profile/{TEST_USER.upper().replace('0X', '0x')}"


@pytest.fixture
def settings():
    return Settings(client_delay=0)


@pytest.fixture
def exporter(settings, tmp_path):
    source = LocalMockActivitySource(records=make_records(45))
    return InteractiveExporter(source, settings, output_dir=tmp_path)


class Prompts:
    """Scripted stand-in for input()."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked = []

    def __call__(self, message):
        self.asked.append(message)
        return self.answers.pop(0)


@pytest.mark.asyncio
async def test_fetch_from_profile_url(exporter, caplog):
    caplog.set_level(logging.INFO, logger="TradeExport")

    session = await exporter.start_fetch(PROFILE_URL, "30")

    assert session.wallet_address == TEST_USER
    assert len(session.accumulated) == 30
    assert exporter.is_running is False
    assert "Fetched 30 trade records" in caplog.text


@pytest.mark.asyncio
async def test_default_limit_for_non_numeric_input(exporter):
    session = await exporter.start_fetch(TEST_USER, "lots")

    assert session.target_limit == 100
    assert len(session.accumulated) == 45


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_input", ["", "   ", "https://polymarket.com/@someone"])
async def test_bad_input_makes_no_requests(exporter, raw_input, caplog):
    session = await exporter.start_fetch(raw_input, "10")

    assert session is None
    assert exporter.source.calls == []
    assert any(r.levelno == logging.ERROR for r in caplog.records)


@pytest.mark.asyncio
async def test_overlapping_fetch_is_rejected(exporter):
    exporter.is_running = True

    assert await exporter.start_fetch(TEST_USER, "10") is None
    assert exporter.source.calls == []


@pytest.mark.asyncio
async def test_upstream_failure_discards_partial_records(settings, tmp_path, caplog):
    source = LocalMockActivitySource(records=make_records(300), fail_at=1)
    client = InteractiveExporter(source, settings, output_dir=tmp_path)

    session = await client.start_fetch(TEST_USER, "300")

    assert session is None
    assert client.records == []
    assert client.is_running is False
    assert "Fetch failed" in caplog.text


@pytest.mark.asyncio
async def test_flat_delay_from_settings(tmp_path):
    client = InteractiveExporter(LocalMockActivitySource(), Settings(client_delay=0.3), tmp_path)
    assert client.throttle_seconds == 0.3

    client = InteractiveExporter(LocalMockActivitySource(), Settings(client_delay=0.3), tmp_path, 0)
    assert client.throttle_seconds == 0


@pytest.mark.asyncio
async def test_preview_grows_on_load_more(exporter):
    await exporter.start_fetch(TEST_USER, "45")

    preview = exporter.render_preview()
    assert preview.splitlines()[0].startswith("Time")
    assert len(preview.splitlines()) == 2 + 20 + 1
    assert "25 more" in preview

    exporter.load_more()
    exporter.load_more()
    preview = exporter.render_preview()
    assert len(preview.splitlines()) == 2 + 45
    assert "more" not in preview.splitlines()[-1]


@pytest.mark.asyncio
async def test_summary_lines(exporter):
    await exporter.start_fetch(TEST_USER, "4")

    lines = exporter.summary_lines()
    assert lines[0] == "Records: 4"
    assert lines[1] == "Volume:  $22.00"
    assert lines[2].startswith("Range:")


@pytest.mark.asyncio
async def test_save_json_strips_wallet(exporter, tmp_path):
    await exporter.start_fetch(TEST_USER, "10")

    path = exporter.save("json")

    assert path == tmp_path / f"pm_{TEST_USER}_10.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data) == 10
    assert "proxyWallet" not in data[0]
    assert "icon" not in data[0]


@pytest.mark.asyncio
async def test_save_csv(exporter, tmp_path):
    await exporter.start_fetch(TEST_USER, "10")

    path = exporter.save("csv")

    assert path.name == f"pm_{TEST_USER}_10.csv"
    assert len(path.read_text(encoding="utf-8").splitlines()) == 11


def test_save_without_records(exporter):
    assert exporter.save("csv") is None


@pytest.mark.asyncio
async def test_run_one_shot_with_exports(settings, tmp_path):
    source = LocalMockActivitySource(records=make_records(5))
    args = build_parser().parse_args([PROFILE_URL, "--limit", "5", "--csv", "--json", "--output-dir", str(tmp_path)])
    output = []

    status = await run(args, source, settings, prompt=Prompts(), out=output.append)

    assert status == 0
    assert (tmp_path / f"pm_{TEST_USER}_5.csv").exists()
    assert (tmp_path / f"pm_{TEST_USER}_5.json").exists()
    assert output[0] == "Records: 5"


@pytest.mark.asyncio
async def test_run_prompts_for_address(settings, tmp_path):
    source = LocalMockActivitySource(records=make_records(5))
    args = build_parser().parse_args(["--output-dir", str(tmp_path)])
    prompts = Prompts(TEST_USER)

    status = await run(args, source, settings, prompt=prompts, out=lambda line: None)

    assert status == 0
    assert source.calls == [(TEST_USER, 100, 0)]


@pytest.mark.asyncio
async def test_run_returns_error_status_on_bad_address(settings, tmp_path):
    args = build_parser().parse_args(["not an address", "--output-dir", str(tmp_path)])

    status = await run(args, LocalMockActivitySource(), settings, prompt=Prompts(), out=lambda line: None)

    assert status == 1


@pytest.mark.asyncio
async def test_interactive_menu(settings, tmp_path):
    source = LocalMockActivitySource(records=make_records(30))
    args = build_parser().parse_args(["--interactive", "--output-dir", str(tmp_path)])
    prompts = Prompts("fetch", TEST_USER, "", "more", "json", "bogus", "quit")
    output = []

    status = await run(args, source, settings, prompt=prompts, out=output.append)

    assert status == 0
    assert (tmp_path / f"pm_{TEST_USER}_30.json").exists()
    assert "Unknown command: bogus" in output


@pytest.mark.asyncio
async def test_results_survive_out_of_range_timestamp(settings, tmp_path):
    source = LocalMockActivitySource(records=[make_record(0, timestamp=1700000000000000)])
    client = InteractiveExporter(source, settings, output_dir=tmp_path)
    output = []

    await client.start_fetch(TEST_USER, "10")
    show_results(client, output.append)

    assert output[0] == "Records: 1"
    assert output[2] == "Range:   - to -"
    assert "Market 0" in output[-1]


@pytest.mark.asyncio
async def test_preview_links_each_event(exporter):
    await exporter.start_fetch(TEST_USER, "3")

    preview = exporter.render_preview()
    assert "Event" in preview.splitlines()[0]
    assert "https://polymarket.com/event/event-0" in preview.splitlines()[2]


@pytest.mark.asyncio
async def test_progress_logged_per_page(settings, tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="TradeExport")
    client = InteractiveExporter(LocalMockActivitySource(records=make_records(150)), settings, tmp_path)

    await client.start_fetch(TEST_USER, "500")

    assert "Page 1: 100 records, progress 100/500" in caplog.text
    assert "Page 2: 50 records, progress 150/500" in caplog.text
