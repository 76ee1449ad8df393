import logging
from typing import AsyncIterator, Optional
from fastapi import FastAPI, Query, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

# --- Imports ---
from src.core.config import Settings, get_settings, setup_logging
from src.core.entities.session import FetchSession
from src.core.errors import UpstreamError, ValidationError
from src.core.interfaces.datasource import IActivitySource
from src.core.use_cases.address_extractor import validate_wallet_address
from src.core.use_cases.exporter import build_export
from src.core.use_cases.paginated_fetcher import fetch_activity, parse_target_limit
from src.core.use_cases.record_normalizer import normalize_records
from src.infrastructure.gateways.polymarket_data_api import PolymarketDataGateway

# Setup Logging
setup_logging(get_settings().log_level)
logger = logging.getLogger("TradeExport")

app = FastAPI(title="PM Trade Export API", version="1.0.0", description="Polymarket wallet activity export")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Export-Partial"],
)

# --- Dependency Injection ---

async def get_activity_source(settings: Settings = Depends(get_settings)) -> AsyncIterator[IActivitySource]:
    gateway = PolymarketDataGateway(base_url=settings.api_base, timeout=settings.http_timeout)
    try:
        yield gateway
    finally:
        await gateway.aclose()


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={"Access-Control-Allow-Origin": "*"}
    )

# --- Endpoints ---

@app.get("/health")
async def health():
    return {"status": "healthy", "mode": "Polymarket data API via Gateway"}

@app.get("/api/export")
async def export_activity(
    user: Optional[str] = Query(None, description="Wallet address, 0x + 40 hex digits"),
    limit: Optional[str] = Query(None, description="Maximum number of records (default 100)"),
    format: str = Query("json", description="'json' or 'csv'"),
    settings: Settings = Depends(get_settings),
    source: IActivitySource = Depends(get_activity_source)
):
    """
    Fetches up to `limit` activity records for `user` and returns them as a
    file attachment named pm_<user>_<count>.<ext>.

    When the upstream API fails part-way, the records gathered before the
    failing page are still exported and the response carries
    `X-Export-Partial: true`.
    """
    try:
        address = validate_wallet_address(user)
    except ValidationError as e:
        return error_response(400, str(e))

    fmt = format.lower()
    if fmt not in ("json", "csv"):
        return error_response(400, f"Unsupported export format: {format}")

    session = FetchSession(
        wallet_address=address,
        target_limit=parse_target_limit(limit, settings.default_limit)
    )
    logger.info(f"Export requested for {address} (limit={session.target_limit}, format={fmt})")

    try:
        try:
            await fetch_activity(session, source, page_size=settings.page_size)
        except UpstreamError as e:
            logger.warning(
                f"Upstream failed for {address}; exporting {len(session.accumulated)} partial records: {e}"
            )

        records = normalize_records(session.accumulated, settings.server_denylist)
        export = build_export(records, address, fmt)
    except Exception as e:
        logger.exception(f"Export failed for {address}")
        return error_response(500, "Internal server error", str(e))

    headers = {
        "Content-Disposition": f'attachment; filename="{export.filename}"',
        "Access-Control-Allow-Origin": "*",
    }
    if session.partial:
        headers["X-Export-Partial"] = "true"

    logger.info(f"Exported {len(records)} records for {address} as {export.filename}")
    return Response(content=export.content, media_type=export.media_type, headers=headers)
