"""
Runtime configuration for the trade exporter.

Values come from environment variables (a `.env` file in the working
directory is loaded first when present). Denylists are comma-separated
field names.
"""
import os
import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

DEFAULT_API_BASE = "https://data-api.polymarket.com"

# Profile fields stripped from every exported record
SERVER_DENYLIST = ["icon", "name", "pseudonym", "bio", "profileImage", "profileImageOptimized"]
# The interactive client also drops the wallet itself
CLIENT_DENYLIST = ["proxyWallet"] + SERVER_DENYLIST


class Settings(BaseModel):
    api_base: str = DEFAULT_API_BASE
    page_size: int = Field(100, gt=0)
    default_limit: int = 100
    client_delay: float = Field(0.3, ge=0)
    http_timeout: float = Field(30.0, gt=0)
    client_denylist: List[str] = Field(default_factory=lambda: list(CLIENT_DENYLIST))
    server_denylist: List[str] = Field(default_factory=lambda: list(SERVER_DENYLIST))
    log_level: str = "INFO"


def _split_list(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))

    values = {
        "api_base": os.getenv("PM_DATA_API_BASE"),
        "page_size": os.getenv("PM_PAGE_SIZE"),
        "default_limit": os.getenv("PM_DEFAULT_LIMIT"),
        "client_delay": os.getenv("PM_CLIENT_DELAY"),
        "http_timeout": os.getenv("PM_HTTP_TIMEOUT"),
        "client_denylist": _split_list(os.getenv("PM_CLIENT_DENYLIST")),
        "server_denylist": _split_list(os.getenv("PM_SERVER_DENYLIST")),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    # Unset variables fall back to the model defaults
    return Settings(**{k: v for k, v in values.items() if v is not None})


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
