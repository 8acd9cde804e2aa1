"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from stocksync.errors import ConfigError

DEFAULT_ARCHIVE_DIR = "archive"
DEFAULT_TIMEOUT = 30.0
FTP_PORTS = {"ftp": 21, "ftps": 21, "sftp": 22}


@dataclass(slots=True)
class FeedSource:
    host: str
    remote_path: str
    protocol: str = "ftp"
    port: int = 21
    username: str | None = None
    password: str | None = None


@dataclass(slots=True)
class CatalogSettings:
    api_url: str
    key: str
    secret: str
    timeout: float = DEFAULT_TIMEOUT
    max_requests_per_second: float | None = None


@dataclass(slots=True)
class Settings:
    source: FeedSource
    catalog: CatalogSettings
    local_file: Path
    archive_dir: Path
    archive_prefix: str
    layout_path: Path | None = None


def _require(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ConfigError(f"Missing required setting {name}")
    return value


def _optional_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build settings from the process environment (after `load_dotenv`)."""
    protocol = os.environ.get("FTP_PROTOCOL", "ftp").lower()
    if protocol not in FTP_PORTS:
        raise ConfigError(f"Unsupported FTP_PROTOCOL {protocol!r}")
    port = os.environ.get("FTP_PORT")
    source = FeedSource(
        host=_require("FTP_HOST"),
        remote_path=_require("CSV_REMOTE_PATH"),
        protocol=protocol,
        port=int(port) if port else FTP_PORTS[protocol],
        username=os.environ.get("FTP_USER"),
        password=os.environ.get("FTP_PASSWORD"),
    )
    catalog = CatalogSettings(
        api_url=_require("WC_API_URL").rstrip("/"),
        key=_require("WC_KEY"),
        secret=_require("WC_SECRET"),
        timeout=_optional_float("WC_TIMEOUT") or DEFAULT_TIMEOUT,
        max_requests_per_second=_optional_float("WC_MAX_REQUESTS_PER_SECOND"),
    )
    local_file = Path(_require("CSV_LOCAL_FILE"))
    layout_path = os.environ.get("FEED_LAYOUT_PATH")
    return Settings(
        source=source,
        catalog=catalog,
        local_file=local_file,
        archive_dir=Path(os.environ.get("CSV_ARCHIVE_DIR", DEFAULT_ARCHIVE_DIR)),
        archive_prefix=os.environ.get("CSV_ARCHIVE_PREFIX") or local_file.stem,
        layout_path=Path(layout_path) if layout_path else None,
    )
