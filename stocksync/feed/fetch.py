"""Download the inventory feed from the supplier's file server."""

from __future__ import annotations

import ftplib
import logging
from pathlib import Path
from typing import Protocol

import paramiko

from stocksync.config import FeedSource
from stocksync.errors import FetchError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 30.0


class FeedFetcher(Protocol):
    def fetch(self, destination: Path) -> None: ...


class _AtomicDownload:
    """Write into a `.part` sibling and move it into place on success."""

    def __init__(self, destination: Path) -> None:
        self.destination = destination
        self.partial = destination.with_name(destination.name + ".part")

    def __enter__(self) -> Path:
        self.destination.parent.mkdir(parents=True, exist_ok=True)
        return self.partial

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.partial.replace(self.destination)
        else:
            self.partial.unlink(missing_ok=True)


class FTPFeedFetcher:
    def __init__(self, source: FeedSource, *, timeout: float = CONNECT_TIMEOUT) -> None:
        self.source = source
        self.timeout = timeout

    def _open(self) -> ftplib.FTP:
        ftp_cls = ftplib.FTP_TLS if self.source.protocol == "ftps" else ftplib.FTP
        return ftp_cls(timeout=self.timeout)

    def fetch(self, destination: Path) -> None:
        try:
            with self._open() as ftp, _AtomicDownload(destination) as partial:
                ftp.connect(self.source.host, self.source.port)
                ftp.login(self.source.username or "anonymous", self.source.password or "")
                if isinstance(ftp, ftplib.FTP_TLS):
                    ftp.prot_p()
                logger.info("Connected to FTP %s", self.source.host)
                with partial.open("wb") as handle:
                    ftp.retrbinary(f"RETR {self.source.remote_path}", handle.write)
        except ftplib.all_errors as exc:
            raise FetchError(f"FTP download of {self.source.remote_path} failed: {exc}") from exc
        logger.info("Downloaded %s to %s", self.source.remote_path, destination)


class SFTPFeedFetcher:
    def __init__(self, source: FeedSource, *, timeout: float = CONNECT_TIMEOUT) -> None:
        self.source = source
        self.timeout = timeout

    def fetch(self, destination: Path) -> None:
        try:
            with paramiko.Transport((self.source.host, self.source.port)) as transport:
                transport.banner_timeout = self.timeout
                transport.auth_timeout = self.timeout
                transport.connect(username=self.source.username, password=self.source.password)
                logger.info("Connected to SFTP %s", self.source.host)
                sftp = paramiko.SFTPClient.from_transport(transport)
                if sftp is None:
                    raise FetchError(f"Could not open an SFTP channel on {self.source.host}")
                with sftp, _AtomicDownload(destination) as partial:
                    sftp.get(self.source.remote_path, str(partial))
        except (OSError, EOFError, paramiko.SSHException) as exc:
            raise FetchError(f"SFTP download of {self.source.remote_path} failed: {exc}") from exc
        logger.info("Downloaded %s to %s", self.source.remote_path, destination)


def fetcher_for(source: FeedSource) -> FeedFetcher:
    if source.protocol == "sftp":
        return SFTPFeedFetcher(source)
    return FTPFeedFetcher(source)
