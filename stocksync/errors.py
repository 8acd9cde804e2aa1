"""Exception types raised by the sync pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stocksync.models import RunState, SyncSummary


class StockSyncError(Exception):
    """Base exception for all stocksync errors."""


class ConfigError(StockSyncError):
    """A required setting is missing or invalid."""


class FetchError(StockSyncError):
    """The feed could not be downloaded from the file server."""


class FeedReadError(StockSyncError):
    """The local feed could not be read or decoded."""


class CatalogError(StockSyncError):
    """A catalog API call failed.

    `detail` carries the structured error body returned by the API when there
    is one, otherwise a plain message.
    """

    def __init__(self, message: str, detail: object | None = None) -> None:
        super().__init__(message)
        self.detail = detail if detail is not None else message


class SyncAborted(StockSyncError):
    """A fatal error stopped the run before any archive action."""

    def __init__(self, stage: RunState, message: str) -> None:
        super().__init__(f"Sync aborted during {stage.value}: {message}")
        self.stage = stage


class ArchiveError(StockSyncError):
    """The feed was synced but could not be archived."""

    def __init__(self, message: str, summary: SyncSummary) -> None:
        super().__init__(message)
        self.summary = summary
