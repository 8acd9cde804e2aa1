"""Feed to catalog sync job."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import pendulum
from dotenv import load_dotenv
from tqdm.contrib.logging import logging_redirect_tqdm

from stocksync.catalog.stock import StockUpdater
from stocksync.catalog.woocommerce import WooCommerceClient
from stocksync.config import Settings, load_settings
from stocksync.errors import ArchiveError, FeedReadError, FetchError, SyncAborted
from stocksync.feed import load_layout
from stocksync.feed.archive import archive_feed
from stocksync.feed.fetch import FeedFetcher, fetcher_for
from stocksync.feed.normalize import FeedLayout, read_stock_records
from stocksync.models import RunState, StockRecord, SyncOutcome, SyncSummary
from stocksync.progress import ProgressReporter, TqdmProgress
from stocksync.utils.dates import now_utc

logger = logging.getLogger(__name__)


class SyncPipeline:
    """One run: fetch, verify, normalize, sync every record, archive.

    Records are synced one at a time in file order. A failing record is
    counted and logged; it never stops the records after it.
    """

    def __init__(
        self,
        *,
        fetcher: FeedFetcher,
        updater: StockUpdater,
        local_file: Path,
        archive_dir: Path,
        archive_prefix: str,
        layout: FeedLayout | None = None,
        progress: ProgressReporter | None = None,
        clock: Callable[[], pendulum.DateTime] = now_utc,
    ) -> None:
        self.fetcher = fetcher
        self.updater = updater
        self.local_file = local_file
        self.archive_dir = archive_dir
        self.archive_prefix = archive_prefix
        self.layout = layout or FeedLayout()
        self.progress = progress or ProgressReporter()
        self.clock = clock
        self.state = RunState.IDLE
        self.summary = SyncSummary()

    async def run(self) -> SyncSummary:
        loop = asyncio.get_running_loop()

        self.state = RunState.FETCHING
        try:
            await loop.run_in_executor(None, self.fetcher.fetch, self.local_file)
        except FetchError as exc:
            self._abort(str(exc), exc)
        except Exception as exc:
            self._abort(f"unexpected fetch error: {exc!r}", exc)

        self.state = RunState.VERIFYING
        if not self.local_file.is_file():
            self._abort(f"{self.local_file} is missing after download")
        if self.local_file.stat().st_size == 0:
            self._abort(f"{self.local_file} is empty after download")

        self.state = RunState.NORMALIZING
        try:
            records = await loop.run_in_executor(None, read_stock_records, self.local_file, self.layout)
        except FeedReadError as exc:
            self._abort(str(exc), exc)

        self.state = RunState.SYNCING
        await self._sync(records)
        logger.info(
            "Sync completed: %s read, %s updated, %s not found, %s failed",
            self.summary.total,
            self.summary.updated,
            self.summary.not_found,
            self.summary.failed,
        )

        self.state = RunState.ARCHIVING
        archive = functools.partial(
            archive_feed, self.local_file, self.archive_dir, self.archive_prefix, moment=self.clock()
        )
        try:
            self.summary.archived_path = await loop.run_in_executor(None, archive)
        except OSError as exc:
            logger.error("Updates were applied but archiving %s failed: %s", self.local_file, exc)
            raise ArchiveError(f"Cannot archive {self.local_file}: {exc}", self.summary) from exc

        self.state = RunState.DONE
        return self.summary

    async def _sync(self, records: list[StockRecord]) -> None:
        self.summary.total = len(records)
        self.progress.start(len(records))
        try:
            for record in records:
                try:
                    outcome = await self.updater.sync_record(record)
                except Exception as exc:  # pragma: no cover - unexpected client errors
                    logger.exception("Unexpected error on SKU %s", record.identity)
                    outcome = SyncOutcome.failed(record.identity, str(exc) or type(exc).__name__)
                self.summary.record(outcome)
                self.progress.advance()
        finally:
            self.progress.close()

    def _abort(self, message: str, cause: Exception | None = None) -> NoReturn:
        stage = self.state
        self.state = RunState.ABORTED
        logger.error("Sync aborted during %s: %s", stage.value, message)
        raise SyncAborted(stage, message) from cause


def build_pipeline(
    settings: Settings, client: WooCommerceClient, *, progress: ProgressReporter | None = None
) -> SyncPipeline:
    return SyncPipeline(
        fetcher=fetcher_for(settings.source),
        updater=StockUpdater(client),
        local_file=settings.local_file,
        archive_dir=settings.archive_dir,
        archive_prefix=settings.archive_prefix,
        layout=load_layout(settings.layout_path),
        progress=progress,
    )


async def run_sync(settings: Settings | None = None, *, progress: ProgressReporter | None = None) -> SyncSummary:
    load_dotenv()
    settings = settings or load_settings()
    client = WooCommerceClient.from_settings(settings.catalog)
    try:
        pipeline = build_pipeline(settings, client, progress=progress)
        return await pipeline.run()
    finally:
        await client.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    with logging_redirect_tqdm():
        summary = asyncio.run(run_sync(progress=TqdmProgress()))
    logger.info("Run summary: %s", summary.as_dict())


if __name__ == "__main__":
    main()
