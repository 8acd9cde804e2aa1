"""Move processed feeds out of the active path."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import pendulum

from stocksync.utils.dates import compact_timestamp, now_utc

logger = logging.getLogger(__name__)


def archive_name(prefix: str, moment: pendulum.DateTime) -> str:
    return f"{prefix}_{compact_timestamp(moment)}.csv"


def archive_feed(path: Path, archive_dir: Path, prefix: str, *, moment: pendulum.DateTime | None = None) -> Path:
    """Move `path` into `archive_dir` under a timestamped name.

    An existing archive with the same name is never overwritten.
    """
    archive_dir.mkdir(parents=True, exist_ok=True)
    target = archive_dir / archive_name(prefix, moment or now_utc())
    if target.exists():
        raise FileExistsError(f"Archive {target} already exists")
    shutil.move(str(path), str(target))
    logger.info("Archived %s to %s", path, target)
    return target
