"""Show what the sync would read from a local feed file."""

from __future__ import annotations

import argparse
import os
from pathlib import Path

from dotenv import load_dotenv

from stocksync.feed import load_layout
from stocksync.feed.normalize import iter_stock_records


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path)
    parser.add_argument("--layout", type=Path, default=os.environ.get("FEED_LAYOUT_PATH"))
    parser.add_argument("--limit", type=int, default=10)
    args = parser.parse_args()

    layout = load_layout(args.layout)
    total = 0
    missing_identity = 0
    for record in iter_stock_records(args.path, layout):
        if total < args.limit:
            print(f"{record.identity!s:<20} {record.quantity}")
        if not (record.identity or "").strip():
            missing_identity += 1
        total += 1
    print(f"{total} records, {missing_identity} without product code")


if __name__ == "__main__":
    main()
