"""Turn the semicolon feed into stock records."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Protocol, Sequence

from stocksync.errors import FeedReadError
from stocksync.models import RawRecord, StockRecord

logger = logging.getLogger(__name__)


class ExtractionRule(Protocol):
    def __call__(self, record: RawRecord) -> str | None: ...


@dataclass(frozen=True, slots=True)
class ColumnRule:
    name: str

    def __call__(self, record: RawRecord) -> str | None:
        return record.get(self.name)


@dataclass(frozen=True, slots=True)
class PositionRule:
    index: int

    def __call__(self, record: RawRecord) -> str | None:
        return record.at(self.index)


def _default_identity_rules() -> list[ExtractionRule]:
    return [ColumnRule("EAN13"), ColumnRule("sku"), PositionRule(4)]


def _default_quantity_rules() -> list[ExtractionRule]:
    return [ColumnRule("Giacenza"), ColumnRule("giacenza"), PositionRule(3)]


@dataclass(slots=True)
class FeedLayout:
    delimiter: str = ";"
    encoding: str = "utf-8-sig"
    identity_rules: list[ExtractionRule] = field(default_factory=_default_identity_rules)
    quantity_rules: list[ExtractionRule] = field(default_factory=_default_quantity_rules)


def first_non_empty(record: RawRecord, rules: Sequence[ExtractionRule]) -> str | None:
    """Return the first rule value that is not blank.

    When every rule comes up empty the last value seen is returned as is, so
    callers can tell a blank cell from a missing column.
    """
    value = None
    for rule in rules:
        value = rule(record)
        if value is not None and value.strip():
            return value
    return value


def to_stock_record(record: RawRecord, layout: FeedLayout) -> StockRecord:
    return StockRecord(
        identity=first_non_empty(record, layout.identity_rules),
        quantity=first_non_empty(record, layout.quantity_rules),
    )


def iter_raw_records(path: Path, layout: FeedLayout) -> Iterator[RawRecord]:
    try:
        with path.open(newline="", encoding=layout.encoding) as handle:
            reader = csv.reader(handle, delimiter=layout.delimiter)
            header_row = next(reader, None)
            if header_row is None:
                return
            header = tuple(name.strip() for name in header_row)
            for values in reader:
                if not values:
                    continue
                if len(values) != len(header):
                    logger.debug(
                        "Line %s has %s columns, header has %s",
                        reader.line_num,
                        len(values),
                        len(header),
                    )
                yield RawRecord(header=header, values=values)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise FeedReadError(f"Cannot read feed {path}: {exc}") from exc


def iter_stock_records(path: Path, layout: FeedLayout | None = None) -> Iterator[StockRecord]:
    layout = layout or FeedLayout()
    for record in iter_raw_records(path, layout):
        yield to_stock_record(record, layout)


def read_stock_records(path: Path, layout: FeedLayout | None = None) -> list[StockRecord]:
    records = list(iter_stock_records(path, layout))
    logger.info("Read %s products from %s", len(records), path)
    return records
