import inspect
import shutil

import pytest

from stocksync.errors import FeedReadError
from stocksync.feed import load_layout
from stocksync.feed.normalize import (
    ColumnRule,
    FeedLayout,
    PositionRule,
    first_non_empty,
    iter_stock_records,
    read_stock_records,
)
from stocksync.models import RawRecord, StockRecord

from conftest import FIXTURES


def test_reads_every_row_in_file_order(tmp_path):
    path = tmp_path / "giacenze.csv"
    shutil.copy(FIXTURES / "feeds" / "giacenze.csv", path)
    records = read_stock_records(path)
    assert records == [
        StockRecord(identity="8001234567890", quantity="5"),
        StockRecord(identity="8001234567891", quantity="0"),
        StockRecord(identity="MC-L", quantity="12"),
        StockRecord(identity="8001234567893", quantity="3"),
    ]


def test_positional_columns_when_names_are_unknown():
    records = read_stock_records(FIXTURES / "feeds" / "positional.csv")
    assert records == [
        StockRecord(identity="8009999000001", quantity="7"),
        StockRecord(identity="8009999000002", quantity="2"),
    ]


def test_named_identity_beats_fifth_column(write_feed):
    path = write_feed(["EAN13", "Descrizione", "Marca", "Qta", "Barcode"], [["X", "Maglia", "Odlo", "1", "Y"]])
    assert read_stock_records(path)[0].identity == "X"


def test_sku_used_when_ean_is_blank(write_feed):
    path = write_feed(["EAN13", "sku", "Marca", "Qta", "Barcode"], [["", "SKU-9", "Odlo", "1", "Y"]])
    assert read_stock_records(path)[0].identity == "SKU-9"


def test_named_quantity_beats_fourth_column(write_feed):
    path = write_feed(["Codice", "Giacenza", "Marca", "Qta", "EAN13"], [["C1", "9", "Odlo", "1", "111"]])
    assert read_stock_records(path)[0].quantity == "9"


def test_lowercase_giacenza_column(write_feed):
    path = write_feed(["Codice", "giacenza", "Marca", "Qta", "EAN13"], [["C1", "4", "Odlo", "1", "111"]])
    assert read_stock_records(path)[0].quantity == "4"


def test_empty_values_pass_through(write_feed):
    path = write_feed(["Codice", "Descrizione", "Marca", "Giacenza", "EAN13"], [["C1", "Maglia", "Odlo", "", ""]])
    assert read_stock_records(path) == [StockRecord(identity="", quantity="")]


def test_short_rows_do_not_stop_the_stream(write_feed):
    path = write_feed(
        ["Codice", "Descrizione", "Marca", "Giacenza", "EAN13"],
        [["C1", "Maglia"], ["C2", "Guanti", "Reusch", "2", "222"]],
    )
    records = read_stock_records(path)
    assert records == [
        StockRecord(identity=None, quantity=None),
        StockRecord(identity="222", quantity="2"),
    ]


def test_header_whitespace_and_bom_are_ignored(tmp_path):
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffEAN13 ; Giacenza \n111;5\n".encode("utf-8"))
    assert read_stock_records(path) == [StockRecord(identity="111", quantity="5")]


def test_records_are_streamed_lazily(write_feed):
    path = write_feed(["EAN13", "Giacenza"], [["111", "5"]])
    assert inspect.isgenerator(iter_stock_records(path))


def test_missing_file_is_a_read_error(tmp_path):
    with pytest.raises(FeedReadError):
        read_stock_records(tmp_path / "absent.csv")


def test_undecodable_file_is_a_read_error(tmp_path):
    path = tmp_path / "broken.csv"
    path.write_bytes(b"EAN13;Giacenza\n\xff\xfe\xfa;5\n")
    with pytest.raises(FeedReadError):
        read_stock_records(path)


def test_rules_are_tried_in_order():
    record = RawRecord(header=("EAN13", "sku", "x", "y", "z"), values=["  ", "SKU-1", "a", "b", "c"])
    assert first_non_empty(record, [ColumnRule("EAN13"), ColumnRule("sku"), PositionRule(4)]) == "SKU-1"
    assert first_non_empty(record, [ColumnRule("missing"), PositionRule(4)]) == "c"
    assert first_non_empty(record, [ColumnRule("missing"), PositionRule(9)]) is None


def test_column_rule_is_case_sensitive():
    record = RawRecord(header=("Giacenza",), values=["3"])
    assert ColumnRule("GIACENZA")(record) is None
    assert ColumnRule("Giacenza")(record) == "3"


def test_packaged_layout_matches_defaults():
    layout = load_layout()
    defaults = FeedLayout()
    assert layout.delimiter == ";"
    assert layout.identity_rules == defaults.identity_rules
    assert layout.quantity_rules == defaults.quantity_rules


def test_custom_layout_file(tmp_path, write_feed):
    layout_path = tmp_path / "layout.yml"
    layout_path.write_text(
        "delimiter: ','\n"
        "identity:\n  - column: Barcode\n"
        "quantity:\n  - position: 1\n"
    )
    feed = tmp_path / "feed.csv"
    feed.write_text("Barcode,Stock\n555,8\n")
    layout = load_layout(layout_path)
    assert read_stock_records(feed, layout) == [StockRecord(identity="555", quantity="8")]


def test_unknown_layout_rule_is_rejected(tmp_path):
    layout_path = tmp_path / "layout.yml"
    layout_path.write_text("identity:\n  - regex: '.*'\nquantity:\n  - position: 1\n")
    with pytest.raises(ValueError):
        load_layout(layout_path)
