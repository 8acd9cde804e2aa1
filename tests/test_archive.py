import pendulum

from stocksync.feed.archive import archive_feed, archive_name
from stocksync.utils.dates import compact_timestamp


def test_compact_timestamp_is_utc_without_separators():
    moment = pendulum.datetime(2026, 10, 19, 17, 30, 45, 123456, tz="Europe/Rome")
    assert compact_timestamp(moment) == "20261019T153045"


def test_archive_name():
    moment = pendulum.datetime(2026, 1, 2, 3, 4, 5, tz="UTC")
    assert archive_name("giacenze", moment) == "giacenze_20260102T030405.csv"


def test_archive_feed_moves_file(tmp_path):
    feed = tmp_path / "giacenze.csv"
    feed.write_text("EAN13;Giacenza\n")
    archive_dir = tmp_path / "nested" / "archive"
    moment = pendulum.datetime(2026, 1, 2, 3, 4, 5, tz="UTC")

    target = archive_feed(feed, archive_dir, "giacenze", moment=moment)

    assert target == archive_dir / "giacenze_20260102T030405.csv"
    assert target.read_text() == "EAN13;Giacenza\n"
    assert not feed.exists()
