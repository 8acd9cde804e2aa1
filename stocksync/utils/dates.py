"""Datetime helpers."""

from __future__ import annotations

import os

import pendulum

DEFAULT_TZ = "Europe/Rome"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def compact_timestamp(moment: pendulum.DateTime) -> str:
    """ISO-8601 basic format in UTC, without fractional seconds."""
    return moment.in_timezone("UTC").strftime("%Y%m%dT%H%M%S")
