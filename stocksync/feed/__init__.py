"""Feed helpers."""

from __future__ import annotations

import pathlib
from typing import Any

import yaml

from stocksync.feed.normalize import ColumnRule, ExtractionRule, FeedLayout, PositionRule

LAYOUT_PATH = pathlib.Path(__file__).with_name("layout.yml")


def load_layout(path: pathlib.Path | None = None) -> FeedLayout:
    data = yaml.safe_load((path or LAYOUT_PATH).read_text())
    return FeedLayout(
        delimiter=data.get("delimiter", ";"),
        encoding=data.get("encoding", "utf-8-sig"),
        identity_rules=[_parse_rule(item) for item in data["identity"]],
        quantity_rules=[_parse_rule(item) for item in data["quantity"]],
    )


def _parse_rule(item: dict[str, Any]) -> ExtractionRule:
    if "column" in item:
        return ColumnRule(str(item["column"]))
    if "position" in item:
        return PositionRule(int(item["position"]))
    raise ValueError(f"Unknown extraction rule: {item!r}")
