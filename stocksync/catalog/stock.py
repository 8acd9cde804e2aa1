"""Resolve feed identities to catalog entries and push stock quantities."""

from __future__ import annotations

import logging
import re
from typing import Any

from stocksync.catalog.woocommerce import WooCommerceClient
from stocksync.errors import CatalogError
from stocksync.models import CatalogMatch, StockRecord, SyncOutcome

logger = logging.getLogger(__name__)

THOUSANDS_RE = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def match_from_entry(entry: dict[str, Any]) -> CatalogMatch:
    """A variation is addressed through its parent; anything else through itself."""
    own_id = entry["id"]
    parent_id = entry.get("parent_id") or own_id
    return CatalogMatch(parent_id=parent_id, variation_id=own_id)


async def resolve_match(client: WooCommerceClient, identity: str) -> CatalogMatch | None:
    entries = await client.find_products(identity)
    if not entries:
        return None
    first = entries[0]
    if not isinstance(first, dict) or "id" not in first:
        raise CatalogError(f"Catalog entry for {identity} has no id", detail=first)
    if len(entries) > 1:
        logger.warning("SKU %s matched %s catalog entries; using id %s", identity, len(entries), first["id"])
    return match_from_entry(first)


def coerce_quantity(value: Any) -> int:
    """Interpret a feed quantity as an integer; anything unreadable is 0.

    Italian number formatting is accepted: `.` or spaces group thousands and
    `,` marks decimals, so "1.234,00" and "1 234" both read as 1234.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    text = "".join(str(value).split())
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    elif THOUSANDS_RE.match(text):
        text = text.replace(".", "")
    try:
        return int(float(text))
    except (TypeError, ValueError, OverflowError):
        if text:
            logger.warning("Unreadable quantity %r sent as 0", value)
        return 0


async def apply_quantity(client: WooCommerceClient, match: CatalogMatch, quantity: Any) -> None:
    payload = {"manage_stock": True, "stock_quantity": coerce_quantity(quantity)}
    await client.update_variation(match.parent_id, match.variation_id, payload)


class StockUpdater:
    """Runs resolve + apply for one record, turning every error into an outcome."""

    def __init__(self, client: WooCommerceClient) -> None:
        self.client = client

    async def sync_record(self, record: StockRecord) -> SyncOutcome:
        identity = (record.identity or "").strip()
        if not identity:
            logger.error("Row without product code skipped (quantity %r)", record.quantity)
            return SyncOutcome.failed(record.identity, "missing product code")
        try:
            match = await resolve_match(self.client, identity)
        except CatalogError as exc:
            logger.error("Lookup failed for SKU %s: %s", identity, exc.detail)
            return SyncOutcome.failed(identity, _describe(exc))
        if match is None:
            logger.warning("Product not found for SKU %s", identity)
            return SyncOutcome.not_found(identity)
        try:
            await apply_quantity(self.client, match, record.quantity)
        except CatalogError as exc:
            logger.error("Update failed for SKU %s: %s", identity, exc.detail)
            return SyncOutcome.failed(identity, _describe(exc))
        return SyncOutcome.updated(identity)


def _describe(exc: CatalogError) -> str:
    detail = exc.detail
    if isinstance(detail, dict) and detail.get("message"):
        return f"{exc}: {detail['message']}"
    return f"{exc}: {detail}"
