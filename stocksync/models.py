"""Pipeline data models."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class RawRecord:
    header: tuple[str, ...]
    values: list[str]

    def get(self, name: str) -> str | None:
        try:
            index = self.header.index(name)
        except ValueError:
            return None
        return self.at(index)

    def at(self, index: int) -> str | None:
        if 0 <= index < len(self.values):
            return self.values[index]
        return None


@dataclass(frozen=True, slots=True)
class StockRecord:
    identity: str | None
    quantity: str | None


@dataclass(frozen=True, slots=True)
class CatalogMatch:
    parent_id: Any
    variation_id: Any


class OutcomeKind(str, enum.Enum):
    UPDATED = "updated"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    identity: str | None
    kind: OutcomeKind
    reason: str | None = None

    @classmethod
    def updated(cls, identity: str | None) -> SyncOutcome:
        return cls(identity, OutcomeKind.UPDATED)

    @classmethod
    def not_found(cls, identity: str | None) -> SyncOutcome:
        return cls(identity, OutcomeKind.NOT_FOUND)

    @classmethod
    def failed(cls, identity: str | None, reason: str) -> SyncOutcome:
        return cls(identity, OutcomeKind.FAILED, reason)


class RunState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    VERIFYING = "verifying"
    NORMALIZING = "normalizing"
    SYNCING = "syncing"
    ARCHIVING = "archiving"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(slots=True)
class SyncSummary:
    total: int = 0
    outcomes: list[SyncOutcome] = field(default_factory=list)
    archived_path: Path | None = None

    def record(self, outcome: SyncOutcome) -> None:
        self.outcomes.append(outcome)

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for outcome in self.outcomes if outcome.kind is kind)

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    @property
    def updated(self) -> int:
        return self.count(OutcomeKind.UPDATED)

    @property
    def not_found(self) -> int:
        return self.count(OutcomeKind.NOT_FOUND)

    @property
    def failed(self) -> int:
        return self.count(OutcomeKind.FAILED)

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "updated": self.updated,
            "not_found": self.not_found,
            "failed": self.failed,
        }
