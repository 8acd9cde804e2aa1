"""Progress sinks for the sync loop."""

from __future__ import annotations

from tqdm import tqdm


class ProgressReporter:
    """No-op reporter; subclasses render progress somewhere."""

    def start(self, total: int) -> None:
        pass

    def advance(self) -> None:
        pass

    def close(self) -> None:
        pass


class TqdmProgress(ProgressReporter):
    def __init__(self, *, desc: str = "Products updated") -> None:
        self.desc = desc
        self._bar: tqdm | None = None

    def start(self, total: int) -> None:
        self._bar = tqdm(total=total, desc=self.desc, unit="product")

    def advance(self) -> None:
        if self._bar is not None:
            self._bar.update(1)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
