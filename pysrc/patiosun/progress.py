"""
Progress reporting for long batch runs (day timelines over many venues).

Draws a tqdm terminal bar by default. A host application can pass its own
``callback(current, total)`` instead (a slider tooltip, a status line), or
disable output entirely.

Usage:
    from patiosun.progress import get_progress_iterator, ProgressReporter

    for step in get_progress_iterator(steps, desc="Classifying day"):
        process(step)

    with ProgressReporter(total=96, desc="Timeline", callback=on_progress) as progress:
        for minute in range(0, 1440, 15):
            classify(minute)
            progress.update()
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

from tqdm import tqdm

T = TypeVar("T")

ProgressCallback = Callable[[int, int], None]


class ProgressReporter:
    """
    Step counter that forwards to a tqdm bar or a caller-supplied callback.

    Args:
        total: Total number of steps (0 when unknown).
        desc: Label shown next to the bar.
        callback: Optional ``callback(current, total)``. When given, no tqdm
            bar is drawn.
        disable: If True, count silently.
    """

    def __init__(
        self,
        total: int,
        desc: str = "",
        callback: ProgressCallback | None = None,
        disable: bool = False,
    ):
        self.total = total
        self.desc = desc
        self.current = 0
        self.disable = disable
        self._callback = None if disable else callback
        self._bar = None if disable or callback is not None else tqdm(total=total, desc=desc)
        self._closed = False

    def __enter__(self) -> ProgressReporter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def update(self, n: int = 1) -> None:
        """Advance by ``n`` steps. Ignored after :meth:`close`."""
        if self._closed:
            return
        self.current += n
        if self._callback is not None:
            self._callback(self.current, self.total)
        elif self._bar is not None:
            self._bar.update(n)

    def set_description(self, desc: str) -> None:
        self.desc = desc
        if self._bar is not None:
            self._bar.set_description(desc)

    def close(self) -> None:
        """Finish reporting; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._bar is not None:
            self._bar.close()


def _reporting(iterable: Iterable[T], reporter: ProgressReporter) -> Iterator[T]:
    with reporter:
        for item in iterable:
            reporter.update()
            yield item


def get_progress_iterator(
    iterable: Iterable[T],
    desc: str = "",
    total: int | None = None,
    callback: ProgressCallback | None = None,
    disable: bool = False,
) -> Iterator[T]:
    """
    Wrap an iterable so each consumed item advances a progress reporter.

    Args:
        iterable: Items to iterate.
        desc: Label for the progress bar.
        total: Number of items. Taken from ``len()`` when omitted, else 0.
        callback: Optional ``callback(current, total)`` instead of a tqdm bar.
        disable: If True, report nothing.

    Returns:
        Iterator over the same items. The reporter closes when it is exhausted.
    """
    if total is None:
        total = len(iterable) if hasattr(iterable, "__len__") else 0  # type: ignore[arg-type]

    reporter = ProgressReporter(total=total, desc=desc, callback=callback, disable=disable)
    return _reporting(iterable, reporter)
