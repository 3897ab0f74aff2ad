"""
Progress reporting for circuit runs.

``Circuit.run()`` calls ``start(total)``, then ``step(position, step)`` after
each applied gate, then ``done()``. Reporters are advisory: they see the
step records, never the amplitudes, and cannot change the outcome.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from tiny_qsim.logging import get_logger

if TYPE_CHECKING:
    from tiny_qsim.circuit import Step


class ProgressReporter:
    """Base reporter; ignores every notification."""

    def start(self, total: int) -> None:
        pass

    def step(self, position: int, step: Step) -> None:
        pass

    def done(self) -> None:
        pass


NullProgress = ProgressReporter


class LoggingProgress(ProgressReporter):
    """
    Report progress through the package logger.

    Parameters
    ----------
    every : int
        Log one line per this many steps (the last step is always logged).
    level : int
        Level of the progress records.
    """

    def __init__(self, every: int = 1, level: int = logging.INFO) -> None:
        self.every = max(1, every)
        self.level = level
        self._logger = get_logger(__name__)
        self._total = 0
        self._started = 0.0

    def start(self, total: int) -> None:
        self._total = total
        self._started = time.perf_counter()
        self._logger.log(self.level, "starting %d step(s)", total)

    def step(self, position: int, step: Step) -> None:
        done = position + 1
        if done % self.every == 0 or done == self._total:
            self._logger.log(
                self.level, "step %d/%d: %s on %s", done, self._total, step.label, step.placement
            )

    def done(self) -> None:
        elapsed = time.perf_counter() - self._started
        self._logger.log(self.level, "finished %d step(s) in %.3fs", self._total, elapsed)
