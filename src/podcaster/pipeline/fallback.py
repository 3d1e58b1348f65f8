"""Ordered fallback strategies for a single pipeline stage.

A stage lists its strategies from richest to most basic. Each strategy
either returns a usable value, returns ``None`` (nothing usable), or
raises; any exception counts as a failed strategy. The chain stops at
the first usable value and reports which strategy produced it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[T]):
    """One named way of producing a stage's value."""

    name: str
    run: Callable[[], T | None]


@dataclass(frozen=True)
class StageOutcome(Generic[T]):
    """Result of running a fallback chain.

    ``strategy`` is the name of the strategy that produced ``value``, or
    ``None`` when every strategy came up empty. ``errors`` holds one
    message per strategy that raised, in order.
    """

    value: T | None
    strategy: str | None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.strategy is not None

    def used(self, name: str) -> bool:
        return self.strategy == name


class FallbackChain(Generic[T]):
    """Evaluate strategies in order until one yields a usable value."""

    def __init__(self, label: str, strategies: Sequence[Strategy[T]]) -> None:
        self.label = label
        self.strategies = list(strategies)

    def run(self) -> StageOutcome[T]:
        errors: list[str] = []
        for strategy in self.strategies:
            try:
                value = strategy.run()
            except Exception as exc:
                logger.warning(
                    "%s: strategy %s failed: %s", self.label, strategy.name, exc, exc_info=True
                )
                errors.append(f"{strategy.name}: {exc}")
                continue
            if value is None or (isinstance(value, str) and not value.strip()):
                logger.info("%s: strategy %s yielded nothing", self.label, strategy.name)
                continue
            return StageOutcome(value=value, strategy=strategy.name, errors=errors)

        logger.warning("%s: all %d strategies exhausted", self.label, len(self.strategies))
        return StageOutcome(value=None, strategy=None, errors=errors)
