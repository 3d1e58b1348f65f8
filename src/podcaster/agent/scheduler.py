"""Deferred operations: trigger specs, the facility contract and the hook.

The facility only has to honor ``register``. When an operation fires, the
facility calls ``run_operation(name, payload)`` on the session it serves,
which re-enters the session as a synthetic user turn. Nothing here retries
a fired operation.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, Field

from podcaster.agent.session import EXECUTE_TASK

if TYPE_CHECKING:
    from podcaster.agent.context import ToolContext

logger = logging.getLogger(__name__)

CRON_FIELDS = 5


class TriggerType(StrEnum):
    SCHEDULED = "scheduled"
    DELAYED = "delayed"
    CRON = "cron"


class ScheduleTrigger(BaseModel):
    """When an operation should fire. Exactly one of the value fields is set."""

    type: TriggerType
    at: datetime | None = None
    delay_seconds: int | None = None
    cron: str | None = None

    def describe(self) -> str:
        match self.type:
            case TriggerType.SCHEDULED:
                return f"at {self.at.isoformat() if self.at else '?'}"
            case TriggerType.DELAYED:
                return f"in {self.delay_seconds} seconds"
            case TriggerType.CRON:
                return f'on cron schedule "{self.cron}"'


class ScheduledOperation(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    trigger: ScheduleTrigger
    operation_name: str
    payload: str


class OperationTarget(Protocol):
    def run_operation(self, name: str, payload: str) -> None: ...


class SchedulingFacility(ABC):
    """Registration contract for deferred operations."""

    @abstractmethod
    def register(self, trigger: ScheduleTrigger, operation_name: str, payload: str) -> str:
        """Register an operation and return a handle for it."""


class InMemoryScheduler(SchedulingFacility):
    """Keeps registered operations in memory and fires them on demand."""

    def __init__(self, target: OperationTarget) -> None:
        self.target = target
        self.operations: dict[str, ScheduledOperation] = {}

    def register(self, trigger: ScheduleTrigger, operation_name: str, payload: str) -> str:
        operation = ScheduledOperation(trigger=trigger, operation_name=operation_name, payload=payload)
        self.operations[operation.id] = operation
        logger.info("Registered %s %s (%s)", operation_name, operation.id, trigger.describe())
        return operation.id

    def fire(self, handle: str) -> None:
        """Run a registered operation once and forget it."""
        operation = self.operations.pop(handle, None)
        if operation is None:
            logger.warning("No scheduled operation with handle %s", handle)
            return
        self.target.run_operation(operation.operation_name, operation.payload)

    def fire_all(self) -> int:
        handles = list(self.operations)
        for handle in handles:
            self.fire(handle)
        return len(handles)


def build_trigger(trigger_type: str, when: int | str) -> ScheduleTrigger:
    """Validate ``when`` for the given trigger type.

    Raises:
        ValueError: If the type is unknown or ``when`` does not fit it.
    """
    kind = TriggerType(trigger_type)
    match kind:
        case TriggerType.SCHEDULED:
            return ScheduleTrigger(type=kind, at=_parse_datetime(when))
        case TriggerType.DELAYED:
            seconds = int(when)
            if seconds < 0:
                raise ValueError(f"Delay must not be negative: {seconds}")
            return ScheduleTrigger(type=kind, delay_seconds=seconds)
        case TriggerType.CRON:
            pattern = str(when).strip()
            if len(pattern.split()) != CRON_FIELDS:
                raise ValueError(f"Cron pattern must have {CRON_FIELDS} fields: {pattern!r}")
            return ScheduleTrigger(type=kind, cron=pattern)


def _parse_datetime(when: int | str) -> datetime:
    if isinstance(when, int) or str(when).strip().isdigit():
        return datetime.fromtimestamp(int(when), tz=UTC)
    parsed = datetime.fromisoformat(str(when).strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def schedule_operation(ctx: ToolContext, trigger_type: str, when: int | str, payload: str) -> str:
    """Register ``payload`` to be replayed into the session later. Always returns text."""
    try:
        trigger = build_trigger(trigger_type, when)
    except ValueError as exc:
        logger.warning("Invalid schedule (%s, %r): %s", trigger_type, when, exc)
        return f"Error scheduling task: {exc}"

    try:
        ctx.scheduler.register(trigger, EXECUTE_TASK, payload)
    except Exception as exc:
        logger.error("Scheduling facility rejected task", exc_info=True)
        return f"Error scheduling task: {exc}"

    return f"Task scheduled {trigger.describe()}: {payload}"
