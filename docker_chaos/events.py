"""
Chaos intent events.

Every manager operation emits one ChaosIntent before acting. Sinks decide how
intents are presented; the default LoggingIntentSink logs them, prefixing dry
runs so they stand apart from real actions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.enums import ChaosOperation

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX = "DRY: "


class ChaosIntent(BaseModel):
    """
    The action an operation is about to take.

    Attributes:
        operation: Manager operation
        container_id: Target container ID
        container_name: Target container name
        params: Operation parameters (signal, timeout, netem arguments, ...)
        dry_run: Whether the action is only reported
    """

    model_config = ConfigDict(frozen=True)

    operation: ChaosOperation
    container_id: str
    container_name: str
    params: Dict[str, Any] = Field(default_factory=dict)
    dry_run: bool = False

    @classmethod
    def for_container(
        cls,
        operation: ChaosOperation,
        container: ContainerSnapshot,
        dry_run: bool,
        **params: Any
    ) -> ChaosIntent:
        return cls(
            operation=operation,
            container_id=container.id,
            container_name=container.name,
            params=params,
            dry_run=dry_run,
        )

    def describe(self) -> str:
        """Human-readable one-line description."""
        params = ", ".join(f"{k}={v}" for k, v in self.params.items() if v is not None)
        text = f"{self.operation.value} {self.container_name} ({self.container_id})"
        return f"{text} [{params}]" if params else text


@runtime_checkable
class IntentSink(Protocol):
    """Protocol for intent sinks."""

    def emit(self, intent: ChaosIntent) -> None:
        ...


class LoggingIntentSink:
    """Log intents at INFO level, prefixing dry runs."""

    def __init__(self, target_logger: Optional[logging.Logger] = None):
        self._logger = target_logger or logger

    def emit(self, intent: ChaosIntent) -> None:
        prefix = DRY_RUN_PREFIX if intent.dry_run else ""
        self._logger.info("%s%s", prefix, intent.describe())


class RecordingIntentSink:
    """Keep intents in memory, e.g. for tests or experiment reports."""

    def __init__(self) -> None:
        self.intents: List[ChaosIntent] = []

    def emit(self, intent: ChaosIntent) -> None:
        self.intents.append(intent)


class MultiSink:
    """Composite sink that broadcasts intents to multiple sinks."""

    def __init__(self, sinks: Optional[List[IntentSink]] = None):
        self._sinks: List[IntentSink] = list(sinks) if sinks else []

    def add(self, sink: IntentSink) -> None:
        self._sinks.append(sink)

    def emit(self, intent: ChaosIntent) -> None:
        for sink in self._sinks:
            sink.emit(intent)
