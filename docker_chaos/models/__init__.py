"""Docker Chaos SDK models package initialization."""

from docker_chaos.models.enums import ChaosOperation, ExecutionStrategy, StopState
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.selector import ContainerSelector
from docker_chaos.models.netem import (
    NetemParams,
    NetemDelayParams,
    NetemLossParams,
    NetemDuplicateParams,
    NetemCorruptParams,
    NetemRateParams,
    NetemReorderParams,
)


__all__ = [
    "ChaosOperation",
    "ExecutionStrategy",
    "StopState",
    "ContainerSnapshot",
    "ContainerSelector",
    "NetemParams",
    "NetemDelayParams",
    "NetemLossParams",
    "NetemDuplicateParams",
    "NetemCorruptParams",
    "NetemRateParams",
    "NetemReorderParams",
]
