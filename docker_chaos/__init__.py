"""
Docker Chaos SDK - chaos engineering for Docker containers.

This SDK stops, kills, pauses and removes containers and degrades their
network (delay, loss, corruption, bandwidth) with netem, optionally only for
traffic toward one address, without modifying container images. Every
operation supports dry runs for safe rehearsal of experiments.
"""

from docker_chaos.config import ChaosConfig
from docker_chaos.client import RuntimeClient
from docker_chaos.controller import ChaosController
from docker_chaos.events import ChaosIntent, LoggingIntentSink, MultiSink, RecordingIntentSink
from docker_chaos.exceptions import (
    DockerChaosError,
    RuntimeUnavailableError,
    ContainerNotFoundError,
    ContainerRuntimeError,
    ContainerNotRunningError,
    ContainerStopTimeoutError,
    ToolMissingError,
    ToolFailedError,
    NetemSequenceError,
    AmbiguousSelectorError,
    ValidationError,
)
from docker_chaos.manager import ChaosManager
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.selector import ContainerSelector
from docker_chaos.models.enums import ChaosOperation, ExecutionStrategy, StopState
from docker_chaos.models.netem import (
    NetemDelayParams,
    NetemLossParams,
    NetemDuplicateParams,
    NetemCorruptParams,
    NetemRateParams,
    NetemReorderParams,
)

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "ChaosConfig",
    # Client
    "RuntimeClient",
    # Manager / Controller
    "ChaosManager",
    "ChaosController",
    # Events
    "ChaosIntent",
    "LoggingIntentSink",
    "MultiSink",
    "RecordingIntentSink",
    # Exceptions
    "DockerChaosError",
    "RuntimeUnavailableError",
    "ContainerNotFoundError",
    "ContainerRuntimeError",
    "ContainerNotRunningError",
    "ContainerStopTimeoutError",
    "ToolMissingError",
    "ToolFailedError",
    "NetemSequenceError",
    "AmbiguousSelectorError",
    "ValidationError",
    # Models
    "ContainerSnapshot",
    "ContainerSelector",
    "ChaosOperation",
    "ExecutionStrategy",
    "StopState",
    # Netem parameters
    "NetemDelayParams",
    "NetemLossParams",
    "NetemDuplicateParams",
    "NetemCorruptParams",
    "NetemRateParams",
    "NetemReorderParams",
]
