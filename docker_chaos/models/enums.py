"""
Enumerations for Docker Chaos SDK.

This module defines all enums used across the SDK for type safety
and IDE autocompletion.
"""

from enum import Enum


class ExecutionStrategy(str, Enum):
    """
    How a `tc` invocation reaches the target's network namespace.

    Attributes:
        IN_NAMESPACE: Exec the tool inside the target container
        HELPER_CONTAINER: Run the tool from a short-lived helper container
            sharing the target's network namespace
    """

    IN_NAMESPACE = "in-namespace"
    HELPER_CONTAINER = "helper-container"


class StopState(str, Enum):
    """
    States of the two-phase stop sequence.

    RUNNING -> GRACEFUL_SIGNAL_SENT -> WAITING_GRACEFUL ->
    (STOPPED | FORCE_SIGNAL_SENT -> WAITING_FORCE -> (STOPPED | UNSTOPPABLE))
    """

    RUNNING = "running"
    GRACEFUL_SIGNAL_SENT = "graceful-signal-sent"
    WAITING_GRACEFUL = "waiting-graceful"
    FORCE_SIGNAL_SENT = "force-signal-sent"
    WAITING_FORCE = "waiting-force"
    STOPPED = "stopped"
    UNSTOPPABLE = "unstoppable"


class WaitResult(str, Enum):
    """
    Outcome of polling a container for its running state.

    Attributes:
        STOPPED: The runtime reported the container as not running
        GONE: Polling failed, the container most likely disappeared
        TIMED_OUT: The container was still running when the wait expired
    """

    STOPPED = "stopped"
    GONE = "gone"
    TIMED_OUT = "timed-out"


class ChaosOperation(str, Enum):
    """Operations exposed by the chaos manager."""

    STOP = "stop"
    KILL = "kill"
    START = "start"
    RENAME = "rename"
    REMOVE_IMAGE = "remove-image"
    REMOVE_CONTAINER = "remove-container"
    PAUSE = "pause"
    UNPAUSE = "unpause"
    NETEM_START = "netem-start"
    NETEM_STOP = "netem-stop"


# Signals used by the stop sequence
DEFAULT_STOP_SIGNAL = "SIGTERM"
DEFAULT_KILL_SIGNAL = "SIGKILL"

# Label marking containers that chaos selection must never target
SKIP_LABEL = "io.docker-chaos.skip"
