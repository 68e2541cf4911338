"""
Bounded two-phase stop sequence.

The sequencer guarantees a container reaches "not running" within the
caller's timeout, preferring graceful shutdown:

    RUNNING -> GRACEFUL_SIGNAL_SENT -> WAITING_GRACEFUL
            -> FORCE_SIGNAL_SENT -> WAITING_FORCE -> STOPPED | UNSTOPPABLE

The two waits read polling errors differently. During the graceful wait an
error is only logged. During the force wait an error means the container
disappeared, which counts as stopped, while a timeout without error counts
as failure.
"""

import logging
import time
from typing import Callable, List, Optional

from docker_chaos.client import RuntimeClient
from docker_chaos.config import config
from docker_chaos.exceptions import (
    ContainerNotFoundError,
    ContainerNotRunningError,
    ContainerStopTimeoutError,
    DockerChaosError,
)
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.enums import DEFAULT_KILL_SIGNAL, StopState, WaitResult

logger = logging.getLogger(__name__)


class StopSequence:
    """
    State of one stop call.

    Attributes:
        container: Target container
        timeout: Per-phase wait timeout in seconds
        history: Visited states, starting with RUNNING
        graceful_wait: Outcome of the graceful wait
        force_wait: Outcome of the force wait
    """

    def __init__(self, container: ContainerSnapshot, timeout: float):
        self.container = container
        self.timeout = timeout
        self.history: List[StopState] = [StopState.RUNNING]
        self.graceful_wait: Optional[WaitResult] = None
        self.force_wait: Optional[WaitResult] = None

    @property
    def state(self) -> StopState:
        return self.history[-1]

    def transition(self, state: StopState) -> None:
        logger.debug("Stop %s: %s -> %s", self.container, self.state.value, state.value)
        self.history.append(state)


class StopSequencer:
    """
    Runs stop sequences against the Docker daemon.

    Each call works on its own StopSequence; the sequencer keeps no
    per-call state.
    """

    def __init__(
        self,
        client: RuntimeClient,
        poll_interval: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.poll_interval = poll_interval if poll_interval is not None else config.stop_poll_interval
        self._sleep = sleep
        self._clock = clock

    def stop(self, container: ContainerSnapshot, timeout: float) -> StopSequence:
        """
        Stop a container: graceful signal, wait, SIGKILL, wait.

        Args:
            container: Target container
            timeout: Maximum wait of each phase in seconds

        Returns:
            The finished StopSequence

        Raises:
            ContainerStopTimeoutError: If still running after the force wait
            ContainerNotFoundError: If the container is gone before the
                graceful signal
        """
        sequence = StopSequence(container, timeout)
        signal = container.graceful_signal()

        logger.debug("Sending %s to %s", signal, container)
        try:
            self.client.kill_container(container.id, signal)
        except ContainerNotRunningError:
            logger.debug("Container %s already stopped before %s", container, signal)
        sequence.transition(StopState.GRACEFUL_SIGNAL_SENT)

        sequence.transition(StopState.WAITING_GRACEFUL)
        sequence.graceful_wait = self.wait_for_stop(container, timeout)
        if sequence.graceful_wait is WaitResult.GONE:
            logger.debug("Error waiting for container %s to stop, proceeding with %s",
                         container, DEFAULT_KILL_SIGNAL)

        # SIGKILL is sent even after a reported stop, state may have changed since the poll
        logger.debug("Killing container %s with %s", container, DEFAULT_KILL_SIGNAL)
        try:
            self.client.kill_container(container.id, DEFAULT_KILL_SIGNAL)
        except (ContainerNotRunningError, ContainerNotFoundError) as e:
            logger.debug("%s not delivered to %s: %s", DEFAULT_KILL_SIGNAL, container, e)
        sequence.transition(StopState.FORCE_SIGNAL_SENT)

        sequence.transition(StopState.WAITING_FORCE)
        sequence.force_wait = self.wait_for_stop(container, timeout)
        if sequence.force_wait is WaitResult.TIMED_OUT:
            sequence.transition(StopState.UNSTOPPABLE)
            raise ContainerStopTimeoutError(container.name, container.id)

        sequence.transition(StopState.STOPPED)
        logger.debug("Container %s stopped (%s)", container, sequence.force_wait.value)
        return sequence

    def wait_for_stop(self, container: ContainerSnapshot, timeout: float) -> WaitResult:
        """
        Poll the running state until the container stops or timeout elapses.

        The container is polled at least once.

        Returns:
            STOPPED if reported not running, GONE if polling failed,
            TIMED_OUT if still running at the deadline
        """
        deadline = self._clock() + timeout

        while True:
            try:
                if not self.client.is_running(container.id):
                    return WaitResult.STOPPED
            except DockerChaosError as e:
                logger.debug("Polling %s failed: %s", container, e)
                return WaitResult.GONE

            if self._clock() >= deadline:
                return WaitResult.TIMED_OUT

            self._sleep(self.poll_interval)
