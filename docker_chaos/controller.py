"""
Chaos experiment lifecycle controller.

Provides the ChaosController context manager that reverts the disruptions it
applied (netem, pause) when the context exits, and timed variants that revert
after a duration.
"""

import logging
import time
from typing import Callable, List, NamedTuple, Optional, Union

from docker_chaos.exceptions import NetemSequenceError
from docker_chaos.manager import ChaosManager, NetemArgs
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.utils import parse_duration


logger = logging.getLogger(__name__)


class ActiveNetem(NamedTuple):
    container: ContainerSnapshot
    interface: Optional[str]


class ChaosController:
    """
    Context manager for reversible chaos on containers.

    Ensures netem disruptions are removed and paused containers resumed,
    even if tests fail or crash. Delegates actual operations to ChaosManager.
    Dry-run operations are not tracked since nothing was applied.
    """

    def __init__(
        self,
        manager: Optional[ChaosManager] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """Initialize chaos controller with optional custom manager."""
        self.manager = manager or ChaosManager()
        self.active_netem: List[ActiveNetem] = []
        self.paused: List[ContainerSnapshot] = []
        self._sleep = sleep
        logger.debug("ChaosController initialized")

    def __enter__(self) -> "ChaosController":
        """Enter context manager."""
        logger.debug("Entering ChaosController context")
        return self

    def netem(
        self,
        container: ContainerSnapshot,
        netem_args: NetemArgs,
        interface: Optional[str] = None,
        target_ip: Optional[str] = None,
        duration: Optional[Union[str, int]] = None,
        dry_run: bool = False
    ) -> ContainerSnapshot:
        """
        Start netem on a container and track it for cleanup.

        Args:
            container: Target container
            netem_args: Netem arguments or NetemParams model
            interface: Network interface (default: config.network_interface)
            target_ip: Only disrupt traffic toward this address
            duration: If set ("30s", "5m" or seconds), remove netem after it
            dry_run: Only report the actions

        Returns:
            The container (for method chaining)

        Raises:
            NetemSequenceError: If the filtered setup fails partway; the
                container is still tracked so the exit removes the leftovers
        """
        entry = ActiveNetem(container, interface)
        try:
            self.manager.netem_start(
                container, netem_args, interface=interface, target_ip=target_ip, dry_run=dry_run
            )
        except NetemSequenceError:
            # Partially applied qdiscs are removed on exit
            self.active_netem.append(entry)
            raise
        if dry_run:
            return container

        self.active_netem.append(entry)

        if duration is not None:
            self._wait(duration)
            self.manager.netem_stop(container, interface=interface)
            self.active_netem.remove(entry)

        return container

    def pause(
        self,
        container: ContainerSnapshot,
        duration: Optional[Union[str, int]] = None,
        dry_run: bool = False
    ) -> ContainerSnapshot:
        """
        Pause a container and track it for cleanup.

        Args:
            container: Target container
            duration: If set ("30s", "5m" or seconds), unpause after it
            dry_run: Only report the actions
        """
        self.manager.pause(container, dry_run=dry_run)
        if dry_run:
            return container

        self.paused.append(container)

        if duration is not None:
            self._wait(duration)
            self.manager.unpause(container)
            self.paused.remove(container)

        return container

    def _wait(self, duration: Union[str, int]) -> None:
        seconds = parse_duration(duration) if isinstance(duration, str) else duration
        logger.info("Keeping chaos active for %ss", seconds)
        self._sleep(seconds)

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit context manager and revert all active disruptions.

        Cleanup happens regardless of exceptions. Failures are logged but don't
        prevent cleanup of other disruptions.
        """
        if exc_type:
            logger.warning("Exiting with exception: %s", exc_type.__name__)

        logger.info(
            "Cleaning up %d netem disruptions and %d paused containers",
            len(self.active_netem), len(self.paused)
        )

        cleanup_errors = []

        for entry in self.active_netem:
            try:
                self.manager.netem_stop(entry.container, interface=entry.interface)
            except Exception as e:
                error_msg = f"Failed to stop netem on {entry.container}: {e}"
                logger.error(error_msg)
                cleanup_errors.append(error_msg)

        for container in self.paused:
            try:
                self.manager.unpause(container)
            except Exception as e:
                error_msg = f"Failed to unpause {container}: {e}"
                logger.error(error_msg)
                cleanup_errors.append(error_msg)

        self.active_netem.clear()
        self.paused.clear()

        if cleanup_errors:
            details = "\n".join(f"  - {err}" for err in cleanup_errors)
            logger.warning(
                "Cleanup completed with %d errors:\n%s", len(cleanup_errors), details
            )
        else:
            logger.info("Cleanup completed successfully")

        return False  # Don't suppress exceptions from the with block

    def cleanup_all(self) -> None:
        """Manually trigger cleanup of all active disruptions."""
        logger.info("Manual cleanup triggered")
        self.__exit__(None, None, None)
