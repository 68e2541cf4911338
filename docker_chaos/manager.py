"""
Chaos Manager.

This module implements the single entry point for chaos operations on
containers: lifecycle chaos (stop, kill, pause, remove, ...) and network
chaos (netem start/stop). Every operation emits one intent before acting
and honors dry-run: a dry run makes no Docker call at all.
"""

import logging
from typing import List, Optional, Sequence, Union

from docker_chaos.client import RuntimeClient
from docker_chaos.config import config
from docker_chaos.events import ChaosIntent, IntentSink, LoggingIntentSink
from docker_chaos.exceptions import DockerChaosError, ValidationError
from docker_chaos.executor import CommandExecutor, execute_sequence, select_executor
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.enums import DEFAULT_KILL_SIGNAL, ChaosOperation
from docker_chaos.models.netem import NetemParams
from docker_chaos.models.selector import ContainerFilter, ContainerSelector
from docker_chaos.netem import build_commands, build_stop
from docker_chaos.sequencer import StopSequence, StopSequencer
from docker_chaos.utils import validate_ip, validate_signal

logger = logging.getLogger(__name__)

NetemArgs = Union[NetemParams, str, Sequence[str]]


class ChaosManager:
    """
    Manager for container chaos operations.

    Holds only the runtime client, the selected tc executor, the stop
    sequencer and the intent sink, so one manager may serve concurrent
    callers working on different containers. Operations on the same
    container or interface must be serialized by the caller.
    """

    def __init__(
        self,
        client: Optional[RuntimeClient] = None,
        tc_image: Optional[str] = None,
        sink: Optional[IntentSink] = None,
        sequencer: Optional[StopSequencer] = None,
    ):
        """
        Initialize manager.

        Args:
            client: RuntimeClient instance (creates new if not provided)
            tc_image: Helper image providing `tc` (default: config.tc_image);
                empty runs `tc` inside the target container
            sink: Intent sink (default: LoggingIntentSink)
            sequencer: Stop sequencer (default: one built on the client)
        """
        self.client = client or RuntimeClient()
        self.tc_image = config.tc_image if tc_image is None else tc_image
        self.executor: CommandExecutor = select_executor(self.client, self.tc_image)
        self.sink = sink or LoggingIntentSink()
        self.sequencer = sequencer or StopSequencer(self.client)

    def _emit(
        self,
        operation: ChaosOperation,
        container: ContainerSnapshot,
        dry_run: bool,
        **params
    ) -> None:
        self.sink.emit(ChaosIntent.for_container(operation, container, dry_run, **params))

    def list_containers(
        self,
        selector: Optional[Union[ContainerSelector, ContainerFilter]] = None
    ) -> List[ContainerSnapshot]:
        """
        List running containers matching a selector.

        Args:
            selector: ContainerSelector or predicate (default: all)

        Returns:
            Container snapshots
        """
        containers = self.client.list_containers(selector)
        logger.debug("Selected %d containers with %s", len(containers), selector or "all")
        return containers

    def stop(
        self,
        container: ContainerSnapshot,
        timeout: Optional[int] = None,
        dry_run: bool = False
    ) -> Optional[StopSequence]:
        """
        Stop a container with the bounded two-phase sequence.

        Args:
            container: Target container
            timeout: Per-phase wait in seconds (default: config.stop_timeout)
            dry_run: Only report the action

        Returns:
            The finished StopSequence, None on dry run

        Raises:
            ContainerStopTimeoutError: If the container could not be stopped
        """
        timeout = config.stop_timeout if timeout is None else timeout
        if timeout < 0:
            raise ValidationError(f"Stop timeout must not be negative: {timeout}")

        self._emit(
            ChaosOperation.STOP, container, dry_run,
            signal=container.graceful_signal(), timeout=timeout,
        )
        if dry_run:
            return None

        return self.sequencer.stop(container, timeout)

    def kill(
        self,
        container: ContainerSnapshot,
        signal: str = DEFAULT_KILL_SIGNAL,
        dry_run: bool = False
    ) -> None:
        """
        Send one signal to a container, without waiting or fallback.

        Raises:
            ValidationError: If the signal name is unknown
        """
        signal = validate_signal(signal)
        self._emit(ChaosOperation.KILL, container, dry_run, signal=signal)
        if dry_run:
            return

        self.client.kill_container(container.id, signal)

    def start(self, container: ContainerSnapshot, dry_run: bool = False) -> Optional[str]:
        """
        Recreate a removed container from its snapshot and start it.

        Returns:
            ID of the new container, None on dry run
        """
        self._emit(ChaosOperation.START, container, dry_run)
        if dry_run:
            return None

        new_id = self.client.create_container(container.creation_config(), container.name)
        logger.debug("Starting container %s (%s)", container.name, new_id)
        self.client.start_container(new_id)
        return new_id

    def rename(self, container: ContainerSnapshot, new_name: str, dry_run: bool = False) -> None:
        """Rename a container."""
        self._emit(ChaosOperation.RENAME, container, dry_run, new_name=new_name)
        if dry_run:
            return

        self.client.rename_container(container.id, new_name)

    def remove_image(
        self,
        container: ContainerSnapshot,
        force: bool = False,
        dry_run: bool = False
    ) -> None:
        """
        Remove the image a container was created from.

        Raises:
            ContainerRuntimeError: If the image is in use and force is not set
        """
        self._emit(
            ChaosOperation.REMOVE_IMAGE, container, dry_run,
            image=container.image_id, force=force,
        )
        if dry_run:
            return

        self.client.remove_image(container.image_id, force=force)

    def remove_container(
        self,
        container: ContainerSnapshot,
        force: bool = False,
        links: bool = False,
        volumes: bool = False,
        dry_run: bool = False
    ) -> None:
        """
        Remove a container.

        Args:
            container: Target container
            force: Kill the container first if it is running
            links: Remove the container's links
            volumes: Remove anonymous volumes of the container
            dry_run: Only report the action
        """
        self._emit(
            ChaosOperation.REMOVE_CONTAINER, container, dry_run,
            force=force, links=links, volumes=volumes,
        )
        if dry_run:
            return

        self.client.remove_container(container.id, force=force, links=links, volumes=volumes)

    def pause(self, container: ContainerSnapshot, dry_run: bool = False) -> None:
        """Pause all processes of a running container."""
        self._emit(ChaosOperation.PAUSE, container, dry_run)
        if dry_run:
            return

        self.client.pause_container(container.id)
        logger.debug("Container %s paused", container)

    def unpause(self, container: ContainerSnapshot, dry_run: bool = False) -> None:
        """Resume a paused container."""
        self._emit(ChaosOperation.UNPAUSE, container, dry_run)
        if dry_run:
            return

        self.client.unpause_container(container.id)

    def netem_start(
        self,
        container: ContainerSnapshot,
        netem_args: NetemArgs,
        interface: Optional[str] = None,
        target_ip: Optional[str] = None,
        dry_run: bool = False
    ) -> None:
        """
        Start network emulation on a container interface.

        Args:
            container: Target container
            netem_args: Netem arguments (e.g. ["delay", "100ms"]), a
                whitespace-separated string ("delay 100ms") or a
                NetemParams model
            interface: Network interface (default: config.network_interface)
            target_ip: Only disrupt traffic toward this IPv4 address
            dry_run: Only report the action

        Raises:
            ToolMissingError: If `tc` is missing and no helper image is set
            ToolFailedError: If `tc` exits with a non-zero code
            NetemSequenceError: If the filtered setup fails partway
        """
        interface = self._resolve_interface(interface)
        if isinstance(netem_args, NetemParams):
            args = netem_args.to_netem_args()
        elif isinstance(netem_args, str):
            args = netem_args.split()
        else:
            args = list(netem_args)
        if not args:
            raise ValidationError("Netem arguments must not be empty")
        if target_ip:
            target_ip = validate_ip(target_ip)

        commands = build_commands(interface, args, target_ip)

        self._emit(
            ChaosOperation.NETEM_START, container, dry_run,
            interface=interface, netem=" ".join(args), target_ip=target_ip,
            strategy=self.executor.strategy.value,
        )
        if dry_run:
            return

        try:
            execute_sequence(self.executor, container, commands)
        except DockerChaosError as e:
            logger.error("Netem start on %s failed: %s", container, e)
            raise

    def netem_stop(
        self,
        container: ContainerSnapshot,
        interface: Optional[str] = None,
        dry_run: bool = False
    ) -> None:
        """
        Remove network emulation from a container interface.

        Clears both plain and IP-filtered setups.
        """
        interface = self._resolve_interface(interface)
        commands = build_stop(interface)

        self._emit(
            ChaosOperation.NETEM_STOP, container, dry_run,
            interface=interface, strategy=self.executor.strategy.value,
        )
        if dry_run:
            return

        try:
            execute_sequence(self.executor, container, commands)
        except DockerChaosError as e:
            logger.error("Netem stop on %s failed: %s", container, e)
            raise

    @staticmethod
    def _resolve_interface(interface: Optional[str]) -> str:
        interface = interface or config.network_interface
        if not interface or any(ch.isspace() for ch in interface):
            raise ValidationError(f"Invalid network interface: {interface!r}")
        return interface
