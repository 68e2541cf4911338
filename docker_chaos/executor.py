"""
Execution strategies for running `tc` against a container's network namespace.

Two strategies implement the same contract, selected once from configuration:

- InNamespaceExecutor execs the tool inside the target container, after
  checking that the binary exists there.
- HelperContainerExecutor starts a short-lived helper container from an
  image providing `tc` (e.g. gaiadocker/iproute2), attached to the target's
  network namespace.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from docker_chaos.client import RuntimeClient
from docker_chaos.exceptions import (
    DockerChaosError,
    NetemSequenceError,
    ToolFailedError,
    ToolMissingError,
)
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.enums import ExecutionStrategy
from docker_chaos.netem import TcCommand

logger = logging.getLogger(__name__)

TC_BINARY = "tc"


class CommandExecutor(ABC):
    """
    Runs one `tc` invocation against a target container.

    Implementations hold only the client handle and their configuration,
    so one executor may serve concurrent callers.
    """

    strategy: ExecutionStrategy

    def __init__(self, client: RuntimeClient):
        self.client = client

    @abstractmethod
    def run(self, target: ContainerSnapshot, args: Sequence[str]) -> None:
        """
        Run `tc <args>` in the target's network namespace.

        Args:
            target: Container whose network stack is modified
            args: tc arguments, without the binary name
        """
        pass


class InNamespaceExecutor(CommandExecutor):
    """Exec the tool inside the target container."""

    strategy = ExecutionStrategy.IN_NAMESPACE

    def __init__(self, client: RuntimeClient, tool: str = TC_BINARY, privileged: bool = True):
        super().__init__(client)
        self.tool = tool.replace(" ", "")
        self.privileged = privileged

    def run(self, target: ContainerSnapshot, args: Sequence[str]) -> None:
        """
        Check the tool exists in the target, then run it.

        Raises:
            ToolMissingError: If the tool is not installed in the target
            ToolFailedError: If the tool exits with a non-zero code
        """
        self._check_tool(target)

        command = [self.tool, *args]
        exec_id = self.client.exec_create(target.id, command, privileged=self.privileged)
        logger.debug("Starting exec '%s' in %s (%s)", " ".join(command), target, exec_id)
        self.client.exec_start(exec_id)

        exit_code = self.client.exec_inspect(exec_id)
        if exit_code != 0:
            raise ToolFailedError(command, target.name, target.id, exit_code)

    def _check_tool(self, target: ContainerSnapshot) -> None:
        logger.debug("Checking if command %s exists in %s", self.tool, target)
        exec_id = self.client.exec_create(target.id, ["which", self.tool])
        self.client.exec_start(exec_id)

        if self.client.exec_inspect(exec_id) != 0:
            raise ToolMissingError(self.tool, target.name, target.id)
        logger.debug("Command %s found in %s", self.tool, target)


class HelperContainerExecutor(CommandExecutor):
    """Run the tool from a helper container sharing the target's network stack."""

    strategy = ExecutionStrategy.HELPER_CONTAINER

    def __init__(self, client: RuntimeClient, image: str):
        super().__init__(client)
        self.image = image

    def run(self, target: ContainerSnapshot, args: Sequence[str]) -> None:
        """
        Create and start the helper; its exit status is not awaited.

        `tc qdisc add` exits as soon as the qdisc is applied and the helper
        removes itself, so only creation and start errors are reported.
        """
        helper_id = self.client.create_helper_container(
            image=self.image,
            entrypoint=[TC_BINARY],
            cmd=list(args),
            target_id=target.id,
        )
        logger.debug("Starting tc helper container %s for %s", helper_id, target)
        self.client.start_container(helper_id)


def select_executor(client: RuntimeClient, tc_image: Optional[str] = None) -> CommandExecutor:
    """
    Choose the execution strategy from configuration.

    Args:
        client: Runtime client shared by the executor
        tc_image: Helper image providing `tc`; empty means exec in the target

    Returns:
        HelperContainerExecutor when an image is configured, otherwise
        InNamespaceExecutor
    """
    if tc_image:
        logger.debug("Using tc helper image %s", tc_image)
        return HelperContainerExecutor(client, tc_image)
    return InNamespaceExecutor(client)


def execute_sequence(
    executor: CommandExecutor,
    target: ContainerSnapshot,
    commands: List[TcCommand]
) -> None:
    """
    Run dependent tc commands in order, stopping at the first failure.

    Raises:
        NetemSequenceError: If a command fails after earlier ones were
            applied; the interface may be left half-configured
        DockerChaosError: The original error if the first command fails
    """
    completed: List[TcCommand] = []
    for command in commands:
        logger.debug("tc command '%s' on %s", " ".join(command), target)
        try:
            executor.run(target, command)
        except DockerChaosError as e:
            if not completed:
                raise
            raise NetemSequenceError(target.name, target.id, completed, command) from e
        completed.append(command)
