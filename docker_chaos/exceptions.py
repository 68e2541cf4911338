"""
Custom exception hierarchy for Docker Chaos SDK.

This module defines all custom exceptions used by the SDK, providing
clear, business-semantic error types for different failure scenarios.
Every error raised for a container names the container so that callers
can log or retry at a higher level.
"""

from typing import List, Optional, Sequence


class DockerChaosError(Exception):
    """
    Base exception for all Docker Chaos SDK errors.

    All custom exceptions inherit from this class, allowing users to catch
    all SDK-specific errors with a single except clause.
    """
    pass


class RuntimeUnavailableError(DockerChaosError):
    """
    Raised when the Docker daemon cannot be reached.

    This typically indicates a wrong DOCKER_HOST, TLS misconfiguration,
    or a stopped daemon. It is fatal to the enclosing operation and is
    never retried internally.
    """
    pass


class ContainerNotFoundError(DockerChaosError):
    """
    Raised when a container or image vanished between listing and action.

    Corresponds to HTTP 404 Not Found from the Docker API. Callers decide
    whether to re-list containers and retry.
    """
    pass


class ContainerRuntimeError(DockerChaosError):
    """
    Raised when the Docker daemon rejects an operation.

    Examples: removing an image still in use without force, renaming to a
    name that is already taken, pausing a container that is not running.
    """
    pass


class ContainerNotRunningError(ContainerRuntimeError):
    """
    Raised when a signal is sent to a container that is not running.

    Corresponds to HTTP 409 Conflict on kill. The stop sequence treats it
    as an "already stopped" outcome.
    """
    pass


class ContainerStopTimeoutError(DockerChaosError):
    """
    Raised when a container is still running after the force-kill wait.

    The stop sequence never treats this condition as success.
    """

    def __init__(self, container_name: str, container_id: str):
        self.container_name = container_name
        self.container_id = container_id
        super().__init__(
            f"Container {container_name} ({container_id}) could not be stopped"
        )


class ToolMissingError(DockerChaosError):
    """
    Raised when a required binary is absent inside the target container.

    Only the in-namespace execution strategy raises it. Configure a helper
    image (ChaosConfig.tc_image) to run the tool from a helper container.
    """

    def __init__(self, tool: str, container_name: str, container_id: str):
        self.tool = tool
        self.container_name = container_name
        self.container_id = container_id
        super().__init__(
            f"Command '{tool}' not found inside the "
            f"{container_name} ({container_id}) container"
        )


class ToolFailedError(DockerChaosError):
    """
    Raised when a tool invocation ran but exited with a non-zero code.

    Partially applied queueing state is not rolled back.
    """

    def __init__(
        self,
        command: Sequence[str],
        container_name: str,
        container_id: str,
        exit_code: Optional[int] = None,
    ):
        self.command = list(command)
        self.container_name = container_name
        self.container_id = container_id
        self.exit_code = exit_code
        super().__init__(
            f"Command '{' '.join(self.command)}' failed in "
            f"{container_name} ({container_id}) container "
            f"(exit code {exit_code}); run it manually to debug"
        )


class NetemSequenceError(DockerChaosError):
    """
    Raised when a multi-step netem command sequence fails partway.

    The interface may be left with a priority queue but no netem qdisc or
    filter. Callers should issue a netem stop to clean it up.

    Attributes:
        completed: Commands that were applied before the failure
        failed_command: The command that failed
    """

    def __init__(
        self,
        container_name: str,
        container_id: str,
        completed: List[List[str]],
        failed_command: List[str],
    ):
        self.container_name = container_name
        self.container_id = container_id
        self.completed = completed
        self.failed_command = failed_command
        super().__init__(
            f"Netem sequence on {container_name} ({container_id}) failed at "
            f"'tc {' '.join(failed_command)}' after {len(completed)} applied "
            f"command(s); the interface may be inconsistent, run netem stop"
        )


class AmbiguousSelectorError(DockerChaosError):
    """
    Raised when selector configuration is ambiguous or conflicting.

    This occurs when users specify both an explicit name list and a name
    pattern simultaneously.
    """
    pass


class ValidationError(DockerChaosError, ValueError):
    """
    Raised when input validation fails.

    Pydantic model validation raises its own error type; this one covers
    plain arguments such as signal names, IP addresses, and durations.
    """
    pass
