"""
Docker API client for chaos operations.

This module provides a thin abstraction layer over the low-level Docker API
client, with connection bootstrapping, retry of read-only listing, and error
translation into SDK exceptions. It never retries mutating calls.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union

import docker
import requests
from docker.errors import APIError, DockerException, NotFound
from docker.utils import kwargs_from_env
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
)

from docker_chaos.config import config
from docker_chaos.exceptions import (
    ContainerNotFoundError,
    ContainerNotRunningError,
    ContainerRuntimeError,
    RuntimeUnavailableError,
)
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.enums import SKIP_LABEL
from docker_chaos.models.selector import ContainerFilter, ContainerSelector

logger = logging.getLogger(__name__)


def _is_transient(exception: BaseException) -> bool:
    return isinstance(exception, APIError) and exception.is_server_error()


class RuntimeClient:
    """
    Docker API client used by the chaos engine.

    Handles connection bootstrapping (explicit host or DOCKER_* environment),
    retry with exponential backoff for container listing, and error
    translation. Holds no state besides the API handle, so one instance may
    be shared by concurrent callers.
    """

    def __init__(
        self,
        docker_host: Optional[str] = None,
        api: Optional[docker.APIClient] = None
    ):
        """
        Initialize client and verify the daemon is reachable.

        Args:
            docker_host: Optional explicit daemon URL (e.g. "unix:///var/run/docker.sock")
            api: Optional pre-built low-level Docker API client

        Raises:
            RuntimeUnavailableError: If the daemon cannot be reached
        """
        self.api = api or self._setup_docker_client(docker_host)
        logger.info("RuntimeClient initialized for %s", self.api.base_url)

    def _setup_docker_client(self, docker_host: Optional[str]) -> docker.APIClient:
        """
        Set up Docker API client.

        Uses the explicit host when given, falls back to the DOCKER_HOST,
        DOCKER_TLS_VERIFY and DOCKER_CERT_PATH environment.

        Raises:
            RuntimeUnavailableError: If the client cannot connect
        """
        host = docker_host or config.docker_host

        try:
            if host:
                api = docker.APIClient(
                    base_url=host,
                    version=config.api_version,
                    timeout=config.api_timeout,
                    tls=config.tls_verify,
                )
                logger.info("Connecting to Docker daemon at %s", host)
            else:
                api = docker.APIClient(
                    version=config.api_version,
                    timeout=config.api_timeout,
                    **kwargs_from_env(),
                )
                logger.debug("Connecting to Docker daemon from environment")
            api.ping()
            return api
        except (DockerException, requests.exceptions.RequestException) as e:
            raise RuntimeUnavailableError(
                f"Failed to connect to Docker daemon: {e}. "
                "Ensure the daemon is running and DOCKER_HOST is correct."
            ) from e

    def _create_retry_decorator(self):
        """
        Create a retry decorator with current config values.

        Only daemon-side (5xx) errors are retried.
        """
        return retry(
            stop=stop_after_attempt(config.retry_max_attempts),
            wait=wait_exponential(
                multiplier=config.retry_backoff_multiplier,
                min=config.retry_min_wait,
                max=config.retry_max_wait,
            ),
            retry=retry_if_exception(_is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    @contextmanager
    def _translate_errors(self, operation: str, target: str) -> Iterator[None]:
        try:
            yield
        except NotFound as e:
            raise ContainerNotFoundError(
                f"Failed to {operation} {target}: not found ({e.explanation})"
            ) from e
        except APIError as e:
            self._handle_api_exception(e, f"{operation} {target}")
        except requests.exceptions.RequestException as e:
            raise RuntimeUnavailableError(
                f"Failed to {operation} {target}: Docker daemon unreachable ({e})"
            ) from e

    # Listing and inspection

    def list_running_containers(self) -> List[Dict[str, Any]]:
        """
        List running containers with automatic retry.

        Returns:
            Container summaries from the Docker API
        """
        retryer = self._create_retry_decorator()

        @retryer
        def _list_impl():
            return self.api.containers(all=False)

        with self._translate_errors("list", "running containers"):
            containers = _list_impl()
        logger.debug("Listed %d running containers", len(containers))
        return containers

    def inspect_container(self, container_id: str) -> Dict[str, Any]:
        with self._translate_errors("inspect container", container_id):
            return self.api.inspect_container(container_id)

    def inspect_image(self, image_id: str) -> Dict[str, Any]:
        with self._translate_errors("inspect image", image_id):
            return self.api.inspect_image(image_id)

    def is_running(self, container_id: str) -> bool:
        """Return the live running flag of a container."""
        info = self.inspect_container(container_id)
        return bool(info.get("State", {}).get("Running"))

    def list_containers(
        self,
        selector: Optional[Union[ContainerSelector, ContainerFilter]] = None
    ) -> List[ContainerSnapshot]:
        """
        Capture snapshots of running containers matching a selector.

        Containers that vanish while being inspected are skipped. A running
        container whose image was removed is still listed, without the
        image's stop signal.

        Args:
            selector: ContainerSelector or plain predicate (default: all
                containers except SDK helper containers)

        Returns:
            Snapshots of matching containers
        """
        if selector is None:
            selector = ContainerSelector()
        predicate = selector.matches if isinstance(selector, ContainerSelector) else selector

        snapshots = []
        for summary in self.list_running_containers():
            container_id = summary["Id"]
            try:
                container_info = self.inspect_container(container_id)
            except ContainerNotFoundError:
                logger.debug("Container %s vanished while listing, skipping", container_id)
                continue

            try:
                image_info = self.inspect_image(container_info["Image"])
            except ContainerNotFoundError:
                # Image removed while the container keeps running
                logger.debug("Image of container %s not found, listing without it", container_id)
                image_info = None

            snapshot = ContainerSnapshot.from_inspect(container_info, image_info)
            logger.debug("Running container: %s", snapshot)
            if predicate(snapshot):
                snapshots.append(snapshot)

        return snapshots

    # Lifecycle

    def create_container(self, container_config: Dict[str, Any], name: str) -> str:
        """Create a container from a raw config payload and return its ID."""
        with self._translate_errors("create container", name):
            response = self.api.create_container_from_config(container_config, name=name)
        return response["Id"]

    def start_container(self, container_id: str) -> None:
        with self._translate_errors("start container", container_id):
            self.api.start(container_id)

    def rename_container(self, container_id: str, new_name: str) -> None:
        with self._translate_errors("rename container", container_id):
            self.api.rename(container_id, new_name)

    def kill_container(self, container_id: str, signal: str) -> None:
        """
        Send a signal to a container.

        Raises:
            ContainerNotRunningError: If the container is not running
            ContainerNotFoundError: If the container does not exist
        """
        try:
            with self._translate_errors(f"send {signal} to container", container_id):
                self.api.kill(container_id, signal=signal)
        except ContainerRuntimeError as e:
            cause = e.__cause__
            if isinstance(cause, APIError) and cause.status_code == 409:
                raise ContainerNotRunningError(
                    f"Container {container_id} is not running"
                ) from cause
            raise

    def remove_container(
        self,
        container_id: str,
        force: bool = False,
        links: bool = False,
        volumes: bool = False
    ) -> None:
        with self._translate_errors("remove container", container_id):
            self.api.remove_container(container_id, v=volumes, link=links, force=force)

    def remove_image(self, image_id: str, force: bool = False) -> None:
        with self._translate_errors("remove image", image_id):
            self.api.remove_image(image_id, force=force)

    def pause_container(self, container_id: str) -> None:
        with self._translate_errors("pause container", container_id):
            self.api.pause(container_id)

    def unpause_container(self, container_id: str) -> None:
        with self._translate_errors("unpause container", container_id):
            self.api.unpause(container_id)

    # Exec

    def exec_create(self, container_id: str, cmd: List[str], privileged: bool = False) -> str:
        with self._translate_errors(f"create exec '{' '.join(cmd)}' in container", container_id):
            response = self.api.exec_create(container_id, cmd, privileged=privileged)
        return response["Id"]

    def exec_start(self, exec_id: str) -> None:
        """Run an exec instance to completion."""
        with self._translate_errors("start exec", exec_id):
            self.api.exec_start(exec_id, detach=False)

    def exec_inspect(self, exec_id: str) -> Optional[int]:
        """Return the exit code of a finished exec instance."""
        with self._translate_errors("inspect exec", exec_id):
            info = self.api.exec_inspect(exec_id)
        return info.get("ExitCode")

    def create_helper_container(
        self,
        image: str,
        entrypoint: List[str],
        cmd: List[str],
        target_id: str
    ) -> str:
        """
        Create a helper container joined to a target's network namespace.

        The helper is auto-removed on exit, has NET_ADMIN, and carries the
        skip label so chaos selection never targets it.

        Returns:
            ID of the created helper container
        """
        host_config = self.api.create_host_config(
            auto_remove=True,
            cap_add=["NET_ADMIN"],
            network_mode=f"container:{target_id}",
        )
        with self._translate_errors(f"create helper container from {image} for", target_id):
            response = self.api.create_container(
                image=image,
                entrypoint=entrypoint,
                command=cmd,
                labels={SKIP_LABEL: "true"},
                host_config=host_config,
            )
        return response["Id"]

    @staticmethod
    def _handle_api_exception(exception: APIError, operation: str) -> None:
        """
        Translate Docker API exceptions to SDK exceptions.

        Args:
            exception: Docker API exception
            operation: Operation description for error message

        Raises:
            ContainerRuntimeError: For all unhandled API errors
        """
        raise ContainerRuntimeError(
            f"Failed to {operation}: HTTP {exception.status_code} - {exception.explanation}"
        ) from exception
