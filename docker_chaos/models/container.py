"""
Container snapshot model.

A ContainerSnapshot is the read-only view of a container captured when
containers are listed. Chaos operations take a snapshot plus action
parameters and never mutate it; the Docker daemon owns the live state.
"""

import copy
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docker_chaos.models.enums import DEFAULT_STOP_SIGNAL


logger = logging.getLogger(__name__)


class ContainerSnapshot(BaseModel):
    """
    Immutable view of a container's identity and configuration.

    Attributes:
        id: Runtime-assigned container ID
        name: Container name without the leading '/'
        image_id: ID of the image the container was created from
        stop_signal: Graceful-shutdown signal, empty means SIGTERM
        labels: Container labels
        runtime_config: Opaque container config, used to recreate it
        host_config: Opaque host config, used to recreate it

    The model is frozen at attribute level only. Mapping fields are deep
    copied on construction and creation_config() returns a copy, but the
    dicts exposed as attributes must be treated as read-only.

    Example:
        >>> snapshot = ContainerSnapshot(id="3f2a", name="web", image_id="sha256:9c1e")
        >>> snapshot.graceful_signal()
        'SIGTERM'
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image_id: str = ""
    stop_signal: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    runtime_config: Dict[str, Any] = Field(default_factory=dict)
    host_config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('labels', 'runtime_config', 'host_config')
    @classmethod
    def detach_mapping(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Keep inspect payloads owned by the caller out of the snapshot."""
        return copy.deepcopy(v)

    @classmethod
    def from_inspect(
        cls,
        container_info: Dict[str, Any],
        image_info: Optional[Dict[str, Any]] = None
    ) -> "ContainerSnapshot":
        """
        Build a snapshot from Docker inspect payloads.

        The stop signal declared by the container wins over the one declared
        by its image.

        Args:
            container_info: Result of the container inspect endpoint
            image_info: Result of the image inspect endpoint

        Returns:
            ContainerSnapshot for the container
        """
        runtime_config = container_info.get("Config") or {}
        image_config = (image_info or {}).get("Config") or {}

        stop_signal = runtime_config.get("StopSignal") or image_config.get("StopSignal") or ""

        return cls(
            id=container_info["Id"],
            name=container_info.get("Name", "").lstrip("/"),
            image_id=container_info.get("Image", ""),
            stop_signal=stop_signal,
            labels=runtime_config.get("Labels") or {},
            runtime_config=runtime_config,
            host_config=container_info.get("HostConfig") or {},
        )

    def graceful_signal(self) -> str:
        """Signal sent first by the stop sequence."""
        return self.stop_signal or DEFAULT_STOP_SIGNAL

    def creation_config(self) -> Dict[str, Any]:
        """Config payload recreating this container, host config embedded."""
        payload = copy.deepcopy(self.runtime_config)
        payload["HostConfig"] = copy.deepcopy(self.host_config)
        return payload

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"
