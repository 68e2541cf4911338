"""
Container selector model.

This module provides the ContainerSelector class for choosing chaos targets
among running containers, with mutual exclusivity validation between
name-based and pattern-based targeting.
"""

import logging
import re
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from docker_chaos.exceptions import AmbiguousSelectorError
from docker_chaos.models.container import ContainerSnapshot
from docker_chaos.models.enums import SKIP_LABEL


logger = logging.getLogger(__name__)

# Predicate over snapshots, applied while listing containers
ContainerFilter = Callable[[ContainerSnapshot], bool]


class ContainerSelector(BaseModel):
    """
    Selector for chaos experiment targets.

    Supports two mutually exclusive name-based methods, optionally combined
    with label matching:
    1. Names: select containers by exact name
    2. Pattern: select containers whose name matches a regular expression

    An empty selector matches every running container. Containers labelled
    with the skip label (helper containers created by this SDK) never match.

    Attributes:
        names: Exact container names
        pattern: Regular expression searched in container names
        labels: Label key-value pairs that must all be present

    Examples:
        >>> selector = ContainerSelector.from_names(["web", "db"])
        >>> selector = ContainerSelector.from_pattern("^api-")
    """

    names: List[str] = Field(default_factory=list)
    pattern: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)

    @field_validator('names')
    @classmethod
    def strip_leading_slash(cls, v: List[str]) -> List[str]:
        """Docker reports names with a leading '/', accept both forms."""
        return [name.lstrip("/") for name in v]

    @field_validator('pattern')
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        """Fail early on invalid regular expressions."""
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid name pattern '{v}': {e}")
        return v

    @model_validator(mode='after')
    def validate_mutual_exclusivity(self) -> "ContainerSelector":
        """
        Ensure only one name-based selection method is used.

        Raises:
            AmbiguousSelectorError: If both names and pattern are specified
        """
        if self.names and self.pattern:
            raise AmbiguousSelectorError(
                "Cannot use both 'names' and 'pattern' simultaneously. Use either:\n"
                "  - names for exact container names, OR\n"
                "  - pattern for a regular expression over container names"
            )
        return self

    @classmethod
    def from_names(cls, names: List[str]) -> "ContainerSelector":
        """Convenience constructor for name-based selection."""
        return cls(names=names)

    @classmethod
    def from_pattern(cls, pattern: str) -> "ContainerSelector":
        """Convenience constructor for pattern-based selection."""
        return cls(pattern=pattern)

    def matches(self, container: ContainerSnapshot) -> bool:
        """
        Check whether a container is selected.

        Args:
            container: Container snapshot

        Returns:
            True if the container is a chaos target
        """
        if container.labels.get(SKIP_LABEL) == "true":
            return False

        for key, value in self.labels.items():
            if container.labels.get(key) != value:
                return False

        if self.names:
            return container.name in self.names

        if self.pattern:
            return re.search(self.pattern, container.name) is not None

        return True

    def to_filter(self) -> ContainerFilter:
        """Return the selector as a plain predicate."""
        return self.matches

    def __str__(self) -> str:
        """Human-readable selector description."""
        if self.names:
            desc = f"Names: {', '.join(self.names)}"
        elif self.pattern:
            desc = f"Pattern: {self.pattern}"
        else:
            desc = "All containers"
        if self.labels:
            labels_str = ", ".join(f"{k}={v}" for k, v in self.labels.items())
            desc += f" with labels {labels_str}"
        return desc
