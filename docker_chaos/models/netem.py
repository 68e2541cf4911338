"""
Netem parameter models.

This module provides user-friendly, validated builders for the netem
arguments appended to `tc qdisc add ... netem`. The command synthesizer
treats netem arguments as opaque tokens; these models only produce them.
"""

import logging
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from docker_chaos.utils import validate_network_param_format, validate_percentage, validate_rate


logger = logging.getLogger(__name__)


def _is_zero(value: str) -> bool:
    match = re.match(r'^\d+(?:\.\d+)?', value)
    return match is None or float(match.group(0)) == 0


class DelayDistribution(str, Enum):
    """Netem delay distribution tables."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    PARETO = "pareto"
    PARETONORMAL = "paretonormal"


class NetemParams(BaseModel, ABC):
    """Base class for netem parameter models."""

    @abstractmethod
    def to_netem_args(self) -> List[str]:
        """Render netem argument tokens."""
        pass


class NetemDelayParams(NetemParams):
    """
    Parameters for network delay chaos.

    Attributes:
        latency: Added latency (e.g., "100ms", "1s")
        jitter: Latency variation (e.g., "10ms")
        correlation: Correlation with the previous delay ("0" to "100")
        distribution: Delay distribution (requires jitter)

    Example:
        >>> NetemDelayParams(latency="100ms", jitter="10ms", correlation="20").to_netem_args()
        ['delay', '100ms', '10ms', '20%']
    """

    latency: str = Field(..., description="Network latency (e.g., '100ms', '1s')")
    jitter: str = Field(default="0ms", description="Latency variation")
    correlation: str = Field(default="0", description="Correlation percentage (0-100)")
    distribution: Optional[DelayDistribution] = None

    @field_validator('latency', 'jitter')
    @classmethod
    def validate_duration_format(cls, v: str) -> str:
        """Validate latency/jitter format."""
        return validate_network_param_format(v, "latency/jitter")

    @field_validator('correlation')
    @classmethod
    def validate_correlation(cls, v: str) -> str:
        """Validate correlation is a percentage."""
        return validate_percentage(v, "correlation")

    def to_netem_args(self) -> List[str]:
        args = ["delay", self.latency]
        if not _is_zero(self.jitter):
            args.append(self.jitter)
            if not _is_zero(self.correlation):
                args.append(f"{self.correlation}%")
            if self.distribution is not None:
                args.extend(["distribution", self.distribution.value])
        return args


class NetemLossParams(NetemParams):
    """
    Parameters for network packet loss chaos.

    Attributes:
        loss: Packet loss percentage ("0" to "100")
        correlation: Correlation percentage ("0" to "100")

    Example:
        >>> NetemLossParams(loss="10").to_netem_args()
        ['loss', '10%']
    """

    loss: str = Field(..., description="Packet loss percentage (0-100)")
    correlation: str = Field(default="0", description="Correlation percentage (0-100)")

    @field_validator('loss', 'correlation')
    @classmethod
    def validate_percentage_field(cls, v: str) -> str:
        """Validate percentage values."""
        return validate_percentage(v, "percentage")

    def to_netem_args(self) -> List[str]:
        args = ["loss", f"{self.loss}%"]
        if not _is_zero(self.correlation):
            args.append(f"{self.correlation}%")
        return args


class NetemDuplicateParams(NetemParams):
    """
    Parameters for network packet duplication chaos.

    Attributes:
        duplicate: Packet duplication percentage ("0" to "100")
        correlation: Correlation percentage ("0" to "100")
    """

    duplicate: str = Field(..., description="Packet duplication percentage (0-100)")
    correlation: str = Field(default="0", description="Correlation percentage (0-100)")

    @field_validator('duplicate', 'correlation')
    @classmethod
    def validate_percentage_field(cls, v: str) -> str:
        """Validate percentage values."""
        return validate_percentage(v, "percentage")

    def to_netem_args(self) -> List[str]:
        args = ["duplicate", f"{self.duplicate}%"]
        if not _is_zero(self.correlation):
            args.append(f"{self.correlation}%")
        return args


class NetemCorruptParams(NetemParams):
    """
    Parameters for network packet corruption chaos.

    Attributes:
        corrupt: Packet corruption percentage ("0" to "100")
        correlation: Correlation percentage ("0" to "100")
    """

    corrupt: str = Field(..., description="Packet corruption percentage (0-100)")
    correlation: str = Field(default="0", description="Correlation percentage (0-100)")

    @field_validator('corrupt', 'correlation')
    @classmethod
    def validate_percentage_field(cls, v: str) -> str:
        """Validate percentage values."""
        return validate_percentage(v, "percentage")

    def to_netem_args(self) -> List[str]:
        args = ["corrupt", f"{self.corrupt}%"]
        if not _is_zero(self.correlation):
            args.append(f"{self.correlation}%")
        return args


class NetemRateParams(NetemParams):
    """
    Parameters for network bandwidth limitation chaos.

    Attributes:
        rate: Bandwidth rate (e.g., "1mbit", "100kbit")
        packet_overhead: Per-packet overhead in bytes (may be negative)
        cell_size: Link layer cell size
        cell_overhead: Per-cell overhead in bytes (may be negative)

    Example:
        >>> NetemRateParams(rate="1mbit").to_netem_args()
        ['rate', '1mbit']
    """

    rate: str = Field(..., description="Bandwidth rate (e.g., '1mbit')")
    packet_overhead: Optional[int] = Field(default=None, description="Packet overhead")
    cell_size: Optional[int] = Field(default=None, description="Cell size", ge=0)
    cell_overhead: Optional[int] = Field(default=None, description="Cell overhead")

    @field_validator('rate')
    @classmethod
    def validate_rate_format(cls, v: str) -> str:
        """Validate rate format."""
        return validate_rate(v)

    def to_netem_args(self) -> List[str]:
        args = ["rate", self.rate]
        # Positional arguments: each one requires the previous ones
        optional = [self.packet_overhead, self.cell_size, self.cell_overhead]
        for value in optional:
            if value is None:
                break
            args.append(str(value))
        return args


class NetemReorderParams(NetemParams):
    """
    Parameters for network packet reordering chaos.

    Netem reorders packets by sending some immediately while the rest wait
    for `latency`, so a delay is always rendered first.

    Attributes:
        latency: Delay applied to non-reordered packets
        reorder: Packet reorder percentage ("0" to "100")
        correlation: Correlation percentage ("0" to "100")
        gap: Send every Nth packet immediately instead of randomly

    Example:
        >>> NetemReorderParams(latency="10ms", reorder="25", correlation="50").to_netem_args()
        ['delay', '10ms', 'reorder', '25%', '50%']
    """

    latency: str = Field(default="10ms", description="Delay for non-reordered packets")
    reorder: str = Field(..., description="Packet reorder percentage (0-100)")
    correlation: str = Field(default="0", description="Correlation percentage (0-100)")
    gap: Optional[int] = Field(default=None, description="Gap value for reorder", gt=0)

    @field_validator('latency')
    @classmethod
    def validate_duration_format(cls, v: str) -> str:
        """Validate latency format."""
        return validate_network_param_format(v, "latency")

    @field_validator('reorder', 'correlation')
    @classmethod
    def validate_percentage_field(cls, v: str) -> str:
        """Validate percentage values."""
        return validate_percentage(v, "percentage")

    def to_netem_args(self) -> List[str]:
        args = ["delay", self.latency, "reorder", f"{self.reorder}%"]
        if not _is_zero(self.correlation):
            args.append(f"{self.correlation}%")
        if self.gap is not None:
            args.extend(["gap", str(self.gap)])
        return args
