"""
Utility functions for Docker Chaos SDK.

This module provides helper functions for duration parsing, netem parameter
validation, signal name validation, and IP address validation.
"""

import ipaddress
import logging
import re
from typing import Union

from docker_chaos.exceptions import ValidationError


logger = logging.getLogger(__name__)


# Linux signal names accepted by the Docker kill endpoint
LINUX_SIGNALS = frozenset({
    "SIGABRT", "SIGALRM", "SIGBUS", "SIGCHLD", "SIGCLD", "SIGCONT",
    "SIGFPE", "SIGHUP", "SIGILL", "SIGINT", "SIGIO", "SIGIOT", "SIGKILL",
    "SIGPIPE", "SIGPOLL", "SIGPROF", "SIGPWR", "SIGQUIT", "SIGSEGV",
    "SIGSTKFLT", "SIGSTOP", "SIGSYS", "SIGTERM", "SIGTRAP", "SIGTSTP",
    "SIGTTIN", "SIGTTOU", "SIGURG", "SIGUSR1", "SIGUSR2", "SIGVTALRM",
    "SIGWINCH", "SIGXCPU", "SIGXFSZ",
})


def parse_duration(duration: str) -> int:
    """
    Parse duration string to seconds.

    Supports formats: "30s", "5m", "2h"

    Args:
        duration: Duration string with unit suffix

    Returns:
        Duration in seconds

    Raises:
        ValidationError: If duration format is invalid

    Examples:
        >>> parse_duration("30s")
        30
        >>> parse_duration("5m")
        300
        >>> parse_duration("2h")
        7200
    """
    match = re.match(r'^(\d+)(s|m|h)$', duration)

    if not match:
        raise ValidationError(
            f"Invalid duration format: {duration}. "
            "Expected format: <number><unit> where unit is s/m/h"
        )

    value, unit = match.groups()

    multipliers = {
        's': 1,
        'm': 60,
        'h': 3600,
    }

    return int(value) * multipliers[unit]


def validate_network_param_format(param: str, param_name: str = "parameter") -> str:
    """
    Validate netem time parameter format (e.g., latency, jitter).

    Parameters must be in format: <number><unit> where unit is us/ms/s

    Args:
        param: Parameter string to validate
        param_name: Name for error messages

    Returns:
        Validated parameter string

    Raises:
        ValidationError: If format is invalid

    Examples:
        >>> validate_network_param_format("100ms", "latency")
        '100ms'
    """
    if not re.match(r'^\d+(?:\.\d+)?(?:us|ms|s)$', param):
        raise ValidationError(
            f"Invalid {param_name} format: {param}. "
            "Expected format: <number><unit> where unit is us/ms/s. "
            "Examples: '100ms', '1s', '500us'"
        )

    return param


def validate_percentage(value: Union[str, int, float], param_name: str = "parameter") -> str:
    """
    Validate percentage parameter (0-100).

    A trailing '%' is accepted and stripped.

    Args:
        value: Percentage value
        param_name: Name for error messages

    Returns:
        Validated percentage string without the '%' suffix

    Raises:
        ValidationError: If value is not a valid percentage
    """
    text = str(value).strip().rstrip('%')
    try:
        percentage = float(text)
    except ValueError:
        raise ValidationError(
            f"Invalid {param_name}: {value}. Must be a number between 0 and 100."
        ) from None

    if not 0 <= percentage <= 100:
        raise ValidationError(
            f"Invalid {param_name}: {value}. Must be between 0 and 100."
        )

    return text


def validate_rate(rate: str) -> str:
    """
    Validate a netem rate such as '1mbit', '100kbit' or '10gbps'.

    Raises:
        ValidationError: If format is invalid
    """
    if not re.match(r'^\d+(?:\.\d+)?(?:bit|kbit|mbit|gbit|tbit|bps|kbps|mbps|gbps|tbps)$', rate):
        raise ValidationError(
            f"Invalid rate format: {rate}. "
            "Examples: '100kbit', '1mbit', '10mbps'"
        )
    return rate


def validate_signal(signal: str) -> str:
    """
    Validate and normalize a Linux signal name.

    Accepts names with or without the SIG prefix, in any case.

    Returns:
        Canonical signal name, e.g. "SIGKILL"

    Raises:
        ValidationError: If the name is not a Linux signal
    """
    name = signal.strip().upper()
    if not name.startswith("SIG"):
        name = "SIG" + name

    if name not in LINUX_SIGNALS:
        raise ValidationError(f"Unexpected signal: {signal}")

    return name


def validate_ip(address: str) -> str:
    """
    Validate an IPv4 destination address for the netem filter.

    Raises:
        ValidationError: If the address is not a valid IPv4 address
    """
    try:
        ip = ipaddress.IPv4Address(address.strip())
    except ValueError:
        raise ValidationError(f"Invalid target IP address: {address}") from None
    return str(ip)
