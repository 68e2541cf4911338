"""
Global configuration management for Docker Chaos SDK.

This module provides a singleton configuration class for managing Docker API
settings, network chaos defaults, stop sequence timing, and retry behavior.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ChaosConfig:
    """
    Global configuration for Docker Chaos SDK.

    This class uses a singleton pattern to ensure consistent configuration
    across all SDK components.

    Attributes:
        docker_host: Docker daemon URL (default: taken from DOCKER_HOST env)
        api_version: Docker API version ("auto" negotiates with the daemon)
        api_timeout: Timeout for a single Docker API call (seconds)
        tls_verify: Verify the daemon certificate when DOCKER_HOST uses TLS
        tc_image: Helper image providing `tc` (empty = exec inside target)
        network_interface: Default network interface for netem commands
        stop_timeout: Default per-phase timeout of the stop sequence (seconds)
        stop_poll_interval: Running-state polling interval (seconds)
        retry_max_attempts: Maximum attempts for read-only container listing
        retry_backoff_multiplier: Exponential backoff multiplier
        retry_min_wait: Minimum wait time between retries (seconds)
        retry_max_wait: Maximum wait time between retries (seconds)
    """

    _instance: Optional["ChaosConfig"] = None
    _initialized: bool = False

    def __new__(cls, **kwargs):
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(
        self,
        docker_host: Optional[str] = None,
        api_version: str = "auto",
        api_timeout: int = 60,
        tls_verify: bool = False,
        tc_image: str = "",
        network_interface: str = "eth0",
        stop_timeout: int = 10,
        stop_poll_interval: float = 1.0,
        retry_max_attempts: int = 3,
        retry_backoff_multiplier: float = 1.0,
        retry_min_wait: float = 1.0,
        retry_max_wait: float = 10.0,
    ):
        """
        Initialize configuration (only on first call).

        Subsequent calls to ChaosConfig() will return the same instance
        without reinitializing fields.
        """
        if ChaosConfig._initialized:
            return

        self.docker_host = docker_host
        self.api_version = api_version
        self.api_timeout = api_timeout
        self.tls_verify = tls_verify
        self.tc_image = tc_image
        self.network_interface = network_interface
        self.stop_timeout = stop_timeout
        self.stop_poll_interval = stop_poll_interval
        self.retry_max_attempts = retry_max_attempts
        self.retry_backoff_multiplier = retry_backoff_multiplier
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait

        ChaosConfig._initialized = True

    @classmethod
    def get_instance(cls) -> "ChaosConfig":
        """
        Get the singleton configuration instance.

        Returns:
            The global ChaosConfig instance
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (mainly for testing)."""
        cls._instance = None
        cls._initialized = False

    def update(self, **kwargs) -> None:
        """
        Update configuration values.

        Args:
            **kwargs: Configuration key-value pairs to update
        """
        for key, value in kwargs.items():
            if hasattr(self, key) and not key.startswith('_'):
                setattr(self, key, value)
                logger.info("Updated config: %s=%s", key, value)
            else:
                logger.warning("Unknown config key: %s", key)

    def __repr__(self) -> str:
        return (
            f"ChaosConfig("
            f"docker_host={self.docker_host!r}, "
            f"api_version={self.api_version!r}, "
            f"tc_image={self.tc_image!r}, "
            f"network_interface={self.network_interface!r}, "
            f"stop_timeout={self.stop_timeout}, "
            f"stop_poll_interval={self.stop_poll_interval})"
        )


# Global configuration instance
config = ChaosConfig.get_instance()
