"""Shared fixtures for Docker Chaos SDK tests."""

from unittest.mock import MagicMock

import pytest

from docker_chaos.client import RuntimeClient
from docker_chaos.events import RecordingIntentSink
from docker_chaos.models.container import ContainerSnapshot


class FakeClock:
    """Monotonic clock advanced only by its own sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def container():
    return ContainerSnapshot(
        id="3f2a9c1e",
        name="web",
        image_id="sha256:9c1e",
        runtime_config={"Image": "nginx:1.25", "Cmd": ["nginx", "-g", "daemon off;"]},
        host_config={"NetworkMode": "bridge"},
    )


@pytest.fixture
def client():
    return MagicMock(spec=RuntimeClient)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingIntentSink()
