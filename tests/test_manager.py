"""
Tests for the chaos manager
"""
from unittest.mock import MagicMock, call

import pytest

from docker_chaos.config import config
from docker_chaos.events import LoggingIntentSink, MultiSink
from docker_chaos.exceptions import (
    NetemSequenceError,
    ToolFailedError,
    ToolMissingError,
    ValidationError,
)
from docker_chaos.manager import ChaosManager
from docker_chaos.models.enums import ChaosOperation, ExecutionStrategy
from docker_chaos.models.netem import NetemLossParams
from docker_chaos.sequencer import StopSequencer

HELPER_IMAGE = "gaiadocker/iproute2"


@pytest.fixture
def manager(client, sink):
    return ChaosManager(client=client, tc_image="", sink=sink)


@pytest.fixture
def helper_manager(client, sink):
    return ChaosManager(client=client, tc_image=HELPER_IMAGE, sink=sink)


@pytest.mark.parametrize("tc_image", ["", HELPER_IMAGE])
def test_dry_run_makes_no_runtime_calls(client, sink, container, tc_image):
    sequencer = MagicMock(spec=StopSequencer)
    manager = ChaosManager(client=client, tc_image=tc_image, sink=sink, sequencer=sequencer)

    manager.stop(container, timeout=5, dry_run=True)
    manager.kill(container, "SIGTERM", dry_run=True)
    manager.start(container, dry_run=True)
    manager.rename(container, "web-old", dry_run=True)
    manager.remove_image(container, force=True, dry_run=True)
    manager.remove_container(container, force=True, links=True, volumes=True, dry_run=True)
    manager.pause(container, dry_run=True)
    manager.unpause(container, dry_run=True)
    manager.netem_start(container, ["delay", "100ms"], dry_run=True)
    manager.netem_start(container, ["delay", "100ms"], target_ip="10.0.0.5", dry_run=True)
    manager.netem_stop(container, dry_run=True)

    assert client.mock_calls == []
    assert sequencer.mock_calls == []
    assert len(sink.intents) == 11
    assert all(intent.dry_run for intent in sink.intents)


def test_every_operation_emits_one_intent(manager, client, sink, container):
    client.create_container.return_value = "new-id"
    client.exec_inspect.return_value = 0

    manager.kill(container)
    manager.start(container)
    manager.pause(container)
    manager.unpause(container)
    manager.netem_stop(container)

    assert [i.operation for i in sink.intents] == [
        ChaosOperation.KILL,
        ChaosOperation.START,
        ChaosOperation.PAUSE,
        ChaosOperation.UNPAUSE,
        ChaosOperation.NETEM_STOP,
    ]
    assert not any(i.dry_run for i in sink.intents)
    assert sink.intents[0].container_id == container.id


class TestLifecycle:
    """Lifecycle operations go straight to the runtime client"""

    def test_stop_delegates_to_sequencer(self, client, sink, container):
        sequencer = MagicMock(spec=StopSequencer)
        manager = ChaosManager(client=client, sink=sink, sequencer=sequencer)

        result = manager.stop(container, timeout=7)

        sequencer.stop.assert_called_once_with(container, 7)
        assert result is sequencer.stop.return_value
        assert sink.intents[0].params == {"signal": "SIGTERM", "timeout": 7}

    def test_stop_default_timeout(self, client, sink, container):
        sequencer = MagicMock(spec=StopSequencer)
        manager = ChaosManager(client=client, sink=sink, sequencer=sequencer)

        manager.stop(container)

        sequencer.stop.assert_called_once_with(container, config.stop_timeout)

    def test_stop_negative_timeout(self, manager, container):
        with pytest.raises(ValidationError):
            manager.stop(container, timeout=-1)

    def test_kill_normalizes_signal(self, manager, client, container):
        manager.kill(container, "term")

        client.kill_container.assert_called_once_with(container.id, "SIGTERM")

    def test_kill_unknown_signal(self, manager, client, sink, container):
        with pytest.raises(ValidationError, match="SIGFOO"):
            manager.kill(container, "SIGFOO")

        assert client.mock_calls == []
        assert sink.intents == []

    def test_start_recreates_from_snapshot(self, manager, client, container):
        client.create_container.return_value = "b7e1"

        assert manager.start(container) == "b7e1"

        config_arg, name_arg = client.create_container.call_args.args
        assert name_arg == "web"
        assert config_arg["Image"] == "nginx:1.25"
        assert config_arg["HostConfig"] == {"NetworkMode": "bridge"}
        client.start_container.assert_called_once_with("b7e1")

    def test_rename(self, manager, client, container):
        manager.rename(container, "web-old")

        client.rename_container.assert_called_once_with(container.id, "web-old")

    def test_remove_image(self, manager, client, container):
        manager.remove_image(container, force=True)

        client.remove_image.assert_called_once_with("sha256:9c1e", force=True)

    def test_remove_container_flags(self, manager, client, container):
        manager.remove_container(container, force=True, volumes=True)

        client.remove_container.assert_called_once_with(
            container.id, force=True, links=False, volumes=True
        )

    def test_pause_unpause(self, manager, client, container):
        manager.pause(container)
        manager.unpause(container)

        assert client.mock_calls == [
            call.pause_container(container.id),
            call.unpause_container(container.id),
        ]

    def test_list_containers_delegates(self, manager, client):
        client.list_containers.return_value = []

        assert manager.list_containers() == []
        client.list_containers.assert_called_once_with(None)


class TestNetem:
    """Network chaos through the selected executor"""

    def test_strategy_follows_tc_image(self, manager, helper_manager):
        assert manager.executor.strategy is ExecutionStrategy.IN_NAMESPACE
        assert helper_manager.executor.strategy is ExecutionStrategy.HELPER_CONTAINER

    def test_missing_tc_never_runs_privileged_exec(self, manager, client, container):
        client.exec_create.return_value = "check-exec"
        client.exec_inspect.return_value = 1

        with pytest.raises(ToolMissingError):
            manager.netem_start(container, ["delay", "100ms"], interface="eth0")

        client.exec_create.assert_called_once_with(container.id, ["which", "tc"])
        for c in client.exec_create.call_args_list:
            assert not c.kwargs.get("privileged")

    def test_in_namespace_start(self, manager, client, container):
        client.exec_create.side_effect = ["check-exec", "tc-exec"]
        client.exec_inspect.return_value = 0

        manager.netem_start(container, ["loss", "10%"], interface="eth0")

        client.exec_create.assert_called_with(
            container.id,
            ["tc", "qdisc", "add", "dev", "eth0", "root", "netem", "loss", "10%"],
            privileged=True,
        )

    def test_filtered_start_with_helper(self, helper_manager, client, container):
        client.create_helper_container.side_effect = ["h1", "h2", "h3"]

        helper_manager.netem_start(
            container, ["delay", "100ms"], interface="eth0", target_ip="10.0.0.5"
        )

        cmds = [c.kwargs["cmd"] for c in client.create_helper_container.call_args_list]
        assert cmds == [
            ["qdisc", "add", "dev", "eth0", "root", "handle", "1:", "prio"],
            ["qdisc", "add", "dev", "eth0", "parent", "1:3", "netem", "delay", "100ms"],
            ["filter", "add", "dev", "eth0", "protocol", "ip", "parent", "1:0", "prio", "3",
             "u32", "match", "ip", "dport", "10.0.0.5", "flowid", "1:3"],
        ]
        assert client.start_container.call_args_list == [call("h1"), call("h2"), call("h3")]

    def test_filtered_start_partial_failure(self, manager, client, container):
        client.exec_create.return_value = "exec"
        # which, prio ok, which, netem fails
        client.exec_inspect.side_effect = [0, 0, 0, 2]

        with pytest.raises(NetemSequenceError) as excinfo:
            manager.netem_start(container, ["delay", "100ms"], target_ip="10.0.0.5")

        assert len(excinfo.value.completed) == 1
        assert isinstance(excinfo.value.__cause__, ToolFailedError)

    def test_netem_params_model(self, helper_manager, client, container):
        helper_manager.netem_start(container, NetemLossParams(loss="20", correlation="50"))

        cmd = client.create_helper_container.call_args.kwargs["cmd"]
        assert cmd[-3:] == ["loss", "20%", "50%"]
        assert cmd[3] == config.network_interface

    def test_netem_args_string_is_split_on_whitespace(self, helper_manager, client, container):
        helper_manager.netem_start(container, "delay  100ms 10ms", interface="eth0")

        cmd = client.create_helper_container.call_args.kwargs["cmd"]
        assert cmd == ["qdisc", "add", "dev", "eth0", "root", "netem", "delay", "100ms", "10ms"]

    def test_blank_netem_args_string(self, manager, client, container):
        with pytest.raises(ValidationError):
            manager.netem_start(container, "   ")
        assert client.mock_calls == []

    def test_invalid_target_ip(self, manager, client, container):
        with pytest.raises(ValidationError):
            manager.netem_start(container, ["delay", "100ms"], target_ip="10.0.0.300")
        assert client.mock_calls == []

    def test_empty_netem_args(self, manager, container):
        with pytest.raises(ValidationError):
            manager.netem_start(container, [])

    def test_invalid_interface(self, manager, container):
        with pytest.raises(ValidationError):
            manager.netem_stop(container, interface="eth 0")

    def test_stop(self, helper_manager, client, container):
        helper_manager.netem_stop(container, interface="eth1")

        client.create_helper_container.assert_called_once_with(
            image=HELPER_IMAGE,
            entrypoint=["tc"],
            cmd=["qdisc", "del", "dev", "eth1", "root", "netem"],
            target_id=container.id,
        )

    def test_intent_records_netem_parameters(self, helper_manager, sink, container):
        helper_manager.netem_start(container, ["rate", "1mbit"], target_ip="10.0.0.5", dry_run=True)

        intent = sink.intents[0]
        assert intent.operation is ChaosOperation.NETEM_START
        assert intent.params["netem"] == "rate 1mbit"
        assert intent.params["target_ip"] == "10.0.0.5"
        assert intent.params["strategy"] == "helper-container"


def test_default_sink_logs_dry_run_prefix(client, container, caplog):
    manager = ChaosManager(client=client, sink=MultiSink([LoggingIntentSink()]))

    with caplog.at_level("INFO", logger="docker_chaos.events"):
        manager.pause(container, dry_run=True)

    assert "DRY: pause web (3f2a9c1e)" in caplog.text
