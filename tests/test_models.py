"""
Tests for SDK models
"""
import pydantic
import pytest

from docker_chaos.exceptions import AmbiguousSelectorError
from docker_chaos.models import (
    ContainerSelector,
    ContainerSnapshot,
    NetemCorruptParams,
    NetemDelayParams,
    NetemDuplicateParams,
    NetemLossParams,
    NetemParams,
    NetemRateParams,
    NetemReorderParams,
)
from docker_chaos.models.enums import SKIP_LABEL


class TestContainerSnapshot:
    """Snapshots built from inspect payloads"""

    def test_from_inspect(self):
        snapshot = ContainerSnapshot.from_inspect(
            {
                "Id": "3f2a",
                "Name": "/web",
                "Image": "sha256:9c1e",
                "Config": {"Image": "nginx", "Labels": {"tier": "front"}, "StopSignal": "SIGQUIT"},
                "HostConfig": {"Memory": 0},
            },
            {"Config": {"StopSignal": "SIGINT"}},
        )

        assert snapshot.name == "web"
        assert snapshot.image_id == "sha256:9c1e"
        assert snapshot.stop_signal == "SIGQUIT"
        assert snapshot.labels == {"tier": "front"}
        assert str(snapshot) == "web (3f2a)"

    def test_image_stop_signal_fallback(self):
        snapshot = ContainerSnapshot.from_inspect(
            {"Id": "3f2a", "Name": "/web", "Config": {"Labels": None}},
            {"Config": {"StopSignal": "SIGINT"}},
        )

        assert snapshot.graceful_signal() == "SIGINT"
        assert snapshot.labels == {}

    def test_default_graceful_signal(self):
        assert ContainerSnapshot(id="a", name="b").graceful_signal() == "SIGTERM"

    def test_frozen(self, container):
        with pytest.raises(pydantic.ValidationError):
            container.name = "other"

    def test_creation_config_embeds_host_config(self, container):
        payload = container.creation_config()

        assert payload["HostConfig"] == {"NetworkMode": "bridge"}
        assert "HostConfig" not in container.runtime_config

    def test_creation_config_is_a_copy(self, container):
        payload = container.creation_config()
        payload["Cmd"].append("--extra")
        payload["HostConfig"]["NetworkMode"] = "host"

        assert container.runtime_config["Cmd"] == ["nginx", "-g", "daemon off;"]
        assert container.host_config == {"NetworkMode": "bridge"}

    def test_inspect_payload_changes_do_not_leak(self):
        info = {"Id": "3f2a", "Name": "/web", "Config": {"Env": ["A=1"], "Labels": {"tier": "front"}}}
        snapshot = ContainerSnapshot.from_inspect(info)

        info["Config"]["Env"].append("B=2")
        info["Config"]["Labels"]["tier"] = "back"

        assert snapshot.runtime_config["Env"] == ["A=1"]
        assert snapshot.labels == {"tier": "front"}


class TestContainerSelector:
    """Target selection"""

    def test_names_and_pattern_are_exclusive(self):
        with pytest.raises(AmbiguousSelectorError):
            ContainerSelector(names=["web"], pattern="^api-")

    def test_invalid_pattern(self):
        with pytest.raises(pydantic.ValidationError):
            ContainerSelector.from_pattern("[unclosed")

    def test_names(self, container):
        assert ContainerSelector.from_names(["/web"]).matches(container)
        assert not ContainerSelector.from_names(["db"]).matches(container)

    def test_pattern(self, container):
        assert ContainerSelector.from_pattern("^we").matches(container)
        assert not ContainerSelector.from_pattern("^api-").matches(container)

    def test_labels_must_all_match(self):
        target = ContainerSnapshot(id="a", name="web", labels={"tier": "front", "env": "qa"})

        assert ContainerSelector(labels={"tier": "front"}).matches(target)
        assert not ContainerSelector(labels={"tier": "front", "env": "prod"}).matches(target)

    def test_skip_label_never_matches(self):
        helper = ContainerSnapshot(id="h", name="web", labels={SKIP_LABEL: "true"})

        assert not ContainerSelector().matches(helper)
        assert not ContainerSelector.from_names(["web"]).to_filter()(helper)

    def test_str(self):
        assert str(ContainerSelector()) == "All containers"
        assert str(ContainerSelector(pattern="^api", labels={"env": "qa"})) == \
            "Pattern: ^api with labels env=qa"


class TestNetemParams:
    """Netem argument rendering"""

    def test_delay(self):
        assert NetemDelayParams(latency="100ms").to_netem_args() == ["delay", "100ms"]

    def test_delay_with_jitter_and_distribution(self):
        params = NetemDelayParams(
            latency="100ms", jitter="10ms", correlation="25", distribution="normal"
        )

        assert params.to_netem_args() == [
            "delay", "100ms", "10ms", "25%", "distribution", "normal"
        ]

    def test_distribution_requires_jitter(self):
        params = NetemDelayParams(latency="100ms", distribution="pareto")

        assert params.to_netem_args() == ["delay", "100ms"]

    def test_invalid_latency(self):
        with pytest.raises(pydantic.ValidationError):
            NetemDelayParams(latency="100")

    def test_loss_accepts_percent_suffix(self):
        assert NetemLossParams(loss="10%").to_netem_args() == ["loss", "10%"]

    def test_loss_out_of_range(self):
        with pytest.raises(pydantic.ValidationError):
            NetemLossParams(loss="120")

    def test_duplicate_and_corrupt(self):
        assert NetemDuplicateParams(duplicate="1", correlation="10").to_netem_args() == \
            ["duplicate", "1%", "10%"]
        assert NetemCorruptParams(corrupt="0.5").to_netem_args() == ["corrupt", "0.5%"]

    def test_rate_positional_options(self):
        assert NetemRateParams(rate="1mbit").to_netem_args() == ["rate", "1mbit"]
        assert NetemRateParams(rate="1mbit", packet_overhead=-4, cell_size=53).to_netem_args() == \
            ["rate", "1mbit", "-4", "53"]
        # cell_size without packet_overhead has no position
        assert NetemRateParams(rate="1mbit", cell_size=53).to_netem_args() == ["rate", "1mbit"]

    def test_invalid_rate(self):
        with pytest.raises(pydantic.ValidationError):
            NetemRateParams(rate="fast")

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            NetemParams()

    def test_reorder(self):
        params = NetemReorderParams(reorder="25", correlation="50", gap=5)

        assert params.to_netem_args() == [
            "delay", "10ms", "reorder", "25%", "50%", "gap", "5"
        ]
