"""Tests for the node-ip commands."""

import ipaddress
import json

import pytest
from typer.testing import CliRunner

from runtimecfg.cli.commands import node_ip
from runtimecfg.cli.main import app
from runtimecfg.config import config
from runtimecfg.net.exceptions import ResolverError
from runtimecfg.net.netlink import InterfaceInfo

runner = CliRunner()


def ip(value):
    return ipaddress.ip_address(value)


@pytest.fixture
def use_resolver(monkeypatch):
    """Make every node-ip command use the given resolver."""

    def install(resolver):
        monkeypatch.setattr(node_ip, "_resolver", lambda: resolver)
        return resolver

    return install


@pytest.fixture
def no_resolver(monkeypatch):
    def fail():
        raise AssertionError("resolver must not be built")

    monkeypatch.setattr(node_ip, "_resolver", fail)


class TestShow:
    def test_vip_routed_address(self, use_resolver, stub_resolver):
        use_resolver(stub_resolver(routed=[ip("192.168.1.10")], default=[ip("10.1.1.1")]))
        result = runner.invoke(app, ["-l", "warning", "node-ip", "show", "10.0.0.5"])
        assert result.exit_code == 0
        assert result.stdout == "192.168.1.10\n"

    def test_default_route_without_vips(self, use_resolver, stub_resolver):
        resolver = use_resolver(stub_resolver(default=[ip("10.1.1.1")]))
        result = runner.invoke(app, ["-l", "warning", "node-ip", "show"])
        assert result.exit_code == 0
        assert result.stdout == "10.1.1.1\n"
        assert resolver.routed_calls == []

    def test_no_address_fails(self, use_resolver, stub_resolver):
        use_resolver(stub_resolver())
        result = runner.invoke(app, ["node-ip", "show", "10.0.0.5"])
        assert result.exit_code == 1
        assert "Failed to find node IP" in result.output

    def test_retry_flag(self, use_resolver, stub_resolver, monkeypatch):
        monkeypatch.setattr(config, "RETRY_INTERVAL_SECONDS", 0)
        resolver = use_resolver(stub_resolver(default=[[], [ip("10.1.1.1")]]))
        result = runner.invoke(app, ["-l", "warning", "node-ip", "show", "-r"])
        assert result.exit_code == 0
        assert "10.1.1.1" in result.output
        assert resolver.default_calls == 2

    def test_long_retry_flag(self, use_resolver, stub_resolver, monkeypatch):
        monkeypatch.setattr(config, "RETRY_INTERVAL_SECONDS", 0)
        use_resolver(stub_resolver(default=[[], [], [ip("10.1.1.1")]]))
        result = runner.invoke(
            app, ["-l", "warning", "node-ip", "show", "--retry-on-failure", "10.0.0.5"]
        )
        assert result.exit_code == 0

    def test_retry_flag_on_group(self, use_resolver, stub_resolver, monkeypatch):
        monkeypatch.setattr(config, "RETRY_INTERVAL_SECONDS", 0)
        resolver = use_resolver(stub_resolver(default=[[], [ip("10.1.1.1")]]))
        result = runner.invoke(app, ["-l", "warning", "node-ip", "-r", "show"])
        assert result.exit_code == 0
        assert result.stdout == "10.1.1.1\n"
        assert resolver.default_calls == 2

    def test_no_retry_by_default(self, use_resolver, stub_resolver):
        resolver = use_resolver(stub_resolver(default=[[], [ip("10.1.1.1")]]))
        result = runner.invoke(app, ["node-ip", "show"])
        assert result.exit_code == 1
        assert resolver.default_calls == 1

    @pytest.mark.parametrize("bad", ["999.999.999.999", "not-an-ip"])
    def test_malformed_vip_fails_before_resolving(self, no_resolver, bad):
        result = runner.invoke(app, ["node-ip", "show", "10.0.0.5", bad])
        assert result.exit_code == 1
        assert f"Failed to parse IP address {bad}" in result.output

    def test_resolver_error(self, use_resolver, stub_resolver):
        use_resolver(stub_resolver(error=ResolverError("read routing state", "EPERM")))
        result = runner.invoke(app, ["node-ip", "show", "-r"])
        assert result.exit_code == 1
        assert "EPERM" in result.output


class TestSet:
    def test_writes_overrides_from_default_route(self, use_resolver, stub_resolver, tmp_path):
        use_resolver(stub_resolver(default=[ip("10.1.1.1")]))
        kubelet = tmp_path / "kubelet.service.d" / "20-nodenet.conf"
        crio = tmp_path / "crio.service.d" / "20-nodenet.conf"
        result = runner.invoke(
            app,
            [
                "node-ip", "set",
                "--kubelet-override", str(kubelet),
                "--crio-override", str(crio),
            ],
        )
        assert result.exit_code == 0
        assert kubelet.read_text() == '[Service]\nEnvironment="KUBELET_NODE_IP=10.1.1.1"\n'
        assert crio.read_text() == (
            '[Service]\nEnvironment="CONTAINER_STREAM_ADDRESS=10.1.1.1"\n'
        )

    def test_override_paths_from_environment(self, use_resolver, stub_resolver, tmp_path):
        use_resolver(stub_resolver(routed=[ip("192.168.1.10")]))
        kubelet = tmp_path / "k.conf"
        crio = tmp_path / "c.conf"
        result = runner.invoke(
            app,
            ["node-ip", "set", "192.168.1.5"],
            env={
                "RUNTIMECFG_KUBELET_OVERRIDE": str(kubelet),
                "RUNTIMECFG_CRIO_OVERRIDE": str(crio),
            },
        )
        assert result.exit_code == 0
        assert "KUBELET_NODE_IP=192.168.1.10" in kubelet.read_text()
        assert "CONTAINER_STREAM_ADDRESS=192.168.1.10" in crio.read_text()

    def test_retry_flag_on_group(self, use_resolver, stub_resolver, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "RETRY_INTERVAL_SECONDS", 0)
        use_resolver(stub_resolver(default=[[], [], [ip("10.1.1.1")]]))
        kubelet = tmp_path / "k.conf"
        crio = tmp_path / "c.conf"
        result = runner.invoke(
            app,
            [
                "node-ip", "--retry-on-failure", "set",
                "--kubelet-override", str(kubelet),
                "--crio-override", str(crio),
            ],
        )
        assert result.exit_code == 0
        assert "KUBELET_NODE_IP=10.1.1.1" in kubelet.read_text()

    def test_set_prints_nothing_on_stdout(self, use_resolver, stub_resolver, tmp_path):
        use_resolver(stub_resolver(default=[ip("10.1.1.1")]))
        result = runner.invoke(
            app,
            [
                "-l", "warning", "node-ip", "set",
                "--kubelet-override", str(tmp_path / "k.conf"),
                "--crio-override", str(tmp_path / "c.conf"),
            ],
        )
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_no_address_writes_nothing(self, use_resolver, stub_resolver, tmp_path):
        use_resolver(stub_resolver())
        kubelet = tmp_path / "k.conf"
        result = runner.invoke(
            app, ["node-ip", "set", "--kubelet-override", str(kubelet)]
        )
        assert result.exit_code == 1
        assert not kubelet.exists()

    def test_persistence_failure(self, use_resolver, stub_resolver, tmp_path):
        use_resolver(stub_resolver(default=[ip("10.1.1.1")]))
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        kubelet = tmp_path / "k.conf"
        result = runner.invoke(
            app,
            [
                "node-ip", "set",
                "--kubelet-override", str(kubelet),
                "--crio-override", str(blocker / "c.conf"),
            ],
        )
        assert result.exit_code == 1
        assert "Failed to write service override" in result.output
        assert kubelet.exists()

    def test_malformed_vip(self, no_resolver, tmp_path):
        kubelet = tmp_path / "k.conf"
        result = runner.invoke(
            app, ["node-ip", "set", "--kubelet-override", str(kubelet), "bogus"]
        )
        assert result.exit_code == 1
        assert not kubelet.exists()


class TestVipable:
    def test_second_vip_attached(self, use_resolver, stub_resolver):
        use_resolver(
            stub_resolver(interfaces={"10.0.0.6": InterfaceInfo(index=3, name="eth1")})
        )
        result = runner.invoke(app, ["node-ip", "vipable", "10.0.0.5", "10.0.0.6"])
        assert result.exit_code == 0

    def test_no_vip_attached(self, use_resolver, stub_resolver):
        use_resolver(
            stub_resolver(interfaces={"10.0.0.5": InterfaceInfo(index=0, name="")})
        )
        result = runner.invoke(app, ["node-ip", "vipable", "10.0.0.5", "10.0.0.6"])
        assert result.exit_code == 1
        assert "No suitable interface for any of the VIPs" in result.output

    def test_requires_a_vip(self, no_resolver):
        result = runner.invoke(app, ["node-ip", "vipable"])
        assert result.exit_code == 2

    def test_malformed_vip(self, no_resolver):
        result = runner.invoke(app, ["node-ip", "vipable", "10.0.0.5", "nope"])
        assert result.exit_code == 1
        assert "Failed to parse IP address nope" in result.output


class TestAddresses:
    def test_json_report(self, use_resolver, stub_resolver):
        use_resolver(
            stub_resolver(routed=[ip("192.168.1.10")], default=[ip("10.1.1.1")])
        )
        result = runner.invoke(
            app, ["-l", "warning", "node-ip", "addresses", "--json", "192.168.1.5"]
        )
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["vips"] == ["192.168.1.5"]
        assert report["vip_routed"] == [
            {"address": "192.168.1.10", "source": "vip_route"}
        ]
        assert report["default_route"] == [
            {"address": "10.1.1.1", "source": "default_route"}
        ]
        assert report["chosen"] == "192.168.1.10"

    def test_json_report_nothing_found(self, use_resolver, stub_resolver):
        use_resolver(stub_resolver())
        result = runner.invoke(app, ["-l", "warning", "node-ip", "addresses", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["chosen"] is None

    def test_table(self, use_resolver, stub_resolver):
        use_resolver(stub_resolver(default=[ip("10.1.1.1"), ip("10.2.2.2")]))
        result = runner.invoke(app, ["node-ip", "addresses"])
        assert result.exit_code == 0
        assert "10.1.1.1" in result.output
        assert "10.2.2.2" in result.output


class TestLogFile:
    def test_logs_written_to_file(self, use_resolver, stub_resolver, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "LOG_FILE", "")
        use_resolver(stub_resolver(default=[ip("10.1.1.1")]))
        log_file = tmp_path / "runtimecfg.log"
        result = runner.invoke(
            app, ["--log-file", str(log_file), "node-ip", "show"]
        )
        assert result.exit_code == 0
        assert result.stdout == "10.1.1.1\n"
        assert config.LOG_FILE == str(log_file)
        assert "Chosen Node IP 10.1.1.1" in log_file.read_text()


class TestVersion:
    def test_version(self):
        from runtimecfg import __version__

        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output
