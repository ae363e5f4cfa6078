"""Unit tests for the uci command line store."""

import subprocess

import pytest

from src.uci import UciBinaryNotFoundError, UciCliStore, parse_show_output


SHOW_OUTPUT = """\
network.loopback=interface
network.loopback.proto='static'
network.lan=interface
network.lan.ipaddr='192.168.1.1'
network.lan.dns='8.8.8.8' '1.1.1.1'
network.@route[0]=route
other.x=y
"""


class FakeRunner:
    """Records commands and replays canned results."""

    def __init__(self, stdout: str = "", returncode: int = 0) -> None:
        self.calls: list[list[str]] = []
        self.stdout = stdout
        self.returncode = returncode

    def __call__(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        self.calls.append(args)
        return subprocess.CompletedProcess(
            args, self.returncode, stdout=self.stdout, stderr=""
        )


class TestParseShowOutput:
    """Tests for parse_show_output()."""

    def test_sections_and_options(self) -> None:
        """Section lines set the type, option lines the values."""
        data = parse_show_output(SHOW_OUTPUT, "network")
        assert list(data) == ["loopback", "lan", "@route[0]"]
        assert data["loopback"] == {".type": "interface", "proto": "static"}
        assert data["lan"]["ipaddr"] == "192.168.1.1"

    def test_list_values_are_joined(self) -> None:
        """List options are joined with spaces."""
        data = parse_show_output(SHOW_OUTPUT, "network")
        assert data["lan"]["dns"] == "8.8.8.8 1.1.1.1"

    def test_other_namespaces_are_ignored(self) -> None:
        """Lines of another namespace are skipped."""
        assert "x" not in parse_show_output(SHOW_OUTPUT, "network")


class TestUciCliStore:
    """Tests for UciCliStore."""

    def test_missing_binary(self) -> None:
        """A binary that is not on PATH is reported."""
        with pytest.raises(UciBinaryNotFoundError) as exc_info:
            UciCliStore(binary="definitely-not-uci-binary")
        assert exc_info.value.binary == "definitely-not-uci-binary"

    def test_show(self) -> None:
        """show runs uci -X show and parses the result."""
        runner = FakeRunner(stdout=SHOW_OUTPUT)
        store = UciCliStore(runner=runner)

        assert store.show("network", "lan") == {
            ".type": "interface",
            "ipaddr": "192.168.1.1",
            "dns": "8.8.8.8 1.1.1.1",
        }
        assert runner.calls == [["uci", "-q", "-X", "show", "network"]]

    def test_show_failure(self) -> None:
        """A failing show reports the namespace as unreadable."""
        store = UciCliStore(runner=FakeRunner(returncode=1))
        assert store.show("network") is None

    def test_confdir(self) -> None:
        """A configuration directory is passed with -c."""
        runner = FakeRunner()
        store = UciCliStore(confdir="/tmp/uci", runner=runner)
        store.get("network", "lan", "proto")
        assert runner.calls[0][:4] == ["uci", "-q", "-c", "/tmp/uci"]

    def test_get(self) -> None:
        """get strips the trailing newline."""
        runner = FakeRunner(stdout="static\n")
        store = UciCliStore(runner=runner)
        assert store.get("network", "lan", "proto") == "static"
        assert runner.calls[0][-2:] == ["get", "network.lan.proto"]

    def test_set(self) -> None:
        """set passes path=value as one argument."""
        runner = FakeRunner()
        store = UciCliStore(runner=runner)
        assert store.set("network", "lan", "proto", "dhcp")
        assert store.set("network", "wan", None, "interface")
        assert runner.calls[0][-2:] == ["set", "network.lan.proto=dhcp"]
        assert runner.calls[1][-2:] == ["set", "network.wan=interface"]

    def test_set_failure(self) -> None:
        """A non-zero exit reports failure."""
        store = UciCliStore(runner=FakeRunner(returncode=1))
        assert not store.set("network", "lan", "proto", "dhcp")

    def test_add(self) -> None:
        """add returns the generated name."""
        runner = FakeRunner(stdout="cfg0a1b2c\n")
        store = UciCliStore(runner=runner)
        assert store.add("network", "host") == "cfg0a1b2c"
        assert runner.calls[0][-3:] == ["add", "network", "host"]

    def test_add_failure(self) -> None:
        """add without output reports failure."""
        assert UciCliStore(runner=FakeRunner()).add("network", "host") is None

    def test_delete(self) -> None:
        """delete addresses options and sections."""
        runner = FakeRunner()
        store = UciCliStore(runner=runner)
        assert store.delete("network", "lan", "proto")
        assert store.delete("network", "lan")
        assert runner.calls[0][-2:] == ["delete", "network.lan.proto"]
        assert runner.calls[1][-2:] == ["delete", "network.lan"]
