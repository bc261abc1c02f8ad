import subprocess

import pytest

from pingkit.probers import ExternalProcessProber, ProbeConfiguration
from pingkit.probers import process as process_mod

LINUX_OUTPUT = """PING 127.0.0.1 (127.0.0.1) 56(84) bytes of data.
64 bytes from 127.0.0.1: icmp_seq=1 ttl=64 time=12.3 ms

--- 127.0.0.1 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
rtt min/avg/max/mdev = 12.300/12.300/12.300/0.000 ms
"""

MACOS_OUTPUT = """PING 10.0.0.1 (10.0.0.1): 56 data bytes
64 bytes from 10.0.0.1: icmp_seq=0 ttl=64 time=4.512 ms

--- 10.0.0.1 ping statistics ---
1 packets transmitted, 1 packets received, 0.0% packet loss
round-trip min/avg/max/stddev = 4.512/4.512/4.512/0.000 ms
"""

WINDOWS_OUTPUT = """
Pinging 127.0.0.1 with 32 bytes of data:
Reply from 127.0.0.1: bytes=32 time<1ms TTL=128

Ping statistics for 127.0.0.1:
    Packets: Sent = 1, Received = 1, Lost = 0 (0% loss),
"""

WINDOWS_SLOW_OUTPUT = """
Pinging 192.168.1.1 with 32 bytes of data:
Reply from 192.168.1.1: bytes=32 time=37ms TTL=64
"""

LINUX_TIMEOUT_OUTPUT = """PING 192.0.2.1 (192.0.2.1) 56(84) bytes of data.

--- 192.0.2.1 ping statistics ---
1 packets transmitted, 0 received, 100% packet loss, time 0ms
"""

WINDOWS_TIMEOUT_OUTPUT = """
Pinging 192.0.2.1 with 32 bytes of data:
Request timed out.

Ping statistics for 192.0.2.1:
"""


@pytest.fixture
def prober():
    return ExternalProcessProber()


@pytest.mark.parametrize(
    "output, latency",
    [
        (LINUX_OUTPUT, 12),
        (MACOS_OUTPUT, 5),
        (WINDOWS_OUTPUT, 1),
        (WINDOWS_SLOW_OUTPUT, 37),
        ("PING x\n64 bytes from x: time=0.5 ms\n", 1),
        ("PING x\n64 bytes from x: time=2.5 ms\n", 3),
        ("PING x\n64 bytes from x: time=0.045 ms\n", 0),
    ],
)
def test_parse_output_reachable(prober, output, latency):
    result = prober.parse_output(output)
    assert result.reachable
    assert result.latency == latency
    assert result.reason is None


@pytest.mark.parametrize(
    "output",
    [
        "",
        "\n\n\n",
        "ping: unknown host nowhere.invalid\n",
        LINUX_TIMEOUT_OUTPUT,
        WINDOWS_TIMEOUT_OUTPUT,
        "PING x\n64 bytes from x: time=. ms\n",
    ],
)
def test_parse_output_unreachable(prober, output):
    result = prober.parse_output(output)
    assert not result.reachable
    assert result.latency is None
    assert result.reason


def test_parse_output_only_reads_second_line(prober):
    """A time on any line other than the reply line is ignored."""
    output = "header time=3 ms\nno reply here\nlater time=5 ms\n"
    assert not prober.parse_output(output).reachable


def test_build_command_linux(prober):
    config = ProbeConfiguration("example.com", ttl=64, wait=2)
    assert prober.build_command(config, "Linux") == [
        "ping", "-n", "-c", "1", "-t", "64", "-W", "2", "example.com",
    ]


@pytest.mark.parametrize("system", ["Darwin", "FreeBSD", "OpenBSD"])
def test_build_command_other_unix_uses_milliseconds(prober, system):
    config = ProbeConfiguration("example.com", ttl=64, wait=2)
    assert prober.build_command(config, system) == [
        "ping", "-n", "-c", "1", "-t", "64", "-W", "2000", "example.com",
    ]


def test_build_command_windows(prober):
    config = ProbeConfiguration("example.com", ttl=32, wait=3)
    assert prober.build_command(config, "Windows") == [
        "ping", "-n", "1", "-i", "32", "-w", "3000", "example.com",
    ]


def test_build_command_defaults(prober):
    config = ProbeConfiguration("10.1.1.1")
    assert prober.build_command(config, "Linux") == [
        "ping", "-n", "-c", "1", "-t", "255", "-W", "10", "10.1.1.1",
    ]


def test_build_command_keeps_host_as_single_argument(prober):
    """Shell metacharacters reach ping verbatim as one argument."""
    host = "example.com; rm -rf / #"
    cmd = prober.build_command(ProbeConfiguration(host), "Linux")
    assert cmd[-1] == host
    assert len(cmd) == 9


def test_system_from_constructor_is_used():
    prober = ExternalProcessProber(ping_bin="/bin/ping", system="Windows")
    cmd = prober.build_command(ProbeConfiguration("h", wait=1))
    assert cmd[0] == "/bin/ping"
    assert "-w" in cmd and cmd[cmd.index("-w") + 1] == "1000"


class FakeRun:
    """Stands in for subprocess.run, recording the argument list."""

    def __init__(self, stdout="", returncode=0, exc=None):
        self.stdout = stdout
        self.returncode = returncode
        self.exc = exc
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.exc:
            raise self.exc
        stdout = self.stdout.encode() if isinstance(self.stdout, str) else self.stdout
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=stdout)


def test_probe_reachable(monkeypatch):
    fake = FakeRun(stdout=LINUX_OUTPUT)
    monkeypatch.setattr(process_mod.subprocess, "run", fake)

    result = ExternalProcessProber(system="Linux").probe(ProbeConfiguration("127.0.0.1"))

    assert result.reachable
    assert result.latency == 12
    cmd, kwargs = fake.calls[0]
    assert cmd == ["ping", "-n", "-c", "1", "-t", "255", "-W", "10", "127.0.0.1"]
    assert not kwargs.get("shell", False)


def test_probe_nonzero_exit_with_time_is_reachable(monkeypatch):
    monkeypatch.setattr(process_mod.subprocess, "run", FakeRun(stdout=MACOS_OUTPUT, returncode=2))
    result = ExternalProcessProber(system="Darwin").probe(ProbeConfiguration("10.0.0.1"))
    assert result.latency == 5


def test_probe_no_time_is_unreachable(monkeypatch):
    monkeypatch.setattr(process_mod.subprocess, "run", FakeRun(stdout=LINUX_TIMEOUT_OUTPUT, returncode=1))
    result = ExternalProcessProber(system="Linux").probe(ProbeConfiguration("192.0.2.1"))
    assert not result.reachable


def test_probe_missing_binary_is_unreachable(monkeypatch):
    monkeypatch.setattr(process_mod.subprocess, "run", FakeRun(exc=FileNotFoundError("ping")))
    result = ExternalProcessProber().probe(ProbeConfiguration("127.0.0.1"))
    assert not result.reachable
    assert "ping" in result.reason


def test_probe_refuses_option_like_host(monkeypatch):
    fake = FakeRun(stdout=LINUX_OUTPUT)
    monkeypatch.setattr(process_mod.subprocess, "run", fake)

    result = ExternalProcessProber().probe(ProbeConfiguration("-f"))

    assert not result.reachable
    assert fake.calls == []


def test_probe_invalid_ttl_is_unreachable(monkeypatch):
    fake = FakeRun(stdout=LINUX_OUTPUT)
    monkeypatch.setattr(process_mod.subprocess, "run", fake)

    result = ExternalProcessProber().probe(ProbeConfiguration("127.0.0.1", ttl="many"))

    assert not result.reachable
    assert fake.calls == []


def test_probe_undecodable_output_is_unreachable(monkeypatch):
    """Bytes that are not valid text are replaced, not raised."""
    output = b"PING 127.0.0.1 (127.0.0.1) 56(84) bytes of data.\n64 bytes from 127.0.0.1: time=\xff\xfe ms\n"
    monkeypatch.setattr(process_mod.subprocess, "run", FakeRun(stdout=output))

    result = ExternalProcessProber(system="Linux").probe(ProbeConfiguration("127.0.0.1"))

    assert not result.reachable
    assert result.reason


def test_probe_undecodable_banner_still_parses_reply(monkeypatch):
    output = b"Pinging \xff\xfe\xfd with 32 bytes of data:\nReply from 127.0.0.1: bytes=32 time=3.2 ms TTL=128\n"
    monkeypatch.setattr(process_mod.subprocess, "run", FakeRun(stdout=output))

    result = ExternalProcessProber(system="Windows").probe(ProbeConfiguration("127.0.0.1"))

    assert result.latency == 3


def test_probe_host_with_null_byte_is_unreachable():
    """subprocess refuses the argument list before anything is spawned."""
    result = ExternalProcessProber(system="Linux").probe(ProbeConfiguration("127.0.0.1\x00; id"))
    assert not result.reachable
    assert "could not run" in result.reason


@pytest.mark.parametrize("host", ["127.0.0.1\r\nPING", "\x1b[2J", "host\tname"])
def test_probe_control_characters_in_host_are_unreachable(monkeypatch, host):
    fake = FakeRun(stdout=f"ping: {host}: Name or service not known\n", returncode=2)
    monkeypatch.setattr(process_mod.subprocess, "run", fake)

    result = ExternalProcessProber(system="Linux").probe(ProbeConfiguration(host))

    assert not result.reachable
    assert fake.calls[0][0][-1] == host
