"""
probers/process.py

Prober that delegates to the operating system's ping utility and parses
the latency out of its textual report.
"""

import locale
import logging
import platform
import re
import subprocess
from typing import List, Optional

from pingkit.constants import PING_BINARY
from pingkit.probers.prober import Prober, ProbeConfiguration, ProbeResult
from pingkit.utils import round_latency

logger = logging.getLogger(__name__)


class ExternalProcessProber(Prober):
    """
    Runs a single echo through the system ping command.

    The command is passed to subprocess as an argument list, so no shell
    ever sees the host name.
    """

    # Matches "time=12.3 ms" (Linux, macOS) and "time<1ms" (Windows).
    TIME_PATTERN = re.compile(r"time(?:=|<)(?P<time>[\.0-9]+)(?:|\s)ms")

    def __init__(self, ping_bin: str = PING_BINARY, system: Optional[str] = None):
        """
        Initializes the prober.

        Args:
            ping_bin: The ping executable to run.
            system: Platform name as reported by platform.system(). Detected
                at probe time when not given.
        """
        self.ping_bin = ping_bin
        self.system = system

    def build_command(self, config: ProbeConfiguration, system: Optional[str] = None) -> List[str]:
        """
        Builds the ping argument list for the given platform.

        Windows and the BSD-derived pings take the wait in milliseconds,
        Linux iputils ping takes it in seconds.
        """
        system = (system or self.system or platform.system()).lower()
        ttl = int(config.ttl)
        wait = int(config.wait)

        if system.startswith("win"):
            # -n = number of pings; -i = ttl; -w = timeout in ms.
            return [self.ping_bin, "-n", "1", "-i", str(ttl), "-w", str(wait * 1000), config.host]

        if system != "linux":
            wait = wait * 1000
        # -n = numeric output; -c = number of pings; -t = ttl; -W = wait.
        return [self.ping_bin, "-n", "-c", "1", "-t", str(ttl), "-W", str(wait), config.host]

    def parse_output(self, output: str) -> ProbeResult:
        """
        Parses the latency out of ping's standard output.

        Blank lines are dropped so that the reply line is always the second
        one, whatever banner the platform prints first.
        """
        lines = [line for line in output.splitlines() if line.strip()]
        if len(lines) < 2:
            return ProbeResult.unreachable("no reply line in ping output")

        match = self.TIME_PATTERN.search(lines[1])
        if not match or not match.group("time"):
            return ProbeResult.unreachable(f"no time in reply line: {lines[1].strip()}")

        try:
            latency = float(match.group("time"))
        except ValueError:
            return ProbeResult.unreachable(f"unparsable time: {match.group('time')}")

        return ProbeResult.reached(round_latency(latency))

    def probe(self, config: ProbeConfiguration) -> ProbeResult:
        if config.host.startswith("-"):
            logger.warning(f"Refusing to pass host {config.host!r} to {self.ping_bin}, it would be read as an option")
            return ProbeResult.unreachable("host looks like a command line option")

        try:
            cmd = self.build_command(config)
        except (TypeError, ValueError) as e:
            logger.warning(f"Cannot build ping command for {config.host}: {e}")
            return ProbeResult.unreachable(f"invalid configuration: {e}")

        logger.debug(f"Running {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.debug(f"Could not run {self.ping_bin}: {e}")
            return ProbeResult.unreachable(f"could not run {self.ping_bin}: {e}")

        # A non-zero exit code alone is not a failure, only a missing time is.
        output = (proc.stdout or b"").decode(locale.getpreferredencoding(False), errors="replace")
        result = self.parse_output(output)
        if result.reachable:
            logger.info(f"{config.host} replied to {self.ping_bin} in {result.latency} ms")
        else:
            logger.debug(f"{config.host} unreachable via {self.ping_bin} (exit {proc.returncode}): {result.reason}")
        return result
