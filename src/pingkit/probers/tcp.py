"""
probers/tcp.py

Prober that times a TCP handshake against a port on the host.
"""

import logging
import socket
import time

from pingkit.probers.prober import Prober, ProbeConfiguration, ProbeResult
from pingkit.utils import elapsed_ms

logger = logging.getLogger(__name__)


class TcpHandshakeProber(Prober):
    """
    Connects to config.port and measures how long the handshake takes.

    No data is exchanged, an accepted connection is the only liveness
    signal. Anything listening on the port counts as reachable, whether
    or not it is the service the caller had in mind. The connect timeout
    is config.ttl seconds.
    """

    def probe(self, config: ProbeConfiguration) -> ProbeResult:
        start = time.perf_counter()
        try:
            with socket.create_connection((config.host, config.port), timeout=config.ttl):
                end = time.perf_counter()
        except (OSError, OverflowError, ValueError) as e:
            logger.debug(f"TCP connect to {config.host}:{config.port} failed: {e!r}")
            return ProbeResult.unreachable(f"tcp connect failed: {e}")

        latency = elapsed_ms(start, end)
        logger.info(f"{config.host}:{config.port} accepted a connection in {latency} ms")
        return ProbeResult.reached(latency)
