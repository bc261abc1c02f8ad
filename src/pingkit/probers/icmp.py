"""
probers/icmp.py

Prober that sends a hand-built ICMP echo request over a raw socket and
times the reply. Creating the socket needs root (or CAP_NET_RAW) on
most systems; without it the host is reported unreachable.
"""

import logging
import socket
import time

from pingkit.constants import RAW_RECEIVE_BUFFER, RAW_RECEIVE_TIMEOUT
from pingkit.exceptions import PacketParseError
from pingkit.packets import ICMP, IP
from pingkit.probers.prober import Prober, ProbeConfiguration, ProbeResult
from pingkit.utils import elapsed_ms, resolve_ip

logger = logging.getLogger(__name__)


def build_echo_request(payload: bytes) -> bytes:
    """Creates an ICMP echo request with identifier and sequence zero."""
    return bytes(ICMP(identifier=0, sequence=0, payload=payload))


def describe_reply(raw_packet: bytes) -> str:
    """Returns a short description of a packet read from the raw socket."""
    try:
        ip = IP(raw_packet)
        icmp = ICMP(ip.payload)
    except PacketParseError as e:
        return f"unparsable reply ({len(raw_packet)} bytes): {e}"
    return f"{icmp!r} from {ip.src}"


class RawIcmpProber(Prober):
    """Pings a host with a single ICMP echo request over a raw socket."""

    def __init__(self, timeout: float = RAW_RECEIVE_TIMEOUT, bufsize: int = RAW_RECEIVE_BUFFER):
        """
        Initializes the prober.

        Args:
            timeout: Seconds to wait for the reply. Not taken from the
                probe configuration.
            bufsize: Maximum number of bytes read from the reply.
        """
        self.timeout = timeout
        self.bufsize = bufsize

    def _create_raw_socket(self) -> socket.socket:
        """Creates a raw ICMP socket with the receive timeout applied."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
        sock.settimeout(self.timeout)
        return sock

    def probe(self, config: ProbeConfiguration) -> ProbeResult:
        packet = build_echo_request(config.payload)

        destination_ip = resolve_ip(config.host)
        if destination_ip is None:
            logger.debug(f"Could not resolve {config.host}")
            return ProbeResult.unreachable(f"could not resolve {config.host}")

        try:
            sock = self._create_raw_socket()
        except PermissionError as e:
            logger.debug(f"Permission denied for raw ICMP socket: {e}")
            return ProbeResult.unreachable("permission denied for raw socket")
        except OSError as e:
            logger.debug(f"Failed to create raw ICMP socket: {e}")
            return ProbeResult.unreachable(f"raw socket unavailable: {e}")

        try:
            try:
                sock.connect((destination_ip, 0))
            except OSError as e:
                logger.debug(f"Could not connect raw socket to {destination_ip}: {e}")
                return ProbeResult.unreachable(f"connect failed: {e}")

            start = time.perf_counter()
            try:
                sock.send(packet)
                reply = sock.recv(self.bufsize)
            except socket.timeout:
                logger.debug(f"No reply from {config.host} ({destination_ip}) within {self.timeout}s")
                return ProbeResult.unreachable("timed out waiting for reply")
            except OSError as e:
                logger.debug(f"Echo request to {destination_ip} failed: {e}")
                return ProbeResult.unreachable(f"echo failed: {e}")
            end = time.perf_counter()
        finally:
            sock.close()

        latency = elapsed_ms(start, end)
        logger.info(f"{config.host} ({destination_ip}) answered in {latency} ms")
        logger.debug(f"Reply: {describe_reply(reply)}")
        return ProbeResult.reached(latency)
