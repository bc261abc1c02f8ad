"""
probers/prober.py

An abstract class for a prober that measures the reachability of a
host, along with the configuration it is given and the result it
returns.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from pingkit.constants import DEFAULT_PORT, DEFAULT_TTL, DEFAULT_WAIT, PAYLOAD
from pingkit.exceptions import ConfigurationError


@dataclass(frozen=True)
class ProbeConfiguration:
    """
    Represents the configuration for a single probe.

    Attributes:
        host (str): The hostname or IP address to probe.
        ttl (int): IP time-to-live for the process and raw socket probers.
            The TCP handshake prober uses it as its connect timeout in seconds.
        wait (int): Seconds the system ping utility waits for a reply.
        port (int): The port the TCP handshake prober connects to.
        payload (bytes): The ICMP echo payload.
    """
    host: str
    ttl: int = DEFAULT_TTL
    wait: int = DEFAULT_WAIT
    port: int = DEFAULT_PORT
    payload: bytes = field(default=PAYLOAD, repr=False)

    def __post_init__(self):
        if not self.host:
            raise ConfigurationError("Host name not supplied.")


@dataclass(frozen=True)
class ProbeResult:
    """
    Represents the result of a probe.

    A reachable host carries its latency in whole milliseconds. Every
    failure (host down, timeout, malformed response, missing privileges)
    is reported the same way, as a result without latency; reason holds a
    short description of what went wrong for callers that want it.

    Attributes:
        latency (Optional[int]): Round-trip latency in ms, None if unreachable.
        reason (Optional[str]): Why the host was deemed unreachable.
    """
    latency: Optional[int] = None
    reason: Optional[str] = None

    @property
    def reachable(self) -> bool:
        return self.latency is not None

    @classmethod
    def reached(cls, latency: int) -> "ProbeResult":
        return cls(latency=latency)

    @classmethod
    def unreachable(cls, reason: Optional[str] = None) -> "ProbeResult":
        return cls(latency=None, reason=reason)


class Prober(ABC):
    """
    Abstract class for a probing strategy that can be run by the dispatcher.
    """

    @abstractmethod
    def probe(self, config: ProbeConfiguration) -> ProbeResult:
        """
        Send exactly one probe to config.host and return a ProbeResult.
        Implementations never raise for network failures.
        """
        raise NotImplementedError
