"""
dispatcher.py

Entry points for probing a host: ProbeDispatcher picks a prober by
method name, ping() runs one probe on the default dispatcher, and Ping
keeps a host and its settings around between calls.
"""

import logging
from typing import Dict, Mapping, Optional

from pingkit.constants import (DEFAULT_PORT, DEFAULT_TTL, DEFAULT_WAIT,
                               METHOD_ALIASES, METHOD_HANDSHAKE,
                               METHOD_PROCESS, METHOD_RAW_ICMP)
from pingkit.exceptions import ConfigurationError
from pingkit.probers import (ExternalProcessProber, Prober,
                             ProbeConfiguration, ProbeResult, RawIcmpProber,
                             TcpHandshakeProber)

logger = logging.getLogger(__name__)


def default_probers() -> Dict[str, Prober]:
    """Returns a fresh mapping of method name to prober."""
    return {
        METHOD_PROCESS: ExternalProcessProber(),
        METHOD_HANDSHAKE: TcpHandshakeProber(),
        METHOD_RAW_ICMP: RawIcmpProber(),
    }


class ProbeDispatcher:
    """Selects a prober by method name and runs it."""

    def __init__(self, probers: Optional[Mapping[str, Prober]] = None):
        """
        Initializes the dispatcher.

        Args:
            probers: Method name to prober. Defaults to the process,
                handshake and raw-icmp probers.
        """
        self.probers: Dict[str, Prober] = dict(probers) if probers is not None else default_probers()

    def register(self, method: str, prober: Prober) -> None:
        """Adds or replaces the prober used for method."""
        self.probers[method] = prober

    def resolve(self, method: str) -> Optional[Prober]:
        """Returns the prober for method or one of its aliases, if any."""
        prober = self.probers.get(method)
        if prober is None and method in METHOD_ALIASES:
            prober = self.probers.get(METHOD_ALIASES[method])
        return prober

    def ping(self, config: ProbeConfiguration, method: str = METHOD_PROCESS) -> ProbeResult:
        """
        Probes config.host with the given method.

        An unknown method is reported as unreachable rather than raised.
        """
        prober = self.resolve(method)
        if prober is None:
            logger.warning(f"Unknown probe method {method!r}, expected one of {sorted(self.probers)}")
            return ProbeResult.unreachable(f"unknown probe method: {method}")

        logger.debug(f"Probing {config.host} with {method} ({type(prober).__name__})")
        return prober.probe(config)


_default_dispatcher = ProbeDispatcher()


def ping(config: ProbeConfiguration, method: str = METHOD_PROCESS) -> ProbeResult:
    """Probes config.host once with the given method."""
    return _default_dispatcher.ping(config, method)


class Ping:
    """
    Pings a host.

    Holds the host and its probe settings. Every call to ping() or probe()
    uses the values set at that moment.

    Example:
        >>> latency = Ping("www.example.com").ping()
    """

    def __init__(
        self,
        host: str,
        ttl: int = DEFAULT_TTL,
        wait: int = DEFAULT_WAIT,
        port: int = DEFAULT_PORT,
        dispatcher: Optional[ProbeDispatcher] = None,
    ):
        """
        Initializes the Ping object.

        Args:
            host: The host to be pinged.
            ttl: Time-to-live in hops. By convention 0 is the same host,
                1 the same subnet, 32 the same site, 64 the same region,
                128 the same continent and 255 unrestricted. The handshake
                method also uses it as a timeout in seconds, so 5-10 is a
                better choice there.
            wait: Seconds the system ping waits for a reply.
            port: Port used by the handshake method.
            dispatcher: Dispatcher to run probes on. Defaults to the
                module-level one.

        Raises:
            ConfigurationError: If host is not set.
        """
        self.host = host
        self.ttl = ttl
        self.wait = wait
        self.port = port
        self.dispatcher = dispatcher or _default_dispatcher

    @property
    def host(self) -> str:
        """Host name or IP address."""
        return self._host

    @host.setter
    def host(self, value: str) -> None:
        if not value:
            raise ConfigurationError("Host name not supplied.")
        self._host = value

    @property
    def ttl(self) -> int:
        """TTL in hops."""
        return self._ttl

    @ttl.setter
    def ttl(self, value: int) -> None:
        self._ttl = value

    @property
    def wait(self) -> int:
        """Wait time in seconds."""
        return self._wait

    @wait.setter
    def wait(self, value: int) -> None:
        self._wait = value

    @property
    def port(self) -> int:
        """Port used by the handshake method."""
        return self._port

    @port.setter
    def port(self, value: int) -> None:
        self._port = value

    def configuration(self) -> ProbeConfiguration:
        """Returns a snapshot of the current settings."""
        return ProbeConfiguration(host=self.host, ttl=self.ttl, wait=self.wait, port=self.port)

    def probe(self, method: str = METHOD_PROCESS) -> ProbeResult:
        """Pings the host and returns the full result."""
        return self.dispatcher.ping(self.configuration(), method)

    def ping(self, method: str = METHOD_PROCESS) -> Optional[int]:
        """
        Pings the host.

        Args:
            method: process (default) runs the system ping command,
                handshake opens a TCP connection to the port, raw-icmp
                sends an echo request over a raw socket (needs root).

        Returns:
            Latency in ms if the host is reachable, None otherwise.
        """
        return self.probe(method).latency
