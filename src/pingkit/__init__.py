# src/pingkit/__init__.py
from pingkit.constants import METHOD_HANDSHAKE, METHOD_PROCESS, METHOD_RAW_ICMP
from pingkit.exceptions import ConfigurationError, PacketParseError, PingError
from pingkit.packets import checksum
from pingkit.dispatcher import Ping, ProbeDispatcher, ping
from pingkit.probers import (ExternalProcessProber, Prober, ProbeConfiguration,
                             ProbeResult, RawIcmpProber, TcpHandshakeProber)

__version__ = "0.1.0"

__all__ = [
    "ping",
    "Ping",
    "ProbeDispatcher",
    "ProbeConfiguration",
    "ProbeResult",
    "Prober",
    "ExternalProcessProber",
    "TcpHandshakeProber",
    "RawIcmpProber",
    "ConfigurationError",
    "PacketParseError",
    "PingError",
    "checksum",
    "METHOD_PROCESS",
    "METHOD_HANDSHAKE",
    "METHOD_RAW_ICMP",
]
