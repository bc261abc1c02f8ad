from pingkit.probers.prober import Prober, ProbeConfiguration, ProbeResult
from pingkit.probers.process import ExternalProcessProber
from pingkit.probers.tcp import TcpHandshakeProber
from pingkit.probers.icmp import RawIcmpProber

__all__ = [
    "Prober",
    "ProbeConfiguration",
    "ProbeResult",
    "ExternalProcessProber",
    "TcpHandshakeProber",
    "RawIcmpProber",
]
