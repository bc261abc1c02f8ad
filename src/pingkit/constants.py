"""
constants.py

Constants used throughout the library.
"""

# Probe methods
METHOD_PROCESS = "process"
METHOD_HANDSHAKE = "handshake"
METHOD_RAW_ICMP = "raw-icmp"

# Legacy method names
METHOD_ALIASES = {
    "exec": METHOD_PROCESS,
    "fsockopen": METHOD_HANDSHAKE,
    "socket": METHOD_RAW_ICMP,
}

# Configuration defaults
DEFAULT_TTL = 255
DEFAULT_WAIT = 10
DEFAULT_PORT = 80
PAYLOAD = b"Ping"

# ICMP
ICMP_ECHO_REQUEST = 8
ICMP_ECHO_CODE = 0
RAW_RECEIVE_TIMEOUT = 10  # seconds, independent of configuration
RAW_RECEIVE_BUFFER = 255

PING_BINARY = "ping"
