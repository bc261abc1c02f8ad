"""
exceptions.py

Exceptions used throughout the library.
"""


class PingError(Exception):
    """Base class for pingkit errors"""
    pass


class ConfigurationError(PingError):
    """Raised when a probe configuration is missing required values"""
    pass


class PacketParseError(PingError):
    """Raised when packet parsing fails"""
    pass
