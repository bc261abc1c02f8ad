"""
packets.py

Class representations of the ICMP echo packets sent by the raw socket
prober, the IPv4 header wrapped around the replies it reads, and the
Internet checksum (RFC 1071) both of them rely on.
"""

import struct
from typing import Optional

from pingkit.constants import ICMP_ECHO_CODE, ICMP_ECHO_REQUEST, PAYLOAD
from pingkit.exceptions import PacketParseError

ICMP_HEADER_FORMAT = "!BBHHH"
ICMP_HEADER_LENGTH = struct.calcsize(ICMP_HEADER_FORMAT)  # 8 bytes


def internet_checksum(data: bytes) -> int:
    """
    Calculates the 16-bit one's complement Internet checksum of data.

    Odd-length input is padded with a single zero byte, the buffer is
    summed as big-endian 16-bit words and carries are folded back into
    the low 16 bits until none remain.
    """
    if len(data) % 2 == 1:
        data += b"\0"

    words = struct.unpack("!%dH" % (len(data) // 2), data)
    total = sum(words)

    while total >> 16:
        total = (total >> 16) + (total & 0xFFFF)

    return ~total & 0xFFFF


def checksum(data: bytes) -> bytes:
    """Returns the Internet checksum of data as 2 big-endian bytes."""
    return struct.pack("!H", internet_checksum(data))


class IP:
    """Represents the IPv4 header of a received packet."""

    def __init__(self, raw: bytes):
        self.raw = raw
        self.version = 4
        self.ihl = 5
        self.ttl = 0
        self.proto = 0
        self.src = "0.0.0.0"
        self.dst = "0.0.0.0"
        self.payload = b""

        self._parse(raw)

    def _parse(self, raw: bytes) -> None:
        """Parses a raw IP packet."""
        if len(raw) < 20:
            raise PacketParseError(
                f"Packet too short: {len(raw)} bytes (expected at least 20)"
            )

        try:
            header = struct.unpack("!BBHHHBBH4s4s", raw[:20])
        except struct.error as e:
            raise PacketParseError(f"Malformed IP packet: {e}") from e

        self.version = header[0] >> 4
        self.ihl = header[0] & 0xF
        if self.ihl < 5:
            raise PacketParseError(f"Invalid IHL: {self.ihl} (must be at least 5)")

        header_length = self.ihl * 4
        if len(raw) < header_length:
            raise PacketParseError(
                f"Packet too short for IHL: {len(raw)} bytes (expected {header_length})"
            )

        self.ttl = header[5]
        self.proto = header[6]
        self.src = self._ip_to_str(header[8])
        self.dst = self._ip_to_str(header[9])
        self.payload = raw[header_length:]

    def _ip_to_str(self, ip_bytes: bytes) -> str:
        """Converts an IP address from bytes to string format."""
        return ".".join(map(str, ip_bytes))

    def __repr__(self) -> str:
        return f"IP(src={self.src}, dst={self.dst}, ttl={self.ttl}, proto={self.proto})"


class ICMP:
    """
    Represents an ICMP echo packet.

    Build one from keyword arguments and call bytes() on it to get the
    wire format with the checksum patched in, or pass raw bytes to parse
    a received packet.
    """

    def __init__(
        self,
        raw: Optional[bytes] = None,
        type: int = ICMP_ECHO_REQUEST,
        code: int = ICMP_ECHO_CODE,
        identifier: int = 0,
        sequence: int = 0,
        payload: bytes = PAYLOAD,
    ):
        self.raw = raw
        self.type = type
        self.code = code
        self.checksum = 0
        self.identifier = identifier
        self.sequence = sequence
        self.payload = payload

        if raw is not None:
            self._parse(raw)

    def _parse(self, raw: bytes) -> None:
        """Parses a raw ICMP packet."""
        if len(raw) < ICMP_HEADER_LENGTH:
            raise PacketParseError(
                f"ICMP packet too short: {len(raw)} bytes (expected at least {ICMP_HEADER_LENGTH})"
            )

        try:
            header = struct.unpack(ICMP_HEADER_FORMAT, raw[:ICMP_HEADER_LENGTH])
        except struct.error as e:
            raise PacketParseError("Malformed ICMP packet") from e

        self.type, self.code, self.checksum, self.identifier, self.sequence = header
        self.payload = raw[ICMP_HEADER_LENGTH:]

    def _header(self, checksum_value: int) -> bytes:
        return struct.pack(
            ICMP_HEADER_FORMAT,
            self.type,
            self.code,
            checksum_value,
            self.identifier,
            self.sequence,
        )

    def __bytes__(self) -> bytes:
        """Serializes the ICMP packet into bytes."""
        self.checksum = internet_checksum(self._header(0) + self.payload)
        return self._header(self.checksum) + self.payload

    def __repr__(self) -> str:
        return f"ICMP(type={self.type}, code={self.code}, id={self.identifier}, seq={self.sequence})"

    @property
    def payload(self) -> bytes:
        """Packet payload."""
        return self._payload

    @payload.setter
    def payload(self, value: bytes) -> None:
        self._payload = value
