"""Encoding and decoding of the IPv4 and UDP headers that carry DHCP packets."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

#: The IP protocol number of UDP.
UDP_PROTOCOL_NUMBER = 17

#: The size of an IPv4 header without options.
IPV4_MINIMUM_SIZE = 20

#: The largest possible IPv4 header: 15 words of 4 bytes.
IPV4_MAXIMUM_HEADER_SIZE = 60

#: The size of a UDP header.
UDP_MINIMUM_SIZE = 8

#: Time to live used for outgoing packets, per RFC 1700's recommendation.
DEFAULT_TTL = 64

HostLike = Union[str, bytes, ipaddress.IPv4Address, ipaddress.IPv6Address, None]
Address = Tuple[HostLike, int]


def _to_ipv4(host: HostLike) -> ipaddress.IPv4Address:
    """Convert a host to an IPv4 address; an empty or missing host is 0.0.0.0."""
    if host is None or host == "" or host == b"":
        return ipaddress.IPv4Address(0)
    if isinstance(host, ipaddress.IPv4Address):
        return host
    if isinstance(host, ipaddress.IPv6Address):
        address = host
    elif isinstance(host, (bytes, bytearray)):
        address = ipaddress.ip_address(bytes(host))
    else:
        address = ipaddress.ip_address(host)
    if isinstance(address, ipaddress.IPv6Address):
        if address.ipv4_mapped is None:
            raise ValueError(f"{address} is not an IPv4 address")
        return address.ipv4_mapped
    return address


def checksum_combine(a: int, b: int) -> int:
    """Add two 16-bit one's complement sums, folding the carry back in."""
    v = (a & 0xFFFF) + (b & 0xFFFF)
    return (v + (v >> 16)) & 0xFFFF


def checksum(buf: bytes, initial: int = 0) -> int:
    """Return the RFC 1071 sum of buf, continuing from initial.

    The initial sum must have been computed over an even number of bytes.
    """
    data = bytes(buf)
    v = initial & 0xFFFF
    even = len(data) & ~1
    if len(data) & 1:
        v += data[-1] << 8
    v += sum((hi << 8) + lo for hi, lo in zip(data[0:even:2], data[1:even:2]))
    v &= 0xFFFFFFFF
    return checksum_combine(v & 0xFFFF, v >> 16)


def pseudo_header_checksum(protocol: int, src: HostLike, dst: HostLike) -> int:
    """Return the sum of the transport pseudo-header, without its length field."""
    xsum = checksum(_to_ipv4(src).packed, 0)
    xsum = checksum(_to_ipv4(dst).packed, xsum)
    return checksum(bytes((0, protocol & 0xFF)), xsum)


@dataclass(frozen=True)
class IPv4Header:
    """The fields of an IPv4 header. header_length is counted in bytes."""

    header_length: int
    tos: int
    total_length: int
    id: int
    flags: int
    fragment_offset: int
    ttl: int
    protocol: int
    checksum: int
    src: ipaddress.IPv4Address
    dst: ipaddress.IPv4Address

    @property
    def payload_length(self) -> int:
        """Length of the packet after the header, as stated by the header."""
        return self.total_length - self.header_length

    @classmethod
    def parse(cls, data: bytes) -> "IPv4Header":
        """Parse the header at the start of data.

        Raises ValueError if data is shorter than the header claims to be.
        """
        data = bytes(data)
        if len(data) < IPV4_MINIMUM_SIZE:
            raise ValueError(
                f"IPv4 header needs {IPV4_MINIMUM_SIZE} bytes, got {len(data)}"
            )
        header_length = (data[0] & 0x0F) * 4
        if header_length < IPV4_MINIMUM_SIZE:
            raise ValueError(f"invalid IPv4 header length {header_length}")
        if len(data) < header_length:
            raise ValueError(
                f"IPv4 header of {header_length} bytes, only {len(data)} available"
            )
        flags_fragment = int.from_bytes(data[6:8], "big")
        return cls(
            header_length=header_length,
            tos=data[1],
            total_length=int.from_bytes(data[2:4], "big"),
            id=int.from_bytes(data[4:6], "big"),
            flags=flags_fragment >> 13,
            fragment_offset=(flags_fragment & 0x1FFF) << 3,
            ttl=data[8],
            protocol=data[9],
            checksum=int.from_bytes(data[10:12], "big"),
            src=ipaddress.IPv4Address(data[12:16]),
            dst=ipaddress.IPv4Address(data[16:20]),
        )

    def _encode(self) -> bytes:
        flags_fragment = ((self.flags << 13) | (self.fragment_offset >> 3)) & 0xFFFF
        header = bytearray(self.header_length)
        header[0] = (4 << 4) | ((self.header_length // 4) & 0x0F)
        header[1] = self.tos & 0xFF
        header[2:4] = (self.total_length & 0xFFFF).to_bytes(2, "big")
        header[4:6] = (self.id & 0xFFFF).to_bytes(2, "big")
        header[6:8] = flags_fragment.to_bytes(2, "big")
        header[8] = self.ttl & 0xFF
        header[9] = self.protocol & 0xFF
        header[10:12] = (self.checksum & 0xFFFF).to_bytes(2, "big")
        header[12:16] = self.src.packed
        header[16:20] = self.dst.packed
        return bytes(header)


@dataclass(frozen=True)
class UDPHeader:
    """The fields of a UDP header."""

    src_port: int
    dst_port: int
    length: int
    checksum: int

    @classmethod
    def parse(cls, data: bytes) -> "UDPHeader":
        """Parse the header at the start of data; raises ValueError if too short."""
        data = bytes(data)
        if len(data) < UDP_MINIMUM_SIZE:
            raise ValueError(
                f"UDP header needs {UDP_MINIMUM_SIZE} bytes, got {len(data)}"
            )
        return cls(
            src_port=int.from_bytes(data[0:2], "big"),
            dst_port=int.from_bytes(data[2:4], "big"),
            length=int.from_bytes(data[4:6], "big"),
            checksum=int.from_bytes(data[6:8], "big"),
        )

    def _encode(self) -> bytes:
        return b"".join(
            (value & 0xFFFF).to_bytes(2, "big")
            for value in (self.src_port, self.dst_port, self.length, self.checksum)
        )


def build_udp4_packet(payload: bytes, dest: Address, src: Optional[Address]) -> bytes:
    """Wrap payload in UDP and IPv4 headers, both with valid checksums.

    dest and src are (host, port) pairs; an empty host stands for 0.0.0.0.
    """
    payload = bytes(payload)
    src_host, src_port = src if src is not None else ("", 0)
    dst_host, dst_port = dest
    src_ip = _to_ipv4(src_host)
    dst_ip = _to_ipv4(dst_host)

    total_length = IPV4_MINIMUM_SIZE + UDP_MINIMUM_SIZE + len(payload)
    if total_length > 0xFFFF:
        raise ValueError(f"payload of {len(payload)} bytes does not fit in one packet")

    ip_header = IPv4Header(
        header_length=IPV4_MINIMUM_SIZE,
        tos=0,
        total_length=total_length,
        id=0,
        flags=0,
        fragment_offset=0,
        ttl=DEFAULT_TTL,
        protocol=UDP_PROTOCOL_NUMBER,
        checksum=0,
        src=src_ip,
        dst=dst_ip,
    )
    ip_header = replace(ip_header, checksum=~checksum(ip_header._encode()) & 0xFFFF)

    udp_header = UDPHeader(
        src_port=src_port,
        dst_port=dst_port,
        length=UDP_MINIMUM_SIZE + len(payload),
        checksum=0,
    )
    xsum = checksum(payload, pseudo_header_checksum(UDP_PROTOCOL_NUMBER, src_ip, dst_ip))
    xsum = checksum(udp_header.length.to_bytes(2, "big"), xsum)
    udp_sum = ~checksum(udp_header._encode(), xsum) & 0xFFFF
    udp_header = replace(udp_header, checksum=udp_sum)

    return ip_header._encode() + udp_header._encode() + payload