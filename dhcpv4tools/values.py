"""Typed values carried by DHCPv4 options, with their wire encodings."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Union

from .types import MessageType, Option, OptionCode

IPLike = Union[ipaddress.IPv4Address, ipaddress.IPv6Address, str, bytes, int]

#: The longest lease time that fits in the four-byte wire field.
MAX_LEASE_TIME = timedelta(seconds=0xFFFFFFFF)

_IPV4_LEN = 4


class _Reader:
    """Sequential big-endian reader over a byte string."""

    def __init__(self, data: bytes) -> None:
        self._view = memoryview(bytes(data))
        self._pos = 0

    def __len__(self) -> int:
        return len(self._view) - self._pos

    def read(self, n: int) -> bytes:
        if n > len(self):
            raise ValueError(
                f"short byte stream: wanted {n} bytes, have {len(self)}"
            )
        chunk = bytes(self._view[self._pos : self._pos + n])
        self._pos += n
        return chunk

    def read8(self) -> int:
        return self.read(1)[0]

    def read32(self) -> int:
        return int.from_bytes(self.read(4), "big")

    def finish(self) -> None:
        if len(self):
            raise ValueError(f"{len(self)} unexpected trailing bytes")


def _to_ipv4(value: IPLike) -> ipaddress.IPv4Address:
    """Convert an address in any common form to an IPv4 address."""
    if isinstance(value, ipaddress.IPv4Address):
        return value
    if isinstance(value, ipaddress.IPv6Address):
        if value.ipv4_mapped is None:
            raise ValueError(f"{value} is not an IPv4 address")
        return value.ipv4_mapped
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        if len(data) == 16:
            return _to_ipv4(ipaddress.IPv6Address(data))
        if len(data) != _IPV4_LEN:
            raise ValueError(f"an IPv4 address is 4 bytes long, got {len(data)}")
        return ipaddress.IPv4Address(data)
    return ipaddress.IPv4Address(value)


def _format_fraction(value: int, scale: int) -> str:
    whole, frac = divmod(value, scale)
    if not frac:
        return str(whole)
    digits = str(frac).rjust(len(str(scale)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def _format_duration(nanoseconds: int) -> str:
    """Format a duration like ``12h0m0s``, ``1.5s`` or ``500ms``."""
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    u = abs(nanoseconds)
    if u < 1_000_000_000:
        if u < 1_000:
            return f"{sign}{u}ns"
        if u < 1_000_000:
            return f"{sign}{_format_fraction(u, 1_000)}µs"
        return f"{sign}{_format_fraction(u, 1_000_000)}ms"
    hours, rest = divmod(u, 3600 * 10**9)
    minutes, rest = divmod(rest, 60 * 10**9)
    seconds = _format_fraction(rest, 10**9) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return sign + seconds


@dataclass(frozen=True)
class OptionGeneric:
    """An option value kept as raw bytes."""

    data: bytes = b""

    def to_bytes(self) -> bytes:
        return bytes(self.data)

    def __str__(self) -> str:
        return "[" + " ".join(str(b) for b in self.data) + "]"


def opt_generic(code: int, value: bytes) -> Option:
    """Return an option carrying raw bytes."""
    return Option(code, OptionGeneric(bytes(value)))


class IP(ipaddress.IPv4Address):
    """A single IPv4 address (RFC 2132, Sections 5.3, 9.1, 9.7)."""

    __slots__ = ()

    def __init__(self, address: IPLike) -> None:
        super().__init__(int(_to_ipv4(address)))

    @classmethod
    def from_bytes(cls, data: bytes) -> "IP":
        reader = _Reader(data)
        packed = reader.read(_IPV4_LEN)
        reader.finish()
        return cls(packed)

    def to_bytes(self) -> bytes:
        return self.packed

    def __str__(self) -> str:
        return super().__str__()


class IPs(list):
    """A non-empty list of IPv4 addresses (RFC 2132, Section 3.5 et al.)."""

    def __init__(self, addresses: Iterable[IPLike] = ()) -> None:
        super().__init__(_to_ipv4(address) for address in addresses)

    @classmethod
    def from_bytes(cls, data: bytes) -> "IPs":
        reader = _Reader(data)
        if not len(reader):
            raise ValueError("IP DHCP options must always list at least one IP")
        addresses = []
        while len(reader) >= _IPV4_LEN:
            addresses.append(reader.read(_IPV4_LEN))
        reader.finish()
        return cls(addresses)

    def to_bytes(self) -> bytes:
        return b"".join(_to_ipv4(address).packed for address in self)

    def __str__(self) -> str:
        return ", ".join(str(address) for address in self)


class Duration(timedelta):
    """The IP address lease time (RFC 2132, Section 9.2), in whole seconds on the wire."""

    @classmethod
    def of(cls, value: Union[timedelta, int, float]) -> "Duration":
        """Build a Duration from a timedelta or a number of seconds."""
        if isinstance(value, timedelta):
            return cls(
                days=value.days, seconds=value.seconds, microseconds=value.microseconds
            )
        return cls(seconds=value)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Duration":
        reader = _Reader(data)
        seconds = reader.read32()
        reader.finish()
        return cls(seconds=seconds)

    def _microseconds(self) -> int:
        return (self.days * 86400 + self.seconds) * 10**6 + self.microseconds

    def to_bytes(self) -> bytes:
        micros = self._microseconds()
        whole = abs(micros) // 10**6
        seconds = -whole if micros < 0 else whole
        return (seconds & 0xFFFFFFFF).to_bytes(4, "big")

    def __str__(self) -> str:
        return _format_duration(self._microseconds() * 1000)


class Uint16(int):
    """A 16-bit unsigned value, as used by RFC 2132, Section 9.10."""

    def __new__(cls, value: int = 0) -> "Uint16":
        value = int(value)
        if not 0 <= value <= 0xFFFF:
            raise ValueError(f"{value} does not fit in 16 bits")
        return super().__new__(cls, value)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Uint16":  # type: ignore[override]
        reader = _Reader(data)
        value = int.from_bytes(reader.read(2), "big")
        reader.finish()
        return cls(value)

    def to_bytes(self) -> bytes:  # type: ignore[override]
        return int(self).to_bytes(2, "big")

    def __str__(self) -> str:
        return str(int(self))

    def __repr__(self) -> str:
        return f"Uint16({int(self)})"


class IPMask(bytes):
    """A subnet mask (RFC 2132, Section 3.3)."""

    def __new__(cls, mask: Union[bytes, str] = b"") -> "IPMask":
        if isinstance(mask, str):
            mask = ipaddress.IPv4Address(mask).packed
        return super().__new__(cls, bytes(mask))

    @classmethod
    def from_bytes(cls, data: bytes) -> "IPMask":
        reader = _Reader(data)
        mask = reader.read(_IPV4_LEN)
        reader.finish()
        return cls(mask)

    def to_bytes(self) -> bytes:
        return bytes(self[:_IPV4_LEN])

    def __str__(self) -> str:
        if not self:
            return "<nil>"
        return self.hex()


class Strings(list):
    """A list of length-prefixed strings (RFC 3004)."""

    def __init__(self, values: Iterable[str] = ()) -> None:
        super().__init__(str(value) for value in values)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Strings":
        reader = _Reader(data)
        if not len(reader):
            raise ValueError("Strings DHCP option must always list at least one String")
        values = []
        while len(reader):
            length = reader.read8()
            if length == 0:
                raise ValueError("DHCP Strings must have length greater than 0")
            values.append(reader.read(length).decode("utf-8", "surrogateescape"))
        return cls(values)

    def to_bytes(self) -> bytes:
        out = bytearray()
        for value in self:
            encoded = value.encode("utf-8", "surrogateescape")
            if len(encoded) > 0xFF:
                raise ValueError(f"string of {len(encoded)} bytes is too long to encode")
            out.append(len(encoded))
            out += encoded
        return bytes(out)

    def __str__(self) -> str:
        return ", ".join(self)


@dataclass(frozen=True)
class Route:
    """A classless static route (RFC 3442)."""

    dest: ipaddress.IPv4Network
    router: ipaddress.IPv4Address

    def __post_init__(self) -> None:
        object.__setattr__(self, "dest", ipaddress.IPv4Network(self.dest, strict=False))
        object.__setattr__(self, "router", _to_ipv4(self.router))

    @classmethod
    def _read(cls, reader: _Reader) -> "Route":
        mask_size = reader.read8()
        if mask_size > 32:
            raise ValueError(f"invalid mask length {mask_size} in route option")
        significant = reader.read((mask_size + 7) // 8)
        dest_ip = ipaddress.IPv4Address(significant.ljust(_IPV4_LEN, b"\x00"))
        router = reader.read(_IPV4_LEN)
        return cls(ipaddress.IPv4Network((dest_ip, mask_size), strict=False), router)

    def to_bytes(self) -> bytes:
        ones = self.dest.prefixlen
        significant = self.dest.network_address.packed[: (ones + 7) // 8]
        return bytes([ones]) + significant + self.router.packed

    def __str__(self) -> str:
        return f"route to {self.dest} via {self.router}"


class Routes(list):
    """A collection of classless static routes (RFC 3442)."""

    @classmethod
    def from_bytes(cls, data: bytes) -> "Routes":
        reader = _Reader(data)
        routes = cls()
        while len(reader):
            routes.append(Route._read(reader))
        return routes

    def to_bytes(self) -> bytes:
        return b"".join(route.to_bytes() for route in self)

    def __str__(self) -> str:
        return "; ".join(str(route) for route in self)


@dataclass(frozen=True)
class VIVCIdentifier:
    """One vendor class entry: an enterprise ID and its opaque data (RFC 3925)."""

    ent_id: int
    data: bytes = b""


class VIVCIdentifiers(list):
    """The vendor-identifying vendor class option (RFC 3925)."""

    @classmethod
    def from_bytes(cls, data: bytes) -> "VIVCIdentifiers":
        reader = _Reader(data)
        identifiers = cls()
        while len(reader) >= 5:
            ent_id = reader.read32()
            length = reader.read8()
            identifiers.append(VIVCIdentifier(ent_id, reader.read(length)))
        reader.finish()
        return identifiers

    def to_bytes(self) -> bytes:
        out = bytearray()
        for ident in self:
            if len(ident.data) > 0xFF:
                raise ValueError(f"vendor class data of {len(ident.data)} bytes is too long")
            out += ident.ent_id.to_bytes(4, "big")
            out.append(len(ident.data))
            out += ident.data
        return bytes(out)

    def __str__(self) -> str:
        return ", ".join(
            f"{ident.ent_id}:'{ident.data.decode('utf-8', 'backslashreplace')}'"
            for ident in self
        )


def _as_code(code: int) -> int:
    if isinstance(code, OptionCode) or hasattr(code, "code"):
        return code
    return OptionCode(int(code))


class OptionCodeList(list):
    """A list of option codes (RFC 2132, Section 9.8)."""

    def __init__(self, codes: Iterable[int] = ()) -> None:
        super().__init__(_as_code(code) for code in codes)

    def has(self, code: int) -> bool:
        """Return whether code is in the list."""
        return any(int(c) == int(code) for c in self)

    def add(self, *args: int) -> None:
        """Append each code that is not already present."""
        for code in args:
            if not self.has(code):
                self.append(_as_code(code))

    @classmethod
    def from_bytes(cls, data: bytes) -> "OptionCodeList":
        return cls(OptionCode(b) for b in bytes(data))

    def to_bytes(self) -> bytes:
        return bytes(int(code) for code in self)

    def __str__(self) -> str:
        return ", ".join(str(code) for code in sorted(self, key=int))


def opt_broadcast_address(ip: IPLike) -> Option:
    """Broadcast Address option (RFC 2132, Section 5.3)."""
    return Option(OptionCode.BROADCAST_ADDRESS, IP(ip))


def opt_requested_ip_address(ip: IPLike) -> Option:
    """Requested IP Address option (RFC 2132, Section 9.1)."""
    return Option(OptionCode.REQUESTED_IP_ADDRESS, IP(ip))


def opt_server_identifier(ip: IPLike) -> Option:
    """Server Identifier option (RFC 2132, Section 9.7)."""
    return Option(OptionCode.SERVER_IDENTIFIER, IP(ip))


def opt_ip_address_lease_time(duration: Union[timedelta, int, float]) -> Option:
    """IP Address Lease Time option (RFC 2132, Section 9.2)."""
    return Option(OptionCode.IP_ADDRESS_LEASE_TIME, Duration.of(duration))


def opt_router(*args: IPLike) -> Option:
    """Router option (RFC 2132, Section 3.5)."""
    return Option(OptionCode.ROUTER, IPs(args))


def opt_ntp_servers(*args: IPLike) -> Option:
    """NTP Servers option (RFC 2132, Section 8.3)."""
    return Option(OptionCode.NTP_SERVERS, IPs(args))


def opt_dns(*args: IPLike) -> Option:
    """Domain Name Server option (RFC 2132, Section 3.8)."""
    return Option(OptionCode.DOMAIN_NAME_SERVER, IPs(args))


def opt_max_message_size(size: int) -> Option:
    """Maximum DHCP Message Size option (RFC 2132, Section 9.10)."""
    return Option(OptionCode.MAXIMUM_DHCP_MESSAGE_SIZE, Uint16(size))


def opt_message_type(message_type: int) -> Option:
    """DHCP Message Type option (RFC 2132, Section 9.6)."""
    return Option(OptionCode.DHCP_MESSAGE_TYPE, MessageType(message_type))


def opt_client_identifier(ident: bytes) -> Option:
    """Client Identifier option."""
    return opt_generic(OptionCode.CLIENT_IDENTIFIER, ident)


def opt_parameter_request_list(*args: int) -> Option:
    """Parameter Request List option (RFC 2132, Section 9.8)."""
    return Option(OptionCode.PARAMETER_REQUEST_LIST, OptionCodeList(args))


def opt_classless_static_route(*args: Route) -> Option:
    """Classless Static Route option (RFC 3442)."""
    return Option(OptionCode.CLASSLESS_STATIC_ROUTE, Routes(args))


def opt_rfc3004_user_class(values: Iterable[str]) -> Option:
    """User Class option (RFC 3004)."""
    return Option(OptionCode.USER_CLASS_INFORMATION, Strings(values))


def opt_subnet_mask(mask: Union[bytes, str]) -> Option:
    """Subnet Mask option (RFC 2132, Section 3.3)."""
    return Option(OptionCode.SUBNET_MASK, IPMask(mask))


def opt_vivc(*args: VIVCIdentifier) -> Option:
    """Vendor-Identifying Vendor Class option (RFC 3925)."""
    return Option(OptionCode.VENDOR_IDENTIFYING_VENDOR_CLASS, VIVCIdentifiers(args))