"""Broadcast-capable IPv4 UDP sockets for DHCP servers."""

from __future__ import annotations

import ipaddress
import socket
from typing import Optional, Tuple

#: The port DHCP servers and relay agents listen on.
SERVER_PORT = 67

# Linux value, used where the socket module does not export the constant.
_SO_BINDTODEVICE = getattr(socket, "SO_BINDTODEVICE", 25)


def _bind_host(host: object) -> str:
    if host is None or host == "":
        return "0.0.0.0"
    try:
        address = ipaddress.ip_address(host)  # type: ignore[arg-type]
    except ValueError as exc:
        raise ValueError(f"invalid address {host!r}") from exc
    if isinstance(address, ipaddress.IPv6Address):
        if address.ipv4_mapped is None:
            raise ValueError(f"wrong address family (expected v4) for {address}")
        address = address.ipv4_mapped
    return str(address)


def new_ipv4_udp_conn(
    iface: str = "", addr: Optional[Tuple[object, int]] = None
) -> socket.socket:
    """Return a UDP socket that may broadcast, bound to addr and optionally iface.

    addr defaults to every address on the DHCP server port. The interface,
    if given, must already be configured. Raises ValueError for a non-IPv4
    address and OSError when the socket cannot be set up.
    """
    host, port = addr if addr is not None else ("", SERVER_PORT)
    bind_ip = _bind_host(host)

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        except OSError as exc:
            raise OSError(exc.errno, f"cannot set broadcasting on socket: {exc}") from exc
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as exc:
            raise OSError(exc.errno, f"cannot set reuseaddr on socket: {exc}") from exc
        if iface:
            try:
                sock.setsockopt(
                    socket.SOL_SOCKET, _SO_BINDTODEVICE, iface.encode() + b"\0"
                )
            except OSError as exc:
                raise OSError(
                    exc.errno, f"cannot bind to interface {iface}: {exc}"
                ) from exc
        try:
            sock.bind((bind_ip, port))
        except OSError as exc:
            raise OSError(exc.errno, f"cannot bind to port {port}: {exc}") from exc
    except BaseException:
        sock.close()
        raise
    return sock