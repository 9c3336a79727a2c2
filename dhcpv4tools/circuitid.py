"""Parsing of relay agent circuit IDs into network device interface fields."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .options import Options, RelayOptions, RelaySubOptionCode
from .types import OptionCode


@dataclass(frozen=True)
class CircuitID:
    """Interface fields taken from a vendor-specific circuit ID."""

    slot: str = ""
    module: str = ""
    port: str = ""
    sub_port: str = ""
    vlan: str = ""

    def format_circuit_id(self) -> str:
        """Return the fields joined by commas, as sent in ZTP bootfile URLs."""
        return ",".join((self.slot, self.module, self.port, self.sub_port, self.vlan))


_CIRCUIT_PATTERNS = [
    # Juniper QFX et-0/0/0:0.0 and xe-0/0/0:0.0
    re.compile(r"^(et|xe)-(?P<slot>[0-9]+)/(?P<mod>[0-9]+)/(?P<port>[0-9]+):(?P<subport>[0-9]+).*\Z"),
    # Juniper PTX et-0/0/0.0
    re.compile(r"^et-(?P<slot>[0-9]+)/(?P<mod>[0-9]+)/(?P<port>[0-9]+).(?P<subport>[0-9]+)\Z"),
    # Juniper EX ge-0/0/0.0
    re.compile(r"^ge-(?P<slot>[0-9]+)/(?P<mod>[0-9]+)/(?P<port>[0-9]+).(?P<subport>[0-9]+).*"),
    # Arista Ethernet3/17/1; may be prefixed by a type and a length byte
    re.compile(r"Ethernet(?P<slot>[0-9]+)/(?P<mod>[0-9]+)/(?P<port>[0-9]+)\Z"),
    # Juniper QFX et-1/0/61
    re.compile(r"^et-(?P<slot>[0-9]+)/(?P<mod>[0-9]+)/(?P<port>[0-9]+)\Z"),
    # Arista Ethernet14:Vlan2001 and Ethernet10:2020
    re.compile(r"Ethernet(?P<port>[0-9]+):(?P<vlan>.*)\Z"),
    # Cisco Gi1/10:2020
    re.compile(r"^Gi(?P<slot>[0-9]+)/(?P<port>[0-9]+):(?P<vlan>.*)\Z"),
    # Nexus Ethernet1/3
    re.compile(r"^Ethernet(?P<slot>[0-9]+)/(?P<port>[0-9]+)\Z"),
    # Juniper bundle interface ae52.0
    re.compile(r"^ae(?P<port>[0-9]+).(?P<subport>[0-9])\Z"),
]


def match_circuit_id(circuit_id: str) -> CircuitID:
    """Match circuit_id against the known interface formats.

    Raises ValueError when no format matches.
    """
    for pattern in _CIRCUIT_PATTERNS:
        match = pattern.search(circuit_id)
        if match is None:
            continue
        groups = {name: value or "" for name, value in match.groupdict().items()}
        return CircuitID(
            slot=groups.get("slot", ""),
            module=groups.get("mod", ""),
            port=groups.get("port", ""),
            sub_port=groups.get("subport", ""),
            vlan=groups.get("vlan", ""),
        )
    raise ValueError(
        f"Unable to match circuit id : {circuit_id} with listed regexes of interface types"
    )


def parse_circuit_id(options: Options) -> CircuitID:
    """Extract the circuit ID from a packet's relay agent information option.

    Raises ValueError if the option or its circuit ID sub-option is missing,
    or if the circuit ID has no known format.
    """
    data = options.get(OptionCode.RELAY_AGENT_INFORMATION)
    if data is None:
        raise ValueError("No relay agent information option found in the dhcpv4 pkt")
    relay = RelayOptions()
    try:
        relay.from_bytes(data)
    except ValueError as exc:
        raise ValueError(
            "No relay agent information option found in the dhcpv4 pkt"
        ) from exc

    # RFC 3046, Section 2.0: sub-option 1 is the circuit ID.
    circuit = relay.get(RelaySubOptionCode.AGENT_CIRCUIT_ID)
    if not circuit:
        raise ValueError("no circuit-id suboption found in dhcpv4 packet")
    return match_circuit_id(circuit.decode("utf-8", "surrogateescape"))