# dhcpv4tools

A library for the option area of DHCPv4 packets, for the IPv4/UDP framing
that carries them, and for zero-touch provisioning (ZTP) lookups. It has no
external dependencies.

## What is in it

- `dhcpv4tools.types`: `TransactionID`, `MessageType`, `OpcodeType`,
  `OptionCode` (every registered option code with its name),
  `GenericOptionCode` and `Option`. An `Option` pairs a code with a value.
- `dhcpv4tools.values`: the typed option values. They are `IP`, `IPs`,
  `IPMask`, `Duration`, `Uint16`, `Strings` (RFC 3004), `Route` / `Routes`
  (RFC 3442 classless static routes), `VIVCIdentifier` / `VIVCIdentifiers`
  (RFC 3925), `OptionCodeList` (parameter request list) and `OptionGeneric`.
  Each value has a `to_bytes()` method. Each parseable value has a
  `from_bytes(data)` class method, which raises `ValueError` on malformed
  input. This module also has constructors such as `opt_router`, `opt_dns`,
  `opt_ntp_servers`, `opt_subnet_mask`, `opt_ip_address_lease_time`,
  `opt_max_message_size`, `opt_message_type`, `opt_parameter_request_list`,
  `opt_classless_static_route`, `opt_rfc3004_user_class`, `opt_vivc`,
  `opt_client_identifier` and `opt_generic`.
- `dhcpv4tools.options`: `Options` is a dict from one-byte codes to raw data.
  - `to_bytes()` writes the options sorted by code and splits values longer
    than 255 bytes (RFC 3396). It never writes Pad or End.
  - `from_bytes(data, check_end=False)` concatenates repeated options. It
    raises `InvalidOptionsError` when data is truncated, when bytes other
    than padding follow End, or when End is missing and `check_end` is true.
  - `str(options)` and `summary(vendor_decoder)` render one readable line per
    option.

  `RelayOptions`, `RelaySubOptionCode` and `opt_relay_agent_info` cover the
  relay agent information option (RFC 3046). The helpers `get_ip`, `get_ips`
  and `get_uint16` read typed values out of an `Options`. `parse_option` and
  `get_option` decode a single option for display.
- `dhcpv4tools.ipv4`: `checksum`, `checksum_combine` and
  `pseudo_header_checksum` implement RFC 1071 sums. `IPv4Header.parse` and
  `UDPHeader.parse` read headers. `build_udp4_packet` wraps a payload in
  IPv4 and UDP headers with valid checksums.
- `dhcpv4tools.rawconn`: `BroadcastRawUDPConn` sends and receives UDP
  datagrams through a raw IPv4 datagram socket. When receiving, it returns
  only UDP packets addressed to its bound address; `udp_match` makes that
  test. `new_raw_udp_conn(iface, port)` opens one on a Linux interface with
  an `AF_PACKET` socket and broadcasts every frame.
- `dhcpv4tools.udpconn`: `new_ipv4_udp_conn(iface, addr)` returns a UDP
  socket with `SO_BROADCAST` and `SO_REUSEADDR` set. If `iface` is given it
  is bound to that interface. It listens on port 67 unless `addr` says
  otherwise. A non-IPv4 address raises `ValueError`.
- `dhcpv4tools.logger`: `EmptyLogger`, `ShortSummaryLogger` and
  `DebugLogger`. The last two write through a `logging.Logger`, by default
  the one named `dhcpv4`.
- `dhcpv4tools.circuitid`: `match_circuit_id` and `parse_circuit_id` turn
  Juniper, Arista and Cisco circuit IDs into a `CircuitID`, whose
  `format_circuit_id()` returns `slot,module,port,subport,vlan`.
- `dhcpv4tools.ztp`: `parse_vendor_data` returns a `VendorData` holding
  vendor, model and serial. It reads the class identifier (Arista, Juniper,
  ZPE Systems) or the Cisco VIVC option.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Build options and serialize them:

```python
from ipaddress import IPv4Address
from dhcpv4tools.values import opt_router, opt_max_message_size
from dhcpv4tools.options import options_from_list

opts = options_from_list(
    opt_router(IPv4Address("192.168.0.1")),
    opt_max_message_size(1500),
)
wire = opts.to_bytes()
print(opts)
#     Router: 192.168.0.1
#     Maximum DHCP Message Size: 1500
```

Parse an option area received from the network:

```python
from dhcpv4tools.options import Options, get_ips
from dhcpv4tools.types import OptionCode

opts = Options()
opts.from_bytes(b"\x03\x04\xc0\xa8\x00\x01\xff", check_end=True)
print(get_ips(OptionCode.ROUTER, opts))   # [IPv4Address('192.168.0.1')]
```

Frame a payload for the wire:

```python
from dhcpv4tools.ipv4 import IPv4Header, build_udp4_packet

packet = build_udp4_packet(b"payload", ("255.255.255.255", 67), ("", 68))
print(IPv4Header.parse(packet).total_length)   # 35
```

Match a circuit ID, directly or from a relay agent option:

```python
from dhcpv4tools.circuitid import match_circuit_id, parse_circuit_id
from dhcpv4tools.options import RelaySubOptionCode, opt_relay_agent_info, options_from_list
from dhcpv4tools.values import opt_generic

print(match_circuit_id("Ethernet3/17/1").format_circuit_id())   # 3,17,1,,

opts = options_from_list(
    opt_relay_agent_info(opt_generic(RelaySubOptionCode.AGENT_CIRCUIT_ID, b"Ethernet14:Vlan2001"))
)
print(parse_circuit_id(opts))   # CircuitID(slot='', module='', port='14', sub_port='', vlan='Vlan2001')
```

Find vendor data:

```python
from dhcpv4tools.options import options_from_list
from dhcpv4tools.types import OptionCode
from dhcpv4tools.values import opt_generic
from dhcpv4tools.ztp import parse_vendor_data

opts = options_from_list(
    opt_generic(OptionCode.CLASS_IDENTIFIER, b"Arista;DCS-7050S-64;01.23;SERIAL0001")
)
print(parse_vendor_data(opts))
# VendorData(vendor_name='Arista', model='DCS-7050S-64', serial='SERIAL0001')
```

## What it does not do

The package works on the option area, not on whole DHCPv4 messages. It has
no class for the fixed BOOTP header (opcode, addresses, hardware address,
magic cookie). It has no DHCP client that runs the Discover-Offer-Request-Ack
exchange, and no DHCP server loop that answers requests. It also has no
command-line program. The functions in `circuitid` and `ztp` therefore take
an `Options` mapping rather than a packet. The sockets in `rawconn` and
`udpconn` are building blocks for such programs.

The raw socket helpers need Linux and enough privileges to open packet
sockets.