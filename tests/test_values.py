import ipaddress
from datetime import timedelta

import pytest

from dhcpv4tools.types import MessageType, OptionCode
from dhcpv4tools.values import (
    IP,
    IPMask,
    IPs,
    Duration,
    OptionCodeList,
    OptionGeneric,
    Route,
    Routes,
    Strings,
    Uint16,
    VIVCIdentifier,
    VIVCIdentifiers,
    opt_broadcast_address,
    opt_classless_static_route,
    opt_client_identifier,
    opt_dns,
    opt_generic,
    opt_ip_address_lease_time,
    opt_max_message_size,
    opt_message_type,
    opt_ntp_servers,
    opt_parameter_request_list,
    opt_requested_ip_address,
    opt_rfc3004_user_class,
    opt_router,
    opt_server_identifier,
    opt_subnet_mask,
    opt_vivc,
)

V4 = ipaddress.IPv4Address


# Generic


def test_option_generic_code():
    o = opt_generic(OptionCode.DHCP_MESSAGE_TYPE, bytes([MessageType.DISCOVER]))
    assert o.code == OptionCode.DHCP_MESSAGE_TYPE
    assert o.value.to_bytes() == b"\x01"
    assert str(o) == "DHCP Message Type: [1]"


def test_option_generic_string_unknown():
    o = opt_generic(OptionCode(102), b"\x01")
    assert str(o) == "unknown (102): [1]"


def test_option_generic_empty_string():
    assert str(OptionGeneric(b"")) == "[]"


def test_opt_client_identifier():
    o = opt_client_identifier(b"\x01\x02")
    assert o.code == OptionCode.CLIENT_IDENTIFIER
    assert o.value.to_bytes() == b"\x01\x02"


# Lease time


def test_opt_ip_address_lease_time():
    o = opt_ip_address_lease_time(timedelta(seconds=43200))
    assert o.code == OptionCode.IP_ADDRESS_LEASE_TIME
    assert o.value.to_bytes() == bytes([0, 0, 168, 192])
    assert str(o) == "IP Addresses Lease Time: 12h0m0s"


def test_parse_lease_time():
    assert Duration.from_bytes(bytes([0, 0, 168, 192])) == timedelta(seconds=43200)


@pytest.mark.parametrize("data", [bytes([168, 192]), bytes([1, 1, 1, 1, 1])])
def test_parse_lease_time_bad_length(data):
    with pytest.raises(ValueError):
        Duration.from_bytes(data)


@pytest.mark.parametrize(
    "duration, text",
    [
        (timedelta(seconds=12), "12s"),
        (timedelta(0), "0s"),
        (timedelta(milliseconds=1500), "1.5s"),
        (timedelta(microseconds=1500), "1.5ms"),
        (timedelta(minutes=2, seconds=3), "2m3s"),
    ],
)
def test_duration_string(duration, text):
    assert str(Duration.of(duration)) == text


# IP


def test_opt_broadcast_address():
    o = opt_broadcast_address("192.168.0.1")
    assert o.code == OptionCode.BROADCAST_ADDRESS
    assert o.value.to_bytes() == bytes([192, 168, 0, 1])
    assert str(o) == "Broadcast Address: 192.168.0.1"


def test_parse_ip():
    with pytest.raises(ValueError):
        IP.from_bytes(b"")
    with pytest.raises(ValueError):
        IP.from_bytes(bytes([192, 168, 0]))
    assert IP.from_bytes(bytes([192, 168, 0, 1])) == V4("192.168.0.1")


def test_opt_requested_ip_address():
    o = opt_requested_ip_address(bytes([192, 168, 0, 1]))
    assert o.code == OptionCode.REQUESTED_IP_ADDRESS
    assert o.value.to_bytes() == bytes([192, 168, 0, 1])
    assert str(o) == "Requested IP Address: 192.168.0.1"


def test_opt_server_identifier():
    o = opt_server_identifier(V4("192.168.0.1"))
    assert o.code == OptionCode.SERVER_IDENTIFIER
    assert o.value.to_bytes() == bytes([192, 168, 0, 1])
    assert str(o) == "Server Identifier: 192.168.0.1"


def test_ip_accepts_mapped_ipv6_bytes():
    mapped = ipaddress.IPv6Address("::ffff:10.0.0.1").packed
    assert IP(mapped).to_bytes() == bytes([10, 0, 0, 1])


# IPs


def test_parse_ips():
    ips = IPs.from_bytes(bytes([192, 168, 0, 10, 192, 168, 0, 20]))
    assert ips == [V4("192.168.0.10"), V4("192.168.0.20")]
    with pytest.raises(ValueError):
        IPs.from_bytes(bytes([1, 1, 1]))
    with pytest.raises(ValueError):
        IPs.from_bytes(b"")


def test_parse_ips_get_cases():
    assert IPs.from_bytes(bytes([192, 168, 0, 1])) == [V4("192.168.0.1")]
    with pytest.raises(ValueError):
        IPs.from_bytes(bytes([192, 168, 0]))


def test_opt_domain_name_server():
    o = opt_dns("192.168.0.1", "192.168.0.10")
    assert o.code == OptionCode.DOMAIN_NAME_SERVER
    assert o.value.to_bytes() == bytes([192, 168, 0, 1, 192, 168, 0, 10])
    assert str(o) == "Domain Name Server: 192.168.0.1, 192.168.0.10"


def test_opt_ntp_servers():
    o = opt_ntp_servers("192.168.0.1", "192.168.0.10")
    assert o.code == OptionCode.NTP_SERVERS
    assert o.value.to_bytes() == bytes([192, 168, 0, 1, 192, 168, 0, 10])
    assert str(o) == "NTP Servers: 192.168.0.1, 192.168.0.10"


def test_opt_router():
    o = opt_router("192.168.0.1", "192.168.0.10")
    assert o.code == OptionCode.ROUTER
    assert o.value.to_bytes() == bytes([192, 168, 0, 1, 192, 168, 0, 10])
    assert str(o) == "Router: 192.168.0.1, 192.168.0.10"


def test_ips_round_trip():
    ips = IPs(["10.0.0.1", "10.0.0.2"])
    assert IPs.from_bytes(ips.to_bytes()) == ips


# Maximum message size


def test_opt_maximum_dhcp_message_size():
    o = opt_max_message_size(1500)
    assert o.code == OptionCode.MAXIMUM_DHCP_MESSAGE_SIZE
    assert o.value.to_bytes() == bytes([5, 220])
    assert str(o) == "Maximum DHCP Message Size: 1500"


def test_parse_maximum_dhcp_message_size():
    assert Uint16.from_bytes(bytes([5, 220])) == 1500
    with pytest.raises(ValueError):
        Uint16.from_bytes(bytes([2]))
    with pytest.raises(ValueError):
        Uint16.from_bytes(bytes([2, 2, 2]))


def test_uint16_out_of_range():
    with pytest.raises(ValueError):
        Uint16(70000)


# Message type


def test_opt_message_type():
    o = opt_message_type(MessageType.DISCOVER)
    assert o.code == OptionCode.DHCP_MESSAGE_TYPE
    assert o.value.to_bytes() == b"\x01"
    assert str(o) == "DHCP Message Type: DISCOVER"
    assert str(opt_message_type(99)) == "DHCP Message Type: unknown (99)"


def test_parse_opt_message_type():
    assert MessageType.from_bytes(b"\x01") == MessageType.DISCOVER
    with pytest.raises(ValueError):
        MessageType.from_bytes(b"\x01\x02")


# Parameter request list


def test_opt_parameter_request_list_interface_methods():
    o = opt_parameter_request_list(OptionCode.BOOTFILE_NAME, OptionCode.NAME_SERVER)
    assert o.code == OptionCode.PARAMETER_REQUEST_LIST
    assert o.value.to_bytes() == bytes([67, 5])
    assert str(o) == "Parameter Request List: Name Server, Bootfile Name"


def test_parse_opt_parameter_request_list():
    codes = OptionCodeList.from_bytes(bytes([67, 5]))
    assert codes == [OptionCode.BOOTFILE_NAME, OptionCode.NAME_SERVER]


def test_option_code_list_add_skips_duplicates():
    codes = OptionCodeList()
    codes.add(OptionCode.ROUTER, OptionCode.ROUTER, OptionCode.HOST_NAME)
    assert codes == [OptionCode.ROUTER, OptionCode.HOST_NAME]
    assert codes.has(OptionCode.HOST_NAME)
    assert not codes.has(OptionCode.DOMAIN_NAME)


def test_option_code_list_string_does_not_reorder():
    codes = OptionCodeList([OptionCode.BOOTFILE_NAME, OptionCode.NAME_SERVER])
    assert str(codes) == "Name Server, Bootfile Name"
    assert codes.to_bytes() == bytes([67, 5])


# Routes


@pytest.mark.parametrize(
    "data, expected",
    [
        (bytes([32, 10, 2, 3, 4, 0, 0, 0, 0]), [Route("10.2.3.4/32", "0.0.0.0")]),
        (bytes([0, 0, 0, 0, 0]), [Route("0.0.0.0/0", "0.0.0.0")]),
        (
            bytes([32, 10, 2, 3, 4, 0, 0, 0, 0, 0, 0, 0, 0, 0]),
            [Route("10.2.3.4/32", "0.0.0.0"), Route("0.0.0.0/0", "0.0.0.0")],
        ),
    ],
)
def test_parse_routes(data, expected):
    assert Routes.from_bytes(data) == expected


def test_parse_routes_mask_too_long():
    with pytest.raises(ValueError):
        Routes.from_bytes(bytes([64, 10, 2, 3, 4]))


def test_parse_routes_truncated():
    with pytest.raises(ValueError):
        Routes.from_bytes(bytes([24, 10, 2, 3, 0, 0]))


def test_route_encoding_and_string():
    route = Route("10.0.0.0/8", "192.168.0.1")
    assert route.to_bytes() == bytes([8, 10, 192, 168, 0, 1])
    assert str(route) == "route to 10.0.0.0/8 via 192.168.0.1"


def test_classless_static_route_round_trip():
    o = opt_classless_static_route(
        Route("10.2.3.4/32", "0.0.0.0"), Route("0.0.0.0/0", "0.0.0.0")
    )
    assert o.code == OptionCode.CLASSLESS_STATIC_ROUTE
    assert o.value.to_bytes() == bytes([32, 10, 2, 3, 4, 0, 0, 0, 0, 0, 0, 0, 0, 0])
    assert str(o.value) == "route to 10.2.3.4/32 via 0.0.0.0; route to 0.0.0.0/0 via 0.0.0.0"


# Strings


def test_parse_strings_multiple():
    data = bytes([9]) + b"linuxboot" + bytes([4]) + b"test"
    assert Strings.from_bytes(data) == ["linuxboot", "test"]


def test_parse_strings_none():
    with pytest.raises(ValueError):
        Strings.from_bytes(b"")


def test_parse_strings():
    assert Strings.from_bytes(bytes([9]) + b"linuxboot") == ["linuxboot"]


def test_parse_strings_zero_length():
    with pytest.raises(ValueError):
        Strings.from_bytes(bytes([0, 0]))


def test_opt_rfc3004_user_class():
    o = opt_rfc3004_user_class(["linuxboot"])
    assert o.code == OptionCode.USER_CLASS_INFORMATION
    assert o.value.to_bytes() == bytes([9]) + b"linuxboot"


def test_opt_rfc3004_user_class_multiple():
    o = opt_rfc3004_user_class(["linuxboot", "test"])
    assert o.value.to_bytes() == bytes([9]) + b"linuxboot" + bytes([4]) + b"test"
    assert str(o.value) == "linuxboot, test"


# Subnet mask


def test_opt_subnet_mask():
    o = opt_subnet_mask(bytes([255, 255, 255, 0]))
    assert o.code == OptionCode.SUBNET_MASK
    assert str(o) == "Subnet Mask: ffffff00"
    assert o.value.to_bytes() == bytes([255, 255, 255, 0])


def test_parse_subnet_mask():
    with pytest.raises(ValueError):
        IPMask.from_bytes(b"")
    with pytest.raises(ValueError):
        IPMask.from_bytes(bytes([255]))
    assert IPMask.from_bytes(bytes([255, 255, 255, 0])) == bytes([255, 255, 255, 0])


def test_subnet_mask_from_string():
    assert IPMask("255.255.0.0").to_bytes() == bytes([255, 255, 0, 0])


# VIVC

SAMPLE_VIVC = VIVCIdentifiers(
    [
        VIVCIdentifier(ent_id=9, data=b"CiscoIdentifier"),
        VIVCIdentifier(ent_id=18, data=b"WellfleetIdentifier"),
    ]
)
SAMPLE_VIVC_RAW = (
    bytes([0, 0, 0, 9, 0x0F])
    + b"CiscoIdentifier"
    + bytes([0, 0, 0, 0x12, 0x13])
    + b"WellfleetIdentifier"
)


def test_opt_vivc_interface_methods():
    o = opt_vivc(*SAMPLE_VIVC)
    assert o.code == OptionCode.VENDOR_IDENTIFYING_VENDOR_CLASS
    assert o.value.to_bytes() == SAMPLE_VIVC_RAW
    assert (
        str(o)
        == "Vendor-Identifying Vendor Class: 9:'CiscoIdentifier', 18:'WellfleetIdentifier'"
    )


def test_parse_vivc():
    assert VIVCIdentifiers.from_bytes(SAMPLE_VIVC_RAW) == SAMPLE_VIVC


def test_parse_vivc_identifier_too_long():
    data = bytearray(SAMPLE_VIVC_RAW)
    data[4] = 40
    with pytest.raises(ValueError):
        VIVCIdentifiers.from_bytes(bytes(data))


def test_parse_vivc_longer_than_length():
    data = bytearray(SAMPLE_VIVC_RAW)
    data[4] = 5
    parsed = VIVCIdentifiers.from_bytes(bytes(data[:10]))
    assert parsed[0].data == b"Cisco"


def test_parse_vivc_empty():
    parsed = VIVCIdentifiers.from_bytes(b"")
    assert parsed == []
    assert str(parsed) == ""