import pytest

from dhcpv4tools.options import Options
from dhcpv4tools.types import OptionCode
from dhcpv4tools.values import VIVCIdentifier, opt_generic, opt_vivc
from dhcpv4tools.ztp import VendorData, parse_vendor_data


def _packet(vc="", hostname=""):
    options = Options()
    if vc:
        options.update_option(opt_generic(OptionCode.CLASS_IDENTIFIER, vc.encode()))
    if hostname:
        options.update_option(opt_generic(OptionCode.HOST_NAME, hostname.encode()))
    return options


@pytest.mark.parametrize(
    "vc,hostname,want",
    [
        (
            "Arista;DCS-7050S-64;01.23;JPE12345678",
            "",
            VendorData(vendor_name="Arista", model="DCS-7050S-64", serial="JPE12345678"),
        ),
        (
            "Juniper-ptx1000-DD123",
            "",
            VendorData(vendor_name="Juniper", model="ptx1000", serial="DD123"),
        ),
        (
            "Juniper-qfx10002-36q-DN000",
            "",
            VendorData(vendor_name="Juniper", model="qfx10002-36q", serial="DN000"),
        ),
        (
            "Juniper-qfx10008",
            "DE123",
            VendorData(vendor_name="Juniper", model="qfx10008", serial="DE123"),
        ),
        (
            "ZPESystems:NSC:001234567",
            "",
            VendorData(vendor_name="ZPESystems", model="NSC", serial="001234567"),
        ),
    ],
)
def test_parse_class_identifier(vc, hostname, want):
    assert parse_vendor_data(_packet(vc, hostname)) == want


@pytest.mark.parametrize(
    "vc,message",
    [
        ("", "no known ZTP vendor"),
        ("VendorX;BFR10K;XX12345", "no known ZTP vendor"),
        ("Arista;1234", "malformed vendor option"),
        ("Juniper-qfx10008", "host name option is missing"),
        ("ZPESystems:NSC", "malformed vendor option"),
    ],
)
def test_parse_class_identifier_failures(vc, message):
    with pytest.raises(ValueError, match=message):
        parse_vendor_data(_packet(vc))


def _vivc_packet(ent_id, data):
    options = Options()
    options.update_option(opt_vivc(VIVCIdentifier(ent_id, data)))
    return options


def test_parse_vivc_cisco():
    packet = _vivc_packet(9, b"SN:0;PID:R-IOSXRV9000-CC")
    assert parse_vendor_data(packet) == VendorData(
        vendor_name="Cisco Systems", model="R-IOSXRV9000-CC", serial="0"
    )


def test_parse_vivc_multiple_colon_delimiters():
    packet = _vivc_packet(9, b"SN:0:123;PID:R-IOSXRV9000-CC:456")
    with pytest.raises(ValueError, match="malformed vendor option"):
        parse_vendor_data(packet)


def test_parse_vivc_unknown_enterprise():
    packet = _vivc_packet(18, b"SN:0;PID:X")
    with pytest.raises(ValueError, match="no known ZTP vendor"):
        parse_vendor_data(packet)


def test_class_identifier_takes_precedence_over_vivc():
    packet = _packet("ZPESystems:NSC:001234567")
    packet.update_option(opt_vivc(VIVCIdentifier(9, b"SN:0;PID:X")))
    assert parse_vendor_data(packet).vendor_name == "ZPESystems"