"""Extraction of vendor, model and serial number for zero-touch provisioning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .options import Options
from .types import OptionCode
from .values import VIVCIdentifiers

#: IANA enterprise number of Cisco Systems.
CISCO_SYSTEMS_ENT_ID = 9
_CISCO_SYSTEMS_NAME = "Cisco Systems"


@dataclass(frozen=True)
class VendorData:
    """Vendor details a device may include in its vendor class options."""

    vendor_name: str = ""
    model: str = ""
    serial: str = ""


def _text(options: Options, code: int) -> str:
    data = options.get(code)
    if data is None:
        return ""
    return data.decode("utf-8", "replace")


def _malformed() -> ValueError:
    return ValueError("malformed vendor option")


def _parse_class_identifier(options: Options) -> Optional[VendorData]:
    vc = _text(options, OptionCode.CLASS_IDENTIFIER)

    # Arista;DCS-7050S-64;01.23;JPE12345678
    if vc.startswith("Arista;"):
        parts = vc.split(";")
        if len(parts) < 4:
            raise _malformed()
        return VendorData(vendor_name=parts[0], model=parts[1], serial=parts[3])

    # ZPESystems:NSC:001234567
    if vc.startswith("ZPESystems:"):
        parts = vc.split(":")
        if len(parts) < 3:
            raise _malformed()
        return VendorData(vendor_name=parts[0], model=parts[1], serial=parts[2])

    # Juniper-<model>-<serial>, Juniper-<model> with the serial in the host
    # name option, and models that themselves contain dashes.
    if vc.startswith("Juniper-"):
        parts = vc.split("-")
        if len(parts) < 3:
            model = parts[1]
            serial = _text(options, OptionCode.HOST_NAME)
            if not serial:
                raise ValueError("host name option is missing")
        else:
            model = "-".join(parts[1:-1])
            serial = parts[-1]
        return VendorData(vendor_name=parts[0], model=model, serial=serial)

    return None


def _parse_vivc(options: Options) -> Optional[VendorData]:
    data = options.get(OptionCode.VENDOR_IDENTIFYING_VENDOR_CLASS)
    if data is None:
        return None
    try:
        identifiers = VIVCIdentifiers.from_bytes(data)
    except ValueError:
        return None

    for ident in identifiers:
        if ident.ent_id != CISCO_SYSTEMS_ENT_ID:
            continue
        fields = {}
        # SN:0;PID:R-IOSXRV9000-CC
        for item in ident.data.split(b";"):
            pair = item.split(b":")
            if len(pair) != 2:
                raise _malformed()
            fields[pair[0].decode("utf-8", "replace")] = pair[1].decode("utf-8", "replace")
        return VendorData(
            vendor_name=_CISCO_SYSTEMS_NAME,
            model=fields.get("PID", ""),
            serial=fields.get("SN", ""),
        )
    return None


def parse_vendor_data(options: Options) -> VendorData:
    """Find vendor name, model and serial number in a packet's options.

    The class identifier is tried first, then the vendor-identifying vendor
    class. Raises ValueError if a vendor option is malformed or no known
    vendor is found.
    """
    found = _parse_class_identifier(options)
    if found is not None:
        return found
    found = _parse_vivc(options)
    if found is not None:
        return found
    raise ValueError("no known ZTP vendor found")