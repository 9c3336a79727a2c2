"""Collections of DHCPv4 options: wire encoding, parsing and human-readable output."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from itertools import islice
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from .types import MessageType, Option, OptionCode, _OpenIntEnum
from .values import (
    IP,
    IPMask,
    IPs,
    Duration,
    OptionCodeList,
    OptionGeneric,
    Routes,
    Strings,
    Uint16,
    VIVCIdentifiers,
)

_PAD = 0
_END = 255
_MAX_CHUNK = 0xFF


class InvalidOptionsError(ValueError):
    """Raised when option data is truncated, misaligned or has trailing bytes."""


class Options(dict):
    """A mapping of one-byte option codes to their raw data."""

    def __init__(self, items: Union[Mapping[int, bytes], Iterable[tuple[int, bytes]]] = ()) -> None:
        pairs = items.items() if isinstance(items, Mapping) else items
        super().__init__((int(code), bytes(data)) for code, data in pairs)

    def get(self, code: int, default: Optional[bytes] = None) -> Optional[bytes]:  # type: ignore[override]
        """Return the data stored for code, or default when it is absent."""
        return super().get(int(code), default)

    def has(self, code: int) -> bool:
        """Return whether an option with this code is present."""
        return int(code) in self

    def update_option(self, option: Option) -> None:
        """Store the option, replacing any earlier value for the same code."""
        self[int(option.code)] = option.value.to_bytes()

    def to_bytes(self) -> bytes:
        """Serialize the options in code order, splitting long values per RFC 3396.

        Pad and End entries are never written.
        """
        out = bytearray()
        for code in sorted(self):
            if code in (_PAD, _END):
                continue
            data = self[code]
            if not data:
                out += bytes((code, 0))
                continue
            for start in range(0, len(data), _MAX_CHUNK):
                chunk = data[start : start + _MAX_CHUNK]
                out += bytes((code, len(chunk)))
                out += chunk
        return bytes(out)

    def from_bytes(self, data: bytes, check_end: bool = False) -> None:
        """Parse options from data (without the magic cookie) into this mapping.

        Repeated options are concatenated (RFC 2131, RFC 3396). When check_end
        is true, a missing End option is an error. Anything after the End
        option must be padding.
        """
        stream = iter(bytes(data))
        end = False
        for code in stream:
            if code == _PAD:
                continue
            if code == _END:
                end = True
                break
            length = next(stream, None)
            if length is None:
                raise InvalidOptionsError(
                    f"error collecting options: option {code} has no length byte"
                )
            chunk = bytes(islice(stream, length))
            if len(chunk) != length:
                raise InvalidOptionsError(
                    f"error collecting options: option {code} wants {length} bytes, "
                    f"only {len(chunk)} left"
                )
            self[code] = super().get(code, b"") + chunk

        if not end and check_end:
            raise InvalidOptionsError("options end without an End option")
        if any(byte not in (_PAD, _END) for byte in stream):
            raise InvalidOptionsError("invalid options data after the End option")

    def to_string(self, humanizer: "OptionHumanizer") -> str:
        """Render every option on its own indented line using humanizer."""
        lines = []
        for code in sorted(self):
            text = humanizer.stringify(code, self[code])
            if "\n" in text:
                text = text.replace("\n  ", "\n      ")
            lines.append(f"    {text}\n")
        return "".join(lines)

    def summary(self, vendor_decoder: Any = None) -> str:
        """Render the options, decoding Vendor Specific Information with vendor_decoder."""
        return self.to_string(
            OptionHumanizer(
                value_humanizer=lambda code, data: get_option(code, data, vendor_decoder),
                code_humanizer=OptionCode,
            )
        )

    def __str__(self) -> str:
        return self.to_string(_DHCP_HUMANIZER)


def options_from_list(*args: Option) -> Options:
    """Collect the given options into an Options mapping."""
    options = Options()
    for option in args:
        options.update_option(option)
    return options


@dataclass(frozen=True)
class OptionHumanizer:
    """Names option codes and interprets their data within one option space."""

    value_humanizer: Callable[[Any, bytes], Any]
    code_humanizer: Callable[[int], Any]

    def stringify(self, code: int, data: bytes) -> str:
        """Return ``<name>: <value>`` for the given code and data."""
        name = self.code_humanizer(code)
        value = self.value_humanizer(name, data)
        return f"{name}: {value}"


class _Text(str):
    """Option data shown as plain text."""

    @classmethod
    def from_bytes(cls, data: bytes) -> "_Text":
        return cls(bytes(data).decode("utf-8", "replace"))


def _relay_options_from_bytes(data: bytes) -> "RelayOptions":
    relay = RelayOptions()
    relay.from_bytes(data)
    return relay


def _user_class_from_bytes(data: bytes) -> Any:
    try:
        return Strings.from_bytes(data)
    except ValueError:
        return _Text.from_bytes(data)


_DECODERS: dict[int, Callable[[bytes], Any]] = {
    OptionCode.ROUTER: IPs.from_bytes,
    OptionCode.DOMAIN_NAME_SERVER: IPs.from_bytes,
    OptionCode.NTP_SERVERS: IPs.from_bytes,
    OptionCode.SERVER_IDENTIFIER: IPs.from_bytes,
    OptionCode.BROADCAST_ADDRESS: IP.from_bytes,
    OptionCode.REQUESTED_IP_ADDRESS: IP.from_bytes,
    OptionCode.SUBNET_MASK: IPMask.from_bytes,
    OptionCode.DHCP_MESSAGE_TYPE: MessageType.from_bytes,
    OptionCode.PARAMETER_REQUEST_LIST: OptionCodeList.from_bytes,
    OptionCode.HOST_NAME: _Text.from_bytes,
    OptionCode.DOMAIN_NAME: _Text.from_bytes,
    OptionCode.ROOT_PATH: _Text.from_bytes,
    OptionCode.CLASS_IDENTIFIER: _Text.from_bytes,
    OptionCode.TFTP_SERVER_NAME: _Text.from_bytes,
    OptionCode.BOOTFILE_NAME: _Text.from_bytes,
    OptionCode.RELAY_AGENT_INFORMATION: _relay_options_from_bytes,
    OptionCode.IP_ADDRESS_LEASE_TIME: Duration.from_bytes,
    OptionCode.MAXIMUM_DHCP_MESSAGE_SIZE: Uint16.from_bytes,
    OptionCode.USER_CLASS_INFORMATION: _user_class_from_bytes,
    OptionCode.VENDOR_IDENTIFYING_VENDOR_CLASS: VIVCIdentifiers.from_bytes,
    OptionCode.CLASSLESS_STATIC_ROUTE: Routes.from_bytes,
}


def get_option(code: Any, data: bytes, vendor_decoder: Any = None) -> Any:
    """Decode data for a DHCP option code into a printable value.

    vendor_decoder, if given, is any object with a ``from_bytes(data)``
    method; it decodes Vendor Specific Information. Data that cannot be
    decoded, and codes of other option spaces, come back as OptionGeneric.
    """
    data = bytes(data)
    if type(code) is int:
        code = OptionCode(code)
    if isinstance(code, OptionCode):
        if code == OptionCode.VENDOR_SPECIFIC_INFORMATION:
            decoder = vendor_decoder.from_bytes if vendor_decoder is not None else None
        else:
            decoder = _DECODERS.get(int(code))
        if decoder is not None:
            try:
                return decoder(data)
            except ValueError:
                pass
    return OptionGeneric(data)


def parse_option(code: Any, data: bytes) -> Any:
    """Decode data for a DHCP option code without a vendor decoder."""
    return get_option(code, data, None)


_DHCP_HUMANIZER = OptionHumanizer(value_humanizer=parse_option, code_humanizer=OptionCode)


_RELAY_SUB_OPTION_NAMES: dict[int, str] = {
    1: "Agent Circuit ID Sub-option",
    2: "Agent Remote ID Sub-option",
    4: "DOCSIS Device Class Sub-option",
    5: "Link Selection Sub-option",
    6: "Subscriber ID Sub-option",
    7: "RADIUS Attributes Sub-option",
    8: "Authentication Sub-option",
    9: "Vendor Specific Sub-option",
    10: "Relay Agent Flags Sub-option",
    11: "Server Identifier Override Sub-option",
    151: "Virtual Subnet Selection Sub-option",
    152: "Virtual Subnet Selection Control Sub-option",
}


class RelaySubOptionCode(_OpenIntEnum):
    """Relay Agent Information (option 82) sub-option codes."""

    AGENT_CIRCUIT_ID = 1  # RFC 3046
    AGENT_REMOTE_ID = 2  # RFC 3046
    DOCSIS_DEVICE_CLASS = 4  # RFC 3256
    LINK_SELECTION = 5  # RFC 3527
    SUBSCRIBER_ID = 6  # RFC 3993
    RADIUS_ATTRIBUTES = 7  # RFC 4014
    AUTHENTICATION = 8  # RFC 4030
    VENDOR_SPECIFIC_INFORMATION = 9  # RFC 4243
    RELAY_AGENT_FLAGS = 10  # RFC 5010
    SERVER_IDENTIFIER_OVERRIDE = 11  # RFC 5107
    VIRTUAL_SUBNET_SELECTION = 151  # RFC 6607
    VIRTUAL_SUBNET_SELECTION_CONTROL = 152  # RFC 6607

    @property
    def code(self) -> int:
        """The one-byte wire code."""
        return int(self)

    def __str__(self) -> str:
        return self._describe(_RELAY_SUB_OPTION_NAMES)


@dataclass(frozen=True)
class _RelaySubOptionValue:
    data: bytes

    def __str__(self) -> str:
        return f"{self.data.decode('utf-8', 'replace')} ({OptionGeneric(self.data)})"


_RELAY_HUMANIZER = OptionHumanizer(
    value_humanizer=lambda code, data: _RelaySubOptionValue(bytes(data)),
    code_humanizer=RelaySubOptionCode,
)


class RelayOptions(Options):
    """Relay agent sub-options, named in the Relay Agent Information space."""

    def __str__(self) -> str:
        return "\n" + self.to_string(_RELAY_HUMANIZER)

    def from_bytes(self, data: bytes, check_end: bool = False) -> None:
        """Replace the contents with the sub-options parsed from data."""
        self.clear()
        super().from_bytes(data, check_end)


def opt_relay_agent_info(*args: Option) -> Option:
    """Relay Agent Information option (RFC 3046) holding the given sub-options."""
    return Option(OptionCode.RELAY_AGENT_INFORMATION, RelayOptions(options_from_list(*args)))


def get_ip(code: int, options: Options) -> Optional[IP]:
    """Return the option parsed as one IPv4 address, or None if absent or malformed."""
    data = options.get(code)
    if data is None:
        return None
    try:
        return IP.from_bytes(data)
    except ValueError:
        return None


def get_ips(code: int, options: Options) -> Optional[IPs]:
    """Return the option parsed as a list of IPv4 addresses, or None if absent or malformed."""
    data = options.get(code)
    if data is None:
        return None
    try:
        return IPs.from_bytes(data)
    except ValueError:
        return None


def get_uint16(code: int, options: Options) -> int:
    """Return the option parsed as a 16-bit value.

    Raises KeyError if the option is absent and ValueError if it is malformed.
    """
    data = options.get(code)
    if data is None:
        raise KeyError(f"option {code} not present")
    return int(Uint16.from_bytes(data))