"""Core DHCPv4 types: transaction IDs, message types, opcodes and option codes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol


class OptionValue(Protocol):
    """Anything that can be carried as the value of a DHCPv4 option."""

    def to_bytes(self) -> bytes: ...

    def __str__(self) -> str: ...


class _OpenIntEnum(enum.IntEnum):
    """Byte-sized integer enum that also accepts values without a name.

    Unnamed values in the range 0-255 become pseudo-members that print as
    ``unknown (<n>)``.
    """

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 0xFF:
            member = int.__new__(cls, value)
            member._name_ = f"UNKNOWN_{value}"
            member._value_ = value
            return member
        return None

    def _describe(self, names: dict[int, str]) -> str:
        return names.get(int(self), f"unknown ({int(self)})")

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


class TransactionID(bytes):
    """A 4-byte DHCP transaction ID (RFC 951, Section 3)."""

    SIZE = 4

    def __new__(cls, value: bytes = bytes(4)) -> "TransactionID":
        data = bytes(value)
        if len(data) != cls.SIZE:
            raise ValueError(
                f"transaction ID must be {cls.SIZE} bytes long, got {len(data)}"
            )
        return super().__new__(cls, data)

    def __str__(self) -> str:
        return "0x" + self.hex()

    def __repr__(self) -> str:
        return f"TransactionID({bytes(self)!r})"


_MESSAGE_TYPE_NAMES: dict[int, str] = {
    1: "DISCOVER",
    2: "OFFER",
    3: "REQUEST",
    4: "DECLINE",
    5: "ACK",
    6: "NAK",
    7: "RELEASE",
    8: "INFORM",
}


class MessageType(_OpenIntEnum):
    """DHCP message types (RFC 2132, Section 9.6)."""

    # NONE is not a real message type; it signals that none was requested.
    NONE = 0
    DISCOVER = 1
    OFFER = 2
    REQUEST = 3
    DECLINE = 4
    ACK = 5
    NAK = 6
    RELEASE = 7
    INFORM = 8

    def to_bytes(self) -> bytes:  # type: ignore[override]
        """Serialize the message type as a single byte."""
        return bytes([int(self)])

    @classmethod
    def from_bytes(cls, data: bytes) -> "MessageType":  # type: ignore[override]
        """Parse a message type from exactly one byte."""
        data = bytes(data)
        if len(data) != 1:
            raise ValueError(
                f"message type must be exactly 1 byte, got {len(data)}"
            )
        return cls(data[0])

    def __str__(self) -> str:
        return self._describe(_MESSAGE_TYPE_NAMES)


_OPCODE_NAMES: dict[int, str] = {
    1: "BootRequest",
    2: "BootReply",
}


class OpcodeType(_OpenIntEnum):
    """DHCPv4 opcodes."""

    BOOT_REQUEST = 1
    BOOT_REPLY = 2

    def __str__(self) -> str:
        return self._describe(_OPCODE_NAMES)


class OptionCode(_OpenIntEnum):
    """DHCPv4 option codes with their registered names."""

    PAD = 0
    SUBNET_MASK = 1
    TIME_OFFSET = 2
    ROUTER = 3
    TIME_SERVER = 4
    NAME_SERVER = 5
    DOMAIN_NAME_SERVER = 6
    LOG_SERVER = 7
    QUOTE_SERVER = 8
    LPR_SERVER = 9
    IMPRESS_SERVER = 10
    RESOURCE_LOCATION_SERVER = 11
    HOST_NAME = 12
    BOOT_FILE_SIZE = 13
    MERIT_DUMP_FILE = 14
    DOMAIN_NAME = 15
    SWAP_SERVER = 16
    ROOT_PATH = 17
    EXTENSIONS_PATH = 18
    IP_FORWARDING = 19
    NON_LOCAL_SOURCE_ROUTING = 20
    POLICY_FILTER = 21
    MAXIMUM_DATAGRAM_ASSEMBLY_SIZE = 22
    DEFAULT_IP_TTL = 23
    PATH_MTU_AGING_TIMEOUT = 24
    PATH_MTU_PLATEAU_TABLE = 25
    INTERFACE_MTU = 26
    ALL_SUBNETS_ARE_LOCAL = 27
    BROADCAST_ADDRESS = 28
    PERFORM_MASK_DISCOVERY = 29
    MASK_SUPPLIER = 30
    PERFORM_ROUTER_DISCOVERY = 31
    ROUTER_SOLICITATION_ADDRESS = 32
    STATIC_ROUTING_TABLE = 33
    TRAILER_ENCAPSULATION = 34
    ARP_CACHE_TIMEOUT = 35
    ETHERNET_ENCAPSULATION = 36
    DEFAULT_TCP_TTL = 37
    TCP_KEEPALIVE_INTERVAL = 38
    TCP_KEEPALIVE_GARBAGE = 39
    NETWORK_INFORMATION_SERVICE_DOMAIN = 40
    NETWORK_INFORMATION_SERVERS = 41
    NTP_SERVERS = 42
    VENDOR_SPECIFIC_INFORMATION = 43
    NETBIOS_OVER_TCPIP_NAME_SERVER = 44
    NETBIOS_OVER_TCPIP_DATAGRAM_DISTRIBUTION_SERVER = 45
    NETBIOS_OVER_TCPIP_NODE_TYPE = 46
    NETBIOS_OVER_TCPIP_SCOPE = 47
    X_WINDOW_SYSTEM_FONT_SERVER = 48
    X_WINDOW_SYSTEM_DISPLAY_MANAGER = 49
    REQUESTED_IP_ADDRESS = 50
    IP_ADDRESS_LEASE_TIME = 51
    OPTION_OVERLOAD = 52
    DHCP_MESSAGE_TYPE = 53
    SERVER_IDENTIFIER = 54
    PARAMETER_REQUEST_LIST = 55
    MESSAGE = 56
    MAXIMUM_DHCP_MESSAGE_SIZE = 57
    RENEW_TIME_VALUE = 58
    REBINDING_TIME_VALUE = 59
    CLASS_IDENTIFIER = 60
    CLIENT_IDENTIFIER = 61
    NETWARE_IP_DOMAIN_NAME = 62
    NETWARE_IP_INFORMATION = 63
    NETWORK_INFORMATION_SERVICE_PLUS_DOMAIN = 64
    NETWORK_INFORMATION_SERVICE_PLUS_SERVERS = 65
    TFTP_SERVER_NAME = 66
    BOOTFILE_NAME = 67
    MOBILE_IP_HOME_AGENT = 68
    SMTP_SERVER = 69
    POP_SERVER = 70
    NNTP_SERVER = 71
    DEFAULT_WWW_SERVER = 72
    DEFAULT_FINGER_SERVER = 73
    DEFAULT_IRC_SERVER = 74
    STREETTALK_SERVER = 75
    STREETTALK_DIRECTORY_ASSISTANCE_SERVER = 76
    USER_CLASS_INFORMATION = 77
    SLP_DIRECTORY_AGENT = 78
    SLP_SERVICE_SCOPE = 79
    RAPID_COMMIT = 80
    FQDN = 81
    RELAY_AGENT_INFORMATION = 82
    INTERNET_STORAGE_NAME_SERVICE = 83
    # 84 returned in RFC 3679
    NDS_SERVERS = 85
    NDS_TREE_NAME = 86
    NDS_CONTEXT = 87
    BCMCS_CONTROLLER_DOMAIN_NAME_LIST = 88
    BCMCS_CONTROLLER_IPV4_ADDRESS_LIST = 89
    AUTHENTICATION = 90
    CLIENT_LAST_TRANSACTION_TIME = 91
    ASSOCIATED_IP = 92
    CLIENT_SYSTEM_ARCHITECTURE_TYPE = 93
    CLIENT_NETWORK_INTERFACE_IDENTIFIER = 94
    LDAP = 95
    # 96 returned in RFC 3679
    CLIENT_MACHINE_IDENTIFIER = 97
    OPEN_GROUP_USER_AUTHENTICATION = 98
    GEOCONF_CIVIC = 99
    IEEE_10031_TZ_STRING = 100
    REFERENCE_TO_TZ_DATABASE = 101
    # 102-111 returned in RFC 3679
    NETINFO_PARENT_SERVER_ADDRESS = 112
    NETINFO_PARENT_SERVER_TAG = 113
    URL = 114
    # 115 returned in RFC 3679
    AUTO_CONFIGURE = 116
    NAME_SERVICE_SEARCH = 117
    SUBNET_SELECTION = 118
    DNS_DOMAIN_SEARCH_LIST = 119
    SIP_SERVERS = 120
    CLASSLESS_STATIC_ROUTE = 121
    CCC = 122
    GEOCONF = 123
    VENDOR_IDENTIFYING_VENDOR_CLASS = 124
    VENDOR_IDENTIFYING_VENDOR_SPECIFIC = 125
    # 126-127 returned in RFC 3679
    TFTP_SERVER_IP_ADDRESS = 128
    CALL_SERVER_IP_ADDRESS = 129
    DISCRIMINATION_STRING = 130
    REMOTE_STATISTICS_SERVER_IP_ADDRESS = 131
    VLAN_ID_8021P = 132
    L2_PRIORITY_8021Q = 133
    DIFFSERV_CODE_POINT = 134
    HTTP_PROXY_FOR_PHONE_SPECIFIC_APPLICATIONS = 135
    PANA_AUTHENTICATION_AGENT = 136
    LOST_SERVER = 137
    CAPWAP_ACCESS_CONTROLLER_ADDRESSES = 138
    IPV4_ADDRESS_MOS = 139
    IPV4_FQDN_MOS = 140
    SIP_UA_CONFIGURATION_SERVICE_DOMAINS = 141
    IPV4_ADDRESS_ANDSF = 142
    IPV6_ADDRESS_ANDSF = 143
    # 144-149 returned in RFC 3679
    TFTP_SERVER_ADDRESS = 150
    STATUS_CODE = 151
    BASE_TIME = 152
    START_TIME_OF_STATE = 153
    QUERY_START_TIME = 154
    QUERY_END_TIME = 155
    DHCP_STATE = 156
    DATA_SOURCE = 157
    # 158-174 returned in RFC 3679
    ETHERBOOT = 175
    IP_TELEPHONE = 176
    ETHERBOOT_PACKETCABLE_AND_CABLEHOME = 177
    # 178-207 returned in RFC 3679
    PXELINUX_MAGIC_STRING = 208
    PXELINUX_CONFIG_FILE = 209
    PXELINUX_PATH_PREFIX = 210
    PXELINUX_REBOOT_TIME = 211
    OPTION_6RD = 212
    V4_ACCESS_DOMAIN = 213
    # 214-219 returned in RFC 3679
    SUBNET_ALLOCATION = 220
    VIRTUAL_SUBNET_ALLOCATION = 221
    # 222-223 returned in RFC 3679; 224-254 reserved for private use
    END = 255

    @property
    def code(self) -> int:
        """The one-byte wire code."""
        return int(self)

    def __str__(self) -> str:
        return self._describe(_OPTION_CODE_NAMES)


_OPTION_CODE_NAMES: dict[int, str] = {
    0: "Pad",
    1: "Subnet Mask",
    2: "Time Offset",
    3: "Router",
    4: "Time Server",
    5: "Name Server",
    6: "Domain Name Server",
    7: "Log Server",
    8: "Quote Server",
    9: "LPR Server",
    10: "Impress Server",
    11: "Resource Location Server",
    12: "Host Name",
    13: "Boot File Size",
    14: "Merit Dump File",
    15: "Domain Name",
    16: "Swap Server",
    17: "Root Path",
    18: "Extensions Path",
    19: "IP Forwarding enable/disable",
    20: "Non-local Source Routing enable/disable",
    21: "Policy Filter",
    22: "Maximum Datagram Reassembly Size",
    23: "Default IP Time-to-live",
    24: "Path MTU Aging Timeout",
    25: "Path MTU Plateau Table",
    26: "Interface MTU",
    27: "All Subnets Are Local",
    28: "Broadcast Address",
    29: "Perform Mask Discovery",
    30: "Mask Supplier",
    31: "Perform Router Discovery",
    32: "Router Solicitation Address",
    33: "Static Routing Table",
    34: "Trailer Encapsulation",
    35: "ARP Cache Timeout",
    36: "Ethernet Encapsulation",
    37: "Default TCP TTL",
    38: "TCP Keepalive Interval",
    39: "TCP Keepalive Garbage",
    40: "Network Information Service Domain",
    41: "Network Information Servers",
    42: "NTP Servers",
    43: "Vendor Specific Information",
    44: "NetBIOS over TCP/IP Name Server",
    45: "NetBIOS over TCP/IP Datagram Distribution Server",
    46: "NetBIOS over TCP/IP Node Type",
    47: "NetBIOS over TCP/IP Scope",
    48: "X Window System Font Server",
    49: "X Window System Display Manager",
    50: "Requested IP Address",
    51: "IP Addresses Lease Time",
    52: "Option Overload",
    53: "DHCP Message Type",
    54: "Server Identifier",
    55: "Parameter Request List",
    56: "Message",
    57: "Maximum DHCP Message Size",
    58: "Renew Time Value",
    59: "Rebinding Time Value",
    60: "Class Identifier",
    61: "Client identifier",
    62: "NetWare/IP Domain Name",
    63: "NetWare/IP Information",
    64: "Network Information Service+ Domain",
    65: "Network Information Service+ Servers",
    66: "TFTP Server Name",
    67: "Bootfile Name",
    68: "Mobile IP Home Agent",
    69: "SMTP Server",
    70: "POP Server",
    71: "NNTP Server",
    72: "Default WWW Server",
    73: "Default Finger Server",
    74: "Default IRC Server",
    75: "StreetTalk Server",
    76: "StreetTalk Directory Assistance Server",
    77: "User Class Information",
    78: "SLP DIrectory Agent",
    79: "SLP Service Scope",
    80: "Rapid Commit",
    81: "FQDN",
    82: "Relay Agent Information",
    83: "Internet Storage Name Service",
    85: "NDS Servers",
    86: "NDS Tree Name",
    87: "NDS Context",
    88: "BCMCS Controller Domain Name List",
    89: "BCMCS Controller IPv4 Address List",
    90: "Authentication",
    91: "Client Last Transaction Time",
    92: "Associated IP",
    93: "Client System Architecture Type",
    94: "Client Network Interface Identifier",
    95: "LDAP",
    97: "Client Machine Identifier",
    98: "OpenGroup's User Authentication",
    99: "GEOCONF_CIVIC",
    100: "IEEE 1003.1 TZ String",
    101: "Reference to the TZ Database",
    112: "NetInfo Parent Server Address",
    113: "NetInfo Parent Server Tag",
    114: "URL",
    116: "Auto-Configure",
    117: "Name Service Search",
    118: "Subnet Selection",
    119: "DNS Domain Search List",
    120: "SIP Servers",
    121: "Classless Static Route",
    122: "CCC, CableLabs Client Configuration",
    123: "GeoConf",
    124: "Vendor-Identifying Vendor Class",
    125: "Vendor-Identifying Vendor-Specific",
    128: "TFTP Server IP Address",
    129: "Call Server IP Address",
    130: "Discrimination String",
    131: "RemoteStatistics Server IP Address",
    132: "802.1P VLAN ID",
    133: "802.1Q L2 Priority",
    134: "Diffserv Code Point",
    135: "HTTP Proxy for phone-specific applications",
    136: "PANA Authentication Agent",
    137: "LoST Server",
    138: "CAPWAP Access Controller Addresses",
    139: "OPTION-IPv4_Address-MoS",
    140: "OPTION-IPv4_FQDN-MoS",
    141: "SIP UA Configuration Service Domains",
    142: "OPTION-IPv4_Address-ANDSF",
    143: "OPTION-IPv6_Address-ANDSF",
    150: "TFTP Server Address",
    151: "Status Code",
    152: "Base Time",
    153: "Start Time of State",
    154: "Query Start Time",
    155: "Query End Time",
    156: "DHCP Staet",
    157: "Data Source",
    175: "Etherboot",
    176: "IP Telephone",
    177: "Etherboot / PacketCable and CableHome",
    208: "PXELinux Magic String",
    209: "PXELinux Config File",
    210: "PXELinux Path Prefix",
    211: "PXELinux Reboot Time",
    212: "OPTION_6RD",
    213: "OPTION_V4_ACCESS_DOMAIN",
    220: "Subnet Allocation",
    221: "Virtual Subnet Selection",
    255: "End",
}


class GenericOptionCode(int):
    """An option code printed without a name, as ``unknown (<n>)``."""

    def __new__(cls, value: int) -> "GenericOptionCode":
        value = int(value)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"option code {value} does not fit in one byte")
        return super().__new__(cls, value)

    @property
    def code(self) -> int:
        """The one-byte wire code."""
        return int(self)

    def __str__(self) -> str:
        return f"unknown ({int(self)})"

    def __repr__(self) -> str:
        return f"GenericOptionCode({int(self)})"


@dataclass(frozen=True)
class Option:
    """A DHCPv4 option: a one-byte code and a value interpreted by that code."""

    code: int
    value: OptionValue

    def __str__(self) -> str:
        text = str(self.value)
        if "\n" in text:
            return f"{self.code}:\n{text}"
        return f"{self.code}: {text}"