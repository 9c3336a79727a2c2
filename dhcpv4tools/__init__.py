"""DHCPv4 option values and collections, IPv4/UDP framing, sockets, loggers and ZTP helpers."""

__version__ = "0.1.0"