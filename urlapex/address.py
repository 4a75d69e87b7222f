from __future__ import annotations
import ipaddress
from typing import Optional, Tuple, Union

from .errors import Rejected
from .options import ParseOptions

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("fc00::/7"),
)


def split_host_port(authority: str, keep_port: bool = True) -> Tuple[str, str]:
    """Split an authority into (host, port); brackets around IPv6 are removed."""
    host, port = authority, ""
    if authority.startswith("[") and authority.endswith("]"):
        host = authority[1:-1]
    elif authority.startswith("[") and "]:" in authority:
        host, port = authority[1:].split("]:", 1)
    elif "." in authority:
        host, _, port = authority.partition(":")
    if not keep_port:
        port = ""
    return host, port


def parse_ip(host: str) -> Optional[IPAddress]:
    """Strict IP literal parse; returns None for anything that is not one."""
    # scoped addresses (fe80::1%eth0) are not literals here
    if not host or "%" in host:
        return None
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def is_identifying(ip: IPAddress) -> bool:
    """False for addresses that say nothing about who is behind them."""
    if ip.is_unspecified or ip.is_loopback:
        return False
    return not any(ip.version == net.version and ip in net for net in PRIVATE_NETWORKS)


def classify(authority: str, options: ParseOptions) -> Tuple[str, str, bool]:
    """Return (host, port, is_ip) or raise Rejected."""
    host, port = split_host_port(authority, options.keep_port)
    if not host:
        raise Rejected("empty host")

    ip = parse_ip(host)
    if ip is not None and not is_identifying(ip):
        raise Rejected(f"non-routable address {ip}")

    is_ip = ip is not None
    if is_ip and options.restrict_to_host:
        raise Rejected("address given where a host name is required")
    if not is_ip and options.restrict_to_ip:
        raise Rejected("host name given where an address is required")
    return host, port, is_ip
