"""
Node IP selection for runtimecfg.

Provides:
- VIP parsing and attachment checks
- Node IP selection with optional retry
- Netlink-backed address resolution
- kubelet / CRI-O service overrides
"""

from runtimecfg.net.addresses import (
    NetlinkAddressResolver,
    addresses_default,
    addresses_routing,
    suitable_interface,
    valid_node_address,
)
from runtimecfg.net.exceptions import (
    InvalidAddressError,
    NoAttachedInterfaceError,
    NodeIPError,
    NoSuitableAddressError,
    PersistenceError,
    ResolverError,
)
from runtimecfg.net.netlink import (
    InterfaceAddress,
    InterfaceInfo,
    NetlinkSnapshot,
    RouteEntry,
    read_snapshot,
)
from runtimecfg.net.overrides import (
    render_crio_override,
    render_kubelet_override,
    write_node_ip_overrides,
)
from runtimecfg.net.selector import candidate_addresses, select_node_ip
from runtimecfg.net.vip import find_attached_interface, is_attached, parse_ips

__all__ = [
    # Resolution
    "NetlinkAddressResolver",
    "addresses_routing",
    "addresses_default",
    "suitable_interface",
    "valid_node_address",
    # Snapshot
    "NetlinkSnapshot",
    "InterfaceAddress",
    "InterfaceInfo",
    "RouteEntry",
    "read_snapshot",
    # Selection
    "candidate_addresses",
    "select_node_ip",
    # VIPs
    "parse_ips",
    "is_attached",
    "find_attached_interface",
    # Overrides
    "render_kubelet_override",
    "render_crio_override",
    "write_node_ip_overrides",
    # Exceptions
    "NodeIPError",
    "InvalidAddressError",
    "NoSuitableAddressError",
    "ResolverError",
    "NoAttachedInterfaceError",
    "PersistenceError",
]
