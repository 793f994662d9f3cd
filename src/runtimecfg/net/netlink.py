"""
Kernel link, address and route snapshots read through pyroute2.

Every query in runtimecfg works on a NetlinkSnapshot taken right before
it runs. The snapshot holds plain frozen dataclasses so the matching
logic in runtimecfg.net.addresses never touches netlink messages.

Ordering of a snapshot:
    - addresses are grouped by ascending link index; within one link the
      IPv4 addresses come first, each family in the order the kernel
      reports them
    - routes keep the kernel order, IPv4 before IPv6
"""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass, field

from runtimecfg.net.exceptions import ResolverError
from runtimecfg.utils.logger import get_logger

logger = get_logger(__name__)

# IFA_F_* address flags from linux/if_addr.h
IFA_F_DADFAILED = 0x08
IFA_F_DEPRECATED = 0x20
IFA_F_TENTATIVE = 0x40

RTN_UNICAST = 1
RT_TABLE_MAIN = 254

_FAMILIES = (socket.AF_INET, socket.AF_INET6)
_UNSPECIFIED = {socket.AF_INET: "0.0.0.0", socket.AF_INET6: "::"}


# =============================================================================
# Snapshot Records
# =============================================================================


@dataclass(frozen=True)
class InterfaceAddress:
    """One address assigned to a link."""

    index: int  # link index
    ifname: str  # e.g., "eth0"
    interface: ipaddress.IPv4Interface | ipaddress.IPv6Interface
    flags: int = 0  # IFA_F_* bits

    @property
    def ip(self) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
        return self.interface.ip

    @property
    def is_host_prefix(self) -> bool:
        """True for /32 and /128 addresses, which cover no neighbours."""
        return self.interface.network.prefixlen == self.interface.max_prefixlen


@dataclass(frozen=True)
class RouteEntry:
    """A unicast route of the routing table."""

    dst: ipaddress.IPv4Network | ipaddress.IPv6Network
    oifs: tuple[int, ...]  # several for multipath routes
    priority: int = 0  # metric, lower is preferred

    @property
    def is_default(self) -> bool:
        return self.dst.prefixlen == 0


@dataclass(frozen=True)
class InterfaceInfo:
    """
    Link that carries traffic for a VIP.

    An index of 0 is the "no match" sentinel; kernel link indexes start at 1.
    """

    index: int = 0
    name: str = ""

    @property
    def attached(self) -> bool:
        return self.index != 0


@dataclass
class NetlinkSnapshot:
    """Links, addresses and routes captured at one point in time."""

    links: dict[int, str] = field(default_factory=dict)
    addresses: list[InterfaceAddress] = field(default_factory=list)
    routes: list[RouteEntry] = field(default_factory=list)

    def addresses_on(self, index: int) -> list[InterfaceAddress]:
        return [addr for addr in self.addresses if addr.index == index]

    def routes_via(self, index: int) -> list[RouteEntry]:
        return [route for route in self.routes if index in route.oifs]


# =============================================================================
# Message Parsing
# =============================================================================


def _parse_address(msg, links: dict[int, str]) -> InterfaceAddress | None:
    # IFA_LOCAL is the local end on point-to-point links, IFA_ADDRESS the peer
    address = msg.get_attr("IFA_LOCAL") or msg.get_attr("IFA_ADDRESS")
    if not address:
        return None

    # IFA_FLAGS carries the full 32-bit set, the header only the low byte
    flags = msg.get_attr("IFA_FLAGS")
    if flags is None:
        flags = msg["flags"]

    index = msg["index"]
    return InterfaceAddress(
        index=index,
        ifname=links.get(index, ""),
        interface=ipaddress.ip_interface(f"{address}/{msg['prefixlen']}"),
        flags=flags,
    )


def _parse_route(msg) -> RouteEntry | None:
    if msg["type"] != RTN_UNICAST:
        return None

    family = msg["family"]
    dst = msg.get_attr("RTA_DST") or _UNSPECIFIED[family]
    network = ipaddress.ip_network(f"{dst}/{msg['dst_len']}", strict=False)

    oif = msg.get_attr("RTA_OIF")
    if oif:
        oifs = (oif,)
    else:
        multipath = msg.get_attr("RTA_MULTIPATH") or []
        oifs = tuple(nh["oif"] for nh in multipath if nh["oif"])
    if not oifs:
        return None

    return RouteEntry(
        dst=network,
        oifs=oifs,
        priority=msg.get_attr("RTA_PRIORITY") or 0,
    )


# =============================================================================
# Snapshot Reading
# =============================================================================


def read_snapshot(table: int = RT_TABLE_MAIN) -> NetlinkSnapshot:
    """
    Read links, addresses and unicast routes from the kernel.

    Args:
        table: Routing table to read routes from.

    Raises:
        ResolverError: If the netlink socket cannot be opened or queried.
    """
    from pyroute2 import IPRoute
    from pyroute2.netlink.exceptions import NetlinkError

    snapshot = NetlinkSnapshot()
    try:
        ipr = IPRoute()
    except OSError as e:
        raise ResolverError("open netlink socket", e) from e

    try:
        for link in ipr.get_links():
            snapshot.links[link["index"]] = link.get_attr("IFLA_IFNAME") or ""

        for family in _FAMILIES:
            for msg in ipr.get_addr(family=family):
                address = _parse_address(msg, snapshot.links)
                if address is not None:
                    snapshot.addresses.append(address)

            for msg in ipr.get_routes(family=family, table=table):
                route = _parse_route(msg)
                if route is not None:
                    snapshot.routes.append(route)
    except (NetlinkError, OSError) as e:
        raise ResolverError("read routing state", e) from e
    finally:
        ipr.close()

    # sort is stable, so per-link kernel order survives
    snapshot.addresses.sort(key=lambda addr: addr.index)

    logger.debug(
        f"Netlink snapshot: {len(snapshot.links)} links, "
        f"{len(snapshot.addresses)} addresses, {len(snapshot.routes)} routes"
    )
    return snapshot
