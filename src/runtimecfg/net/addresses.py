"""
Node address resolution.

Answers the two questions node IP selection asks of the host:

    - which local addresses route toward a set of VIPs
    - which local addresses sit on a link carrying the default route

plus the single-VIP question used by `vipable`: which link, if any, has
the VIP on one of its subnets.

The matching functions are pure and work on a NetlinkSnapshot.
NetlinkAddressResolver wires them to a fresh kernel snapshot per call,
so a retrying caller always sees the current topology.

Any object exposing addresses_routing_to(), addresses_on_default_route()
and suitable_interface() with the same contract can stand in for
NetlinkAddressResolver. Callers rely on the returned order: the first
address is the preferred one and is never re-sorted downstream.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Callable, Iterable

from runtimecfg.config import config
from runtimecfg.net.netlink import (
    IFA_F_DADFAILED,
    IFA_F_DEPRECATED,
    IFA_F_TENTATIVE,
    InterfaceAddress,
    InterfaceInfo,
    NetlinkSnapshot,
    read_snapshot,
)
from runtimecfg.utils.logger import get_logger

logger = get_logger(__name__)

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
AddressFilter = Callable[[InterfaceAddress], bool]

_UNUSABLE_FLAGS = IFA_F_DEPRECATED | IFA_F_TENTATIVE | IFA_F_DADFAILED


# =============================================================================
# Address Validity
# =============================================================================


def valid_node_address(address: InterfaceAddress) -> bool:
    """
    Check whether an address may serve as the node IP.

    Rejects loopback, link-local, multicast and unspecified addresses, and
    addresses the kernel marks deprecated, tentative (DAD still running)
    or DAD-failed.
    """
    ip = address.ip
    if ip.is_loopback or ip.is_link_local or ip.is_multicast or ip.is_unspecified:
        return False
    return not address.flags & _UNUSABLE_FLAGS


def _unique(addresses: Iterable[IPAddress]) -> list[IPAddress]:
    seen = set()
    result = []
    for ip in addresses:
        if ip not in seen:
            seen.add(ip)
            result.append(ip)
    return result


# =============================================================================
# Snapshot Matching
# =============================================================================


def _routes_to(
    snapshot: NetlinkSnapshot, address: InterfaceAddress, vip: IPAddress
) -> bool:
    if vip.version != address.ip.version:
        return False

    # DHCPv6 hands out /128s; the on-link prefix only shows up as a route
    if address.ip.version == 6 and address.is_host_prefix:
        return any(
            not route.is_default and vip in route.dst and address.ip in route.dst
            for route in snapshot.routes_via(address.index)
            if route.dst.version == 6
        )

    return vip in address.interface.network


def addresses_routing(
    snapshot: NetlinkSnapshot,
    vips: Iterable[IPAddress],
    validity: AddressFilter = valid_node_address,
) -> list[IPAddress]:
    """
    Find local addresses that directly route to any of the VIPs.

    An address qualifies when a VIP falls inside its own network. A /128
    IPv6 address qualifies when a non-default route on the same link
    covers both the VIP and the address. The VIPs themselves are never
    returned, so a node currently holding a VIP does not pick it.

    Returns:
        Matching addresses in snapshot order (link index, then kernel
        order), without duplicates.
    """
    vips = list(vips)
    matches = []

    for address in snapshot.addresses:
        if address.ip in vips or not validity(address):
            continue
        if any(_routes_to(snapshot, address, vip) for vip in vips):
            logger.debug(f"Address {address.ip} on {address.ifname} routes to VIPs")
            matches.append(address.ip)

    return _unique(matches)


def addresses_default(
    snapshot: NetlinkSnapshot,
    validity: AddressFilter = valid_node_address,
) -> list[IPAddress]:
    """
    Find local addresses on links that carry a default route.

    Default routes are visited by ascending metric (kernel order on ties).
    For each, the valid addresses of the same family on its output link(s)
    are collected.
    """
    defaults = sorted(
        (route for route in snapshot.routes if route.is_default),
        key=lambda route: route.priority,
    )

    matches = []
    for route in defaults:
        for oif in route.oifs:
            for address in snapshot.addresses_on(oif):
                if address.ip.version == route.dst.version and validity(address):
                    matches.append(address.ip)

    return _unique(matches)


def suitable_interface(snapshot: NetlinkSnapshot, vip: IPAddress) -> InterfaceInfo:
    """
    Find the link that has the VIP on one of its subnets.

    Uses the same subnet rule as addresses_routing(), so a /128 IPv6
    address counts through its on-link route. Loopback addresses never
    make a VIP attached.

    Returns:
        The first such link in index order, or InterfaceInfo() (index 0)
        when there is none.
    """
    for address in snapshot.addresses:
        if address.ip.is_loopback:
            continue
        if _routes_to(snapshot, address, vip):
            return InterfaceInfo(index=address.index, name=address.ifname)
    return InterfaceInfo()


# =============================================================================
# Netlink Resolver
# =============================================================================


class NetlinkAddressResolver:
    """
    Resolver backed by the kernel routing state.

    Takes a new snapshot on every call; nothing is cached between calls.
    All methods raise ResolverError when the kernel cannot be queried and
    return empty results when nothing matches.
    """

    def __init__(self, table: int | None = None):
        self.table = table if table is not None else config.ROUTE_TABLE

    def _snapshot(self) -> NetlinkSnapshot:
        return read_snapshot(self.table)

    def addresses_routing_to(
        self,
        targets: Iterable[IPAddress],
        validity: AddressFilter = valid_node_address,
    ) -> list[IPAddress]:
        return addresses_routing(self._snapshot(), targets, validity)

    def addresses_on_default_route(
        self, validity: AddressFilter = valid_node_address
    ) -> list[IPAddress]:
        return addresses_default(self._snapshot(), validity)

    def suitable_interface(self, vip: IPAddress) -> InterfaceInfo:
        return suitable_interface(self._snapshot(), vip)
