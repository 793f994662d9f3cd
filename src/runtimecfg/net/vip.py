"""VIP argument parsing and attachment checks."""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable

from runtimecfg.net.addresses import IPAddress
from runtimecfg.net.exceptions import InvalidAddressError, NoAttachedInterfaceError
from runtimecfg.net.netlink import InterfaceInfo
from runtimecfg.utils.logger import get_logger

logger = get_logger(__name__)


def parse_ips(args: Iterable[str]) -> list[IPAddress]:
    """
    Parse IPv4/IPv6 literals.

    Stops at the first malformed value, so nothing downstream runs on a
    partially parsed list.

    Raises:
        InvalidAddressError: If an argument is not an IP address.
    """
    vips = []
    for arg in args:
        try:
            vip = ipaddress.ip_address(arg)
        except ValueError:
            raise InvalidAddressError(arg) from None
        logger.info(f"Parsed Virtual IP {vip}")
        vips.append(vip)
    return vips


def is_attached(vip: IPAddress, resolver) -> InterfaceInfo | None:
    """
    Return the local interface that has the VIP on its subnet, or None.

    A zero interface index from the resolver means no match, not an error.
    """
    iface = resolver.suitable_interface(vip)
    if not iface.attached:
        logger.debug(f"No interface for VIP {vip}")
        return None
    return iface


def find_attached_interface(vips: Iterable[IPAddress], resolver) -> InterfaceInfo:
    """
    Return the interface of the first attached VIP.

    Raises:
        NoAttachedInterfaceError: If none of the VIPs is attached.
        ResolverError: If the resolver cannot read the routing state.
    """
    vips = list(vips)
    for vip in vips:
        iface = is_attached(vip, resolver)
        if iface is not None:
            logger.info(f"Found interface {iface.name} for VIP {vip}")
            return iface

    raise NoAttachedInterfaceError(vips)
