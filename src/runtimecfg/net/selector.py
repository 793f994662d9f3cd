"""
Node IP selection.

Turns a list of VIPs into the single address kubelet and CRI-O should
use: an address routing toward the VIPs when there is one, otherwise an
address on the default route.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from runtimecfg.config import config
from runtimecfg.net.addresses import IPAddress, valid_node_address
from runtimecfg.net.exceptions import NoSuitableAddressError
from runtimecfg.utils.logger import get_logger

logger = get_logger(__name__)


def candidate_addresses(vips: Sequence[IPAddress], resolver) -> list[IPAddress]:
    """
    Run one selection attempt and return every candidate, best first.

    VIP-routed addresses win; the default route is only consulted when
    there are no VIPs or none of them is routed to.

    Raises:
        ResolverError: If the resolver cannot read the routing state.
    """
    candidates = []
    if vips:
        candidates = resolver.addresses_routing_to(vips, valid_node_address)
        logger.debug(f"Addresses routing to VIPs: {candidates}")

    if not candidates:
        candidates = resolver.addresses_on_default_route(valid_node_address)
        logger.debug(f"Addresses on the default route: {candidates}")

    return candidates


def select_node_ip(
    vips: Sequence[IPAddress],
    resolver,
    retry: bool = False,
    sleep: Callable[[float], None] = time.sleep,
    interval: float | None = None,
) -> IPAddress:
    """
    Choose the node IP.

    The first candidate of an attempt is returned as is; the resolver's
    order is authoritative.

    With retry enabled, an attempt that finds nothing is followed by one
    sleep of `interval` seconds and a fresh attempt, with no upper bound on
    the number of attempts. Bounding the total wait is up to whatever
    supervises the process. Resolver errors are never retried.

    Args:
        vips: Virtual IPs the node may need to reach, possibly empty.
        resolver: Object answering addresses_routing_to() and
            addresses_on_default_route().
        retry: Keep trying until an address shows up.
        sleep: Function used to wait between attempts.
        interval: Seconds between attempts (defaults to
            config.RETRY_INTERVAL_SECONDS).

    Raises:
        NoSuitableAddressError: If nothing is found and retry is disabled.
        ResolverError: If the resolver cannot read the routing state.
    """
    if interval is None:
        interval = config.RETRY_INTERVAL_SECONDS

    while True:
        candidates = candidate_addresses(vips, resolver)
        if candidates:
            return candidates[0]

        if not retry:
            raise NoSuitableAddressError()

        logger.error("Failed to find a suitable node IP")
        sleep(interval)
