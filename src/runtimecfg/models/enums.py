"""
Enumeration types for runtimecfg.

This module defines the enumeration types shared by the node-ip commands
and the logging setup.
"""

from enum import Enum


# =============================================================================
# Address Selection Enums
# =============================================================================


class CandidateSource(str, Enum):
    """
    Which resolver query produced a candidate address.

    - VIP_ROUTE: Address on a link that routes toward one of the VIPs
    - DEFAULT_ROUTE: Address on a link carrying a default route
    """

    VIP_ROUTE = "vip_route"
    DEFAULT_ROUTE = "default_route"


# =============================================================================
# Configuration Enums
# =============================================================================


class LogLevel(str, Enum):
    """
    Logging verbosity levels for runtimecfg.

    Levels (from most to least verbose):
        - FULL: Complete trace with detailed stack information
        - DEBUG: Debug messages and above
        - INFO: Informational messages and above
        - WARNING: Only warnings and errors
    """

    FULL = "full"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
