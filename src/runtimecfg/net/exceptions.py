"""Node IP exception classes."""


class NodeIPError(Exception):
    """Base exception for node IP operations."""

    pass


class InvalidAddressError(NodeIPError):
    """A command-line argument is not an IPv4 or IPv6 literal."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Failed to parse IP address {value}")


class NoSuitableAddressError(NodeIPError):
    """Neither the VIP routes nor the default route gave a node address."""

    def __init__(self):
        super().__init__("Failed to find node IP")


class ResolverError(NodeIPError):
    """Reading the kernel routing or address state failed."""

    def __init__(self, operation: str, reason: object):
        self.operation = operation
        super().__init__(f"Failed to {operation}: {reason}")


class NoAttachedInterfaceError(NodeIPError):
    """None of the VIPs is on a subnet of a local interface."""

    def __init__(self, vips: list):
        self.vips = list(vips)
        listed = " ".join(str(vip) for vip in self.vips)
        super().__init__(f"No suitable interface for any of the VIPs [{listed}]")


class PersistenceError(NodeIPError):
    """Writing a service override file failed."""

    def __init__(self, path: str, reason: object):
        self.path = path
        super().__init__(f"Failed to write service override {path}: {reason}")
