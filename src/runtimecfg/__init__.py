"""
runtimecfg: node runtime configuration helpers.

Chooses the node IP that kubelet and CRI-O should bind to and writes it
into their systemd service overrides.
"""

__version__ = "0.3.0"
