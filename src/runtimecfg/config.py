"""
Node IP configuration.

A global Config instance that can be modified at runtime, typically by
CLI options before a command runs.

Usage:
    from runtimecfg.config import config

    config.KUBELET_OVERRIDE_PATH = "/tmp/kubelet.conf"
    config.LOG_LEVEL = LogLevel.DEBUG
"""

from dataclasses import dataclass

from runtimecfg.models.enums import LogLevel


@dataclass
class NodeIPConfig:
    """Node IP selection and override configuration."""

    # Service Override Paths
    KUBELET_OVERRIDE_PATH: str = "/etc/systemd/system/kubelet.service.d/20-nodenet.conf"
    CRIO_OVERRIDE_PATH: str = "/etc/systemd/system/crio.service.d/20-nodenet.conf"
    OVERRIDE_DIR_MODE: int = 0o755  # rwxr-xr-x for missing drop-in dirs

    # Selection Configuration
    RETRY_INTERVAL_SECONDS: float = 1.0
    ROUTE_TABLE: int = 254  # RT_TABLE_MAIN

    # Logging Configuration
    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_FILE: str = ""


# Global config instance
config = NodeIPConfig()
