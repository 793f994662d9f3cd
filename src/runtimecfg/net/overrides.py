"""
systemd drop-in overrides for kubelet and CRI-O.

The chosen node IP reaches the services through one environment
variable each:

    kubelet.service.d/20-nodenet.conf   KUBELET_NODE_IP
    crio.service.d/20-nodenet.conf      CONTAINER_STREAM_ADDRESS

The two files are written one after the other. If the CRI-O write fails
the kubelet file is left in place; nothing is rolled back.
"""

from __future__ import annotations

import os

from runtimecfg.config import config
from runtimecfg.net.exceptions import PersistenceError
from runtimecfg.utils.logger import get_logger

logger = get_logger(__name__)

KUBELET_NODE_IP_VAR = "KUBELET_NODE_IP"
CRIO_STREAM_ADDRESS_VAR = "CONTAINER_STREAM_ADDRESS"


# =============================================================================
# Rendering
# =============================================================================


def render_override(variable: str, address) -> str:
    """Render a [Service] drop-in setting one environment variable."""
    return f'[Service]\nEnvironment="{variable}={address}"\n'


def render_kubelet_override(address) -> str:
    return render_override(KUBELET_NODE_IP_VAR, address)


def render_crio_override(address) -> str:
    return render_override(CRIO_STREAM_ADDRESS_VAR, address)


# =============================================================================
# Writing
# =============================================================================


def write_override(path: str, content: str) -> None:
    """
    Replace the override file at `path` with `content`.

    The parent directory is created (rwxr-xr-x) if it does not exist.

    Raises:
        PersistenceError: If the directory or the file cannot be written.
    """
    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, mode=config.OVERRIDE_DIR_MODE, exist_ok=True)
        logger.info(f"Opening service override path {path}")
        with open(path, "w") as f:
            logger.info(f"Writing service override with content {content}")
            f.write(content)
    except OSError as e:
        raise PersistenceError(path, e) from e


def write_node_ip_overrides(
    address,
    kubelet_path: str | None = None,
    crio_path: str | None = None,
) -> list[str]:
    """
    Write the kubelet and CRI-O overrides for the chosen address.

    Args:
        address: The chosen node IP.
        kubelet_path: Kubelet override file (default from config).
        crio_path: CRI-O override file (default from config).

    Returns:
        The paths written, kubelet first.

    Raises:
        PersistenceError: On the first file that cannot be written. A
            kubelet file already written stays on disk.
    """
    kubelet_path = kubelet_path or config.KUBELET_OVERRIDE_PATH
    crio_path = crio_path or config.CRIO_OVERRIDE_PATH

    write_override(kubelet_path, render_kubelet_override(address))
    write_override(crio_path, render_crio_override(address))

    return [kubelet_path, crio_path]
