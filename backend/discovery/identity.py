"""
Host identity resolution.

Finds the name and primary non-loopback IPv4 address that the discovery
beacon advertises to trackpad clients.
"""

import ipaddress
import logging
import socket

import psutil

from discovery.models import LOOPBACK_FALLBACK_IP, HostIdentity

logger = logging.getLogger(__name__)


def resolve_local_ipv4() -> str:
    """
    Return the first IPv4, non-loopback address of any local interface.

    Falls back to 127.0.0.1 when none exists, which means "no usable
    network" rather than a reachable address.
    """
    try:
        interfaces = psutil.net_if_addrs()
    except OSError as e:
        logger.warning(f"Failed to enumerate network interfaces: {e}")
        return LOOPBACK_FALLBACK_IP

    for if_name, addresses in interfaces.items():
        for addr in addresses:
            if addr.family != socket.AF_INET:
                continue
            try:
                if ipaddress.IPv4Address(addr.address).is_loopback:
                    continue
            except ValueError:
                continue
            logger.debug(f"Using {addr.address} from interface {if_name}")
            return addr.address

    logger.warning("No non-loopback IPv4 interface found, host will not be reachable")
    return LOOPBACK_FALLBACK_IP


def resolve_host_identity(name: str | None = None) -> HostIdentity:
    """Resolve the identity advertised by this host."""
    identity = HostIdentity(
        name=name or socket.gethostname(),
        ip=resolve_local_ipv4(),
    )
    logger.info(f"Resolved host identity: {identity.name}@{identity.ip}")
    return identity
