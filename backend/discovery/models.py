"""Pydantic models for host discovery."""

from pydantic import BaseModel, ConfigDict

LOOPBACK_FALLBACK_IP = "127.0.0.1"


class HostIdentity(BaseModel):
    """Host name and primary IPv4 address, resolved once at startup."""
    model_config = ConfigDict(frozen=True)

    name: str
    ip: str

    @property
    def is_loopback_fallback(self) -> bool:
        """True when no usable network interface was found."""
        return self.ip == LOOPBACK_FALLBACK_IP


class HostAnnouncement(BaseModel):
    """The JSON payload broadcast over UDP."""
    model_config = ConfigDict(frozen=True)

    name: str
    ip: str
    port: int
