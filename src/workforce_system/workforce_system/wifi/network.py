from __future__ import annotations

from typing import Optional, Protocol


class NetworkInfoProvider(Protocol):
    """Device-side view of the current network.

    Reading the SSID needs location permission on most devices, so callers
    ask for it first.
    """

    def has_location_permission(self) -> bool:
        raise NotImplementedError

    def current_ssid(self) -> Optional[str]:
        raise NotImplementedError


class StaticNetworkInfo(NetworkInfoProvider):
    """Network info reported by the client with its request."""

    def __init__(self, ssid: Optional[str], *, permission_granted: bool = True):
        self._ssid = (ssid or "").strip() or None
        self._permission_granted = permission_granted

    def has_location_permission(self) -> bool:
        return self._permission_granted

    def current_ssid(self) -> Optional[str]:
        return self._ssid
