from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import OfficeWiFiNetwork


class WiFiNetworkRepository(Protocol):
    def get_by_id(self, network_id: int) -> Optional[OfficeWiFiNetwork]:
        raise NotImplementedError

    def get_by_ssid(self, organization_id: int, ssid: str) -> Optional[OfficeWiFiNetwork]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: int, *, active_only: bool = False) -> Sequence[OfficeWiFiNetwork]:
        raise NotImplementedError

    def create(self, *, organization_id: int, ssid: str, description: Optional[str], created_by: int) -> int:
        raise NotImplementedError

    def update(self, network_id: int, **fields) -> bool:
        """Update any of ssid, description, is_active."""

        raise NotImplementedError

    def delete(self, network_id: int) -> bool:
        raise NotImplementedError
