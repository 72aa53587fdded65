from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class OfficeWiFiNetwork:
    network_id: int
    organization_id: int
    ssid: str
    created_by: int
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WiFiVerificationResult:
    """Outcome of one office-network check, stored with the attendance action."""

    current_ssid: Optional[str]
    is_verified: bool
    office_networks: tuple[str, ...] = ()
    is_required: bool = False
    error: Optional[str] = None
