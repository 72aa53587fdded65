from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.query_keys import MutationResult, UserKeys, WiFiKeys, mutation_result
from ..common.validators import clean_optional, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import OfficeWiFiNetwork, WiFiVerificationResult
from .network import NetworkInfoProvider
from .repository import WiFiNetworkRepository

logger = logging.getLogger(__name__)

PERMISSION_REQUIRED_MESSAGE = "Location permission required to verify WiFi connection"


class WiFiVerificationService:
    """Checks presence on an office network and administers the network list."""

    def __init__(self, networks: WiFiNetworkRepository, users: UserRepository):
        self._networks = networks
        self._users = users

    def _degraded(self, *, is_required: bool, error: str, current_ssid: Optional[str] = None) -> WiFiVerificationResult:
        return WiFiVerificationResult(
            current_ssid=current_ssid,
            is_verified=False,
            office_networks=(),
            is_required=is_required,
            error=error,
        )

    def verify(self, user_id: int, organization_id: int, device: NetworkInfoProvider) -> WiFiVerificationResult:
        """Never raises; failures come back in ``error``.

        A user without the requirement passes without touching the device.
        An unknown user, or a failed requirement lookup, is reported as not
        required and not verified.
        """
        try:
            user = self._users.get_by_id(int(user_id))
        except Exception:
            logger.exception("WiFi requirement lookup failed for user %s", user_id)
            return self._degraded(is_required=False, error="Failed to check WiFi requirements")
        if not user:
            return self._degraded(is_required=False, error="Failed to check WiFi requirements")

        if not user.wifi_verification_required:
            return WiFiVerificationResult(current_ssid=None, is_verified=True, is_required=False)

        try:
            permitted = device.has_location_permission()
        except Exception:
            logger.exception("Location permission check failed for user %s", user_id)
            permitted = False
        if not permitted:
            return WiFiVerificationResult(
                current_ssid=None,
                is_verified=False,
                is_required=True,
                error=PERMISSION_REQUIRED_MESSAGE,
            )

        try:
            current_ssid = device.current_ssid()
        except Exception:
            logger.exception("Reading the current SSID failed for user %s", user_id)
            return self._degraded(is_required=True, error="Failed to read current WiFi network")

        try:
            office = tuple(n.ssid for n in self._networks.list_for_organization(int(organization_id), active_only=True))
        except Exception:
            logger.exception("Fetching office networks failed for organization %s", organization_id)
            return self._degraded(is_required=True, error="Failed to fetch office networks", current_ssid=current_ssid)

        verified = bool(current_ssid) and current_ssid in office
        logger.info("WiFi check user=%s ssid=%r verified=%s", user_id, current_ssid, verified)
        return WiFiVerificationResult(
            current_ssid=current_ssid,
            is_verified=verified,
            office_networks=office,
            is_required=True,
        )

    # Office-network administration (HR)

    def list_networks(self, organization_id: int, *, active_only: bool = False) -> Sequence[OfficeWiFiNetwork]:
        return self._networks.list_for_organization(int(organization_id), active_only=active_only)

    def add_network(
        self,
        *,
        organization_id: int,
        ssid: str,
        created_by: int,
        description: Optional[str] = None,
    ) -> MutationResult[OfficeWiFiNetwork]:
        ssid = require_non_empty(ssid, "SSID")
        if self._networks.get_by_ssid(int(organization_id), ssid):
            raise ValidationError("This WiFi network is already registered")

        network_id = self._networks.create(
            organization_id=int(organization_id),
            ssid=ssid,
            description=clean_optional(description),
            created_by=int(created_by),
        )
        logger.info("Added office network %s for organization %s", network_id, organization_id)
        return mutation_result(self._load(network_id), [WiFiKeys.networks(int(organization_id))])

    def update_network(self, network_id: int, **fields) -> MutationResult[OfficeWiFiNetwork]:
        network = self._load(network_id)
        if "ssid" in fields:
            fields["ssid"] = require_non_empty(fields["ssid"], "SSID")
            other = self._networks.get_by_ssid(network.organization_id, fields["ssid"])
            if other and other.network_id != network.network_id:
                raise ValidationError("This WiFi network is already registered")
        if "description" in fields:
            fields["description"] = clean_optional(fields["description"])

        self._networks.update(network.network_id, **fields)
        logger.info("Updated office network %s", network.network_id)
        return mutation_result(self._load(network.network_id), [WiFiKeys.networks(network.organization_id)])

    def delete_network(self, network_id: int) -> MutationResult[None]:
        network = self._load(network_id)
        self._networks.delete(network.network_id)
        logger.info("Deleted office network %s", network.network_id)
        return mutation_result(None, [WiFiKeys.networks(network.organization_id)])

    def set_verification_required(self, user_id: int, *, required: bool) -> MutationResult[None]:
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("Employee not found")
        self._users.set_wifi_verification_required(int(user_id), required=bool(required))
        logger.info("User %s wifi_verification_required=%s", user_id, bool(required))
        return mutation_result(
            None,
            [WiFiKeys.requirement(int(user_id)), UserKeys.all, UserKeys.detail(int(user_id))],
        )

    def _load(self, network_id: int) -> OfficeWiFiNetwork:
        network = self._networks.get_by_id(int(network_id))
        if not network:
            raise NotFoundError("WiFi network not found")
        return network
