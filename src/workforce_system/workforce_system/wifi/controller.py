from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.web import body, current_user, hr_required, login_required, mutation_ok, ok
from ..container import Container
from .network import StaticNetworkInfo


def register(app: Flask, container: Container) -> None:
    service = container.wifi_service

    @app.route("/api/wifi/verify", methods=["POST"], endpoint="wifi_verify")
    @login_required
    def verify():
        data = body()
        user = current_user()
        device = StaticNetworkInfo(data.get("ssid"), permission_granted=bool(data.get("location_permission", True)))
        return ok(asdict(service.verify(user.user_id, user.organization_id or 0, device)))

    @app.route("/api/hr/wifi-networks", endpoint="hr_wifi_networks")
    @hr_required
    def networks():
        active_only = request.args.get("active_only", "0") in {"1", "true", "yes"}
        rows = service.list_networks(current_user().organization_id or 0, active_only=active_only)
        return ok([asdict(n) for n in rows])

    @app.route("/api/hr/wifi-networks", methods=["POST"], endpoint="hr_add_wifi_network")
    @hr_required
    def add_network():
        data = body()
        user = current_user()
        result = service.add_network(
            organization_id=user.organization_id or 0,
            ssid=data.get("ssid", ""),
            created_by=user.user_id,
            description=data.get("description"),
        )
        return mutation_ok(result, asdict(result.data), message="WiFi network added", status=201)

    @app.route("/api/hr/wifi-networks/<int:network_id>", methods=["PATCH"], endpoint="hr_update_wifi_network")
    @hr_required
    def update_network(network_id: int):
        data = body()
        fields = {k: data[k] for k in ("ssid", "description", "is_active") if k in data}
        result = service.update_network(network_id, **fields)
        return mutation_ok(result, asdict(result.data), message="WiFi network updated")

    @app.route("/api/hr/wifi-networks/<int:network_id>", methods=["DELETE"], endpoint="hr_delete_wifi_network")
    @hr_required
    def delete_network(network_id: int):
        return mutation_ok(service.delete_network(network_id), message="WiFi network deleted")

    @app.route("/api/hr/employees/<int:user_id>/wifi-required", methods=["POST"], endpoint="hr_wifi_required")
    @hr_required
    def set_required(user_id: int):
        result = service.set_verification_required(user_id, required=bool(body().get("required", True)))
        return mutation_ok(result, message="WiFi requirement updated")
