from __future__ import annotations

from dataclasses import asdict

from flask import Flask

from ..common.web import body, current_user, hr_required, login_required, mutation_ok, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.organization_service

    @app.route("/api/organization", endpoint="my_organization")
    @login_required
    def my_organization():
        return ok(asdict(service.get(current_user().organization_id or 0)))

    @app.route("/api/hr/organization", methods=["PATCH"], endpoint="hr_update_organization")
    @hr_required
    def update_organization():
        data = body()
        fields = {k: data[k] for k in ("name", "description") if k in data}
        result = service.update(current_user().organization_id or 0, **fields)
        return mutation_ok(result, asdict(result.data), message="Organization updated")

    @app.route("/api/hr/organization/stats", endpoint="hr_organization_stats")
    @hr_required
    def stats():
        return ok(asdict(service.stats(current_user().organization_id or 0)))
