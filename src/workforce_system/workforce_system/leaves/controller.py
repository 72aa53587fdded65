from __future__ import annotations

from flask import Flask

from ..common.web import body, current_user, date_arg, hr_required, login_required, mutation_ok, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave", endpoint="my_leave")
    @login_required
    def my_leave():
        return ok([service.to_ui(r) for r in service.list_for_user(current_user().user_id)])

    @app.route("/api/leave", methods=["POST"], endpoint="request_leave")
    @login_required
    def request_leave():
        data = body()
        result = service.create(
            user_id=current_user().user_id,
            leave_type=data.get("leave_type", ""),
            start_date=date_arg(data.get("start_date"), "start_date"),
            end_date=date_arg(data.get("end_date"), "end_date"),
            reason=data.get("reason", ""),
        )
        return mutation_ok(result, service.to_ui(result.data), message="Leave requested", status=201)

    @app.route("/api/leave/<int:request_id>", methods=["PATCH"], endpoint="update_leave")
    @login_required
    def update_leave(request_id: int):
        data = body()
        result = service.update(
            request_id,
            user_id=current_user().user_id,
            leave_type=data.get("leave_type"),
            start_date=date_arg(data.get("start_date"), "start_date", required=False),
            end_date=date_arg(data.get("end_date"), "end_date", required=False),
            reason=data.get("reason"),
        )
        return mutation_ok(result, service.to_ui(result.data), message="Leave request updated")

    @app.route("/api/leave/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_leave")
    @login_required
    def cancel_leave(request_id: int):
        result = service.cancel(request_id, user_id=current_user().user_id)
        return mutation_ok(result, service.to_ui(result.data), message="Leave request cancelled")

    # HR

    @app.route("/api/hr/leave/pending", endpoint="hr_pending_leave")
    @hr_required
    def pending():
        reqs = service.list_pending(organization_id=current_user().organization_id)
        return ok([service.to_ui(r) for r in reqs])

    @app.route("/api/hr/leave/<int:request_id>/review", methods=["POST"], endpoint="hr_review_leave")
    @hr_required
    def review(request_id: int):
        data = body()
        result = service.review(
            request_id,
            status=data.get("status", ""),
            reviewed_by=current_user().user_id,
            notes=data.get("notes"),
        )
        return mutation_ok(result, service.to_ui(result.data), message=f"Leave {result.data.status.value}")

    @app.route("/api/hr/leave/<int:request_id>", methods=["DELETE"], endpoint="hr_delete_leave")
    @hr_required
    def delete(request_id: int):
        return mutation_ok(service.delete(request_id), message="Leave request deleted")
