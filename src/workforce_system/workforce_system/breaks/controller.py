from __future__ import annotations

from flask import Flask

from ..attendance import calculations
from ..common.web import body, current_user, datetime_arg, hr_required, int_arg, login_required, mutation_ok, ok
from ..container import Container
from ..core.exceptions import AuthorizationError, NotFoundError


def register(app: Flask, container: Container) -> None:
    service = container.break_service

    @app.route("/api/breaks", endpoint="my_breaks")
    @login_required
    def my_breaks():
        user_id = current_user().user_id
        service.reject_expired(user_id)
        return ok([service.to_ui(b) for b in service.list_for_user(user_id)])

    @app.route("/api/breaks", methods=["POST"], endpoint="request_break")
    @login_required
    def request_break():
        data = body()
        result = service.create(
            user_id=current_user().user_id,
            attendance_record_id=int_arg(data.get("attendance_record_id"), "attendance_record_id"),
            start=datetime_arg(data.get("start"), "start", required=False),
            end=datetime_arg(data.get("end"), "end", required=False),
            reason=data.get("reason"),
        )
        return mutation_ok(result, service.to_ui(result.data), message="Break requested", status=201)

    @app.route("/api/breaks/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_break")
    @login_required
    def cancel_break(request_id: int):
        result = service.cancel(request_id, user_id=current_user().user_id)
        return mutation_ok(result, service.to_ui(result.data), message="Break request cancelled")

    @app.route("/api/breaks/<int:request_id>", methods=["DELETE"], endpoint="delete_break")
    @login_required
    def delete_break(request_id: int):
        return mutation_ok(service.delete_pending(request_id, user_id=current_user().user_id), message="Break request deleted")

    @app.route("/api/attendance/<int:record_id>/breaks", endpoint="attendance_breaks")
    @login_required
    def attendance_breaks(record_id: int):
        user = current_user()
        record = container.attendance_service.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if record.user_id != user.user_id and not user.role.is_staff_manager:
            raise AuthorizationError("You do not have permission")

        breaks = service.list_for_attendance(record.record_id)
        timeline = service.active_or_upcoming(record.record_id)
        return ok(
            {
                "breaks": [service.to_ui(b) for b in breaks],
                "active": service.to_ui(timeline.active) if timeline.active else None,
                "upcoming": service.to_ui(timeline.upcoming) if timeline.upcoming else None,
                "summary": calculations.format_break_summary(breaks),
                "net_hours": service.net_hours(record),
            }
        )

    # HR

    @app.route("/api/hr/breaks/pending", endpoint="hr_pending_breaks")
    @hr_required
    def pending():
        return ok([service.to_ui(b) for b in service.list_pending()])

    @app.route("/api/hr/breaks/<int:request_id>/approve", methods=["POST"], endpoint="hr_approve_break")
    @hr_required
    def approve(request_id: int):
        data = body()
        result = service.approve(
            request_id,
            start=datetime_arg(data.get("start"), "start"),
            end=datetime_arg(data.get("end"), "end"),
            reviewed_by=current_user().user_id,
            notes=data.get("notes"),
        )
        return mutation_ok(result, service.to_ui(result.data), message="Break approved")

    @app.route("/api/hr/breaks/<int:request_id>/reject", methods=["POST"], endpoint="hr_reject_break")
    @hr_required
    def reject(request_id: int):
        result = service.reject(request_id, reviewed_by=current_user().user_id, notes=body().get("notes"))
        return mutation_ok(result, service.to_ui(result.data), message="Break rejected")

    @app.route("/api/hr/breaks/<int:request_id>", methods=["PATCH"], endpoint="hr_update_break")
    @hr_required
    def update(request_id: int):
        data = body()
        result = service.update_approved(
            request_id,
            start=datetime_arg(data.get("start"), "start"),
            end=datetime_arg(data.get("end"), "end"),
            updated_by=current_user().user_id,
            notes=data.get("notes"),
        )
        return mutation_ok(result, service.to_ui(result.data), message="Break updated")

    @app.route("/api/hr/breaks", methods=["POST"], endpoint="hr_assign_break")
    @hr_required
    def assign():
        data = body()
        result = service.assign(
            attendance_record_id=int_arg(data.get("attendance_record_id"), "attendance_record_id"),
            start=datetime_arg(data.get("start"), "start"),
            end=datetime_arg(data.get("end"), "end"),
            assigned_by=current_user().user_id,
            notes=data.get("notes"),
        )
        return mutation_ok(result, service.to_ui(result.data), message="Break assigned", status=201)
