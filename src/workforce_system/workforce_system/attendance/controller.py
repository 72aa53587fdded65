from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, datetime

from flask import Flask, request

from ..common.web import body, current_user, date_arg, datetime_arg, hr_required, int_arg, login_required, mutation_ok, ok
from ..container import Container
from ..wifi.network import StaticNetworkInfo

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _verify_wifi(data: dict):
        user = current_user()
        device = StaticNetworkInfo(
            data.get("ssid"),
            permission_granted=bool(data.get("location_permission", True)),
        )
        return container.wifi_service.verify(user.user_id, user.organization_id or 0, device)

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        data = body()
        wifi = _verify_wifi(data)
        result = service.check_in(current_user().user_id, notes=data.get("notes"), wifi=wifi)
        return mutation_ok(
            result,
            {"record": service.to_ui(result.data), "wifi": asdict(wifi)},
            message="Checked in",
            status=201,
        )

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        data = body()
        wifi = _verify_wifi(data)
        result = service.check_out(current_user().user_id, notes=data.get("notes"), wifi=wifi)
        return mutation_ok(
            result,
            {"record": service.to_ui(result.data), "wifi": asdict(wifi)},
            message="Checked out",
        )

    @app.route("/api/attendance/today", endpoint="attendance_today")
    @login_required
    def today():
        rec = service.get_today(current_user().user_id, date.today())
        return ok(service.to_ui(rec) if rec else None)

    @app.route("/api/attendance", endpoint="attendance_history")
    @login_required
    def history():
        end = date_arg(request.args.get("end"), "end", required=False) or date.today()
        start = date_arg(request.args.get("start"), "start", required=False) or end.replace(day=1)
        records = service.list_range(current_user().user_id, start, end)
        return ok([service.to_ui(r) for r in records])

    @app.route("/api/attendance/monthly", endpoint="attendance_monthly")
    @login_required
    def monthly():
        now = datetime.now()
        month = int_arg(request.args.get("month", now.month), "month")
        year = int_arg(request.args.get("year", now.year), "year")
        summary = service.monthly_summary(current_user().user_id, month, year)
        return ok(
            {
                "records": [service.to_ui(r) for r in summary.records],
                "total_days": summary.total_days,
                "valid_days": summary.valid_days,
                "total_hours": summary.total_hours,
                "avg_hours": summary.avg_hours,
                "working_days": summary.working_days,
                "attendance_percentage": summary.attendance_percentage,
            }
        )

    # HR

    @app.route("/api/hr/attendance", endpoint="hr_attendance_list")
    @hr_required
    def hr_list():
        args = request.args
        records = service.list_all(
            start_date=date_arg(args.get("start_date"), "start_date", required=False),
            end_date=date_arg(args.get("end_date"), "end_date", required=False),
            user_id=int_arg(args["user_id"], "user_id") if args.get("user_id") else None,
            work_date=date_arg(args.get("date"), "date", required=False),
        )
        return ok([service.to_ui(r) for r in records])

    @app.route("/api/hr/attendance", methods=["POST"], endpoint="hr_attendance_mark")
    @hr_required
    def hr_mark():
        data = body()
        result = service.mark_attendance(
            user_id=int_arg(data.get("user_id"), "user_id"),
            work_date=date_arg(data.get("date"), "date"),
            check_in=datetime_arg(data.get("check_in"), "check_in"),
            check_out=datetime_arg(data.get("check_out"), "check_out", required=False),
            marked_by=current_user().user_id,
            notes=data.get("notes"),
        )
        return mutation_ok(result, service.to_ui(result.data), message="Attendance saved")

    @app.route("/api/hr/attendance/<int:record_id>", methods=["PATCH"], endpoint="hr_attendance_update")
    @hr_required
    def hr_update(record_id: int):
        data = body()
        changes = {}
        if "check_in" in data:
            changes["check_in"] = datetime_arg(data["check_in"], "check_in", required=False)
        if "check_out" in data:
            changes["check_out"] = datetime_arg(data["check_out"], "check_out", required=False)
        if "notes" in data:
            changes["notes"] = data["notes"]
        if "is_valid_day" in data:
            changes["is_valid_day"] = bool(data["is_valid_day"])

        result = service.update_attendance(record_id, **changes)
        return mutation_ok(result, service.to_ui(result.data), message="Attendance updated")

    @app.route("/api/hr/attendance/<int:record_id>", methods=["DELETE"], endpoint="hr_attendance_delete")
    @hr_required
    def hr_delete(record_id: int):
        result = service.delete_attendance(record_id)
        return mutation_ok(result, message="Attendance deleted")

    @app.route("/api/hr/attendance/stats", endpoint="hr_attendance_stats")
    @hr_required
    def hr_stats():
        end = date_arg(request.args.get("end"), "end", required=False) or date.today()
        start = date_arg(request.args.get("start"), "start", required=False) or end.replace(day=1)
        return ok(asdict(service.stats(start, end)))
