from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from flask import Flask, request

from ..common.web import body, current_user, date_arg, hr_required, int_arg, login_required, mutation_ok, ok
from ..container import Container


def _history_ui(h) -> dict:
    data = asdict(h)
    data["new_working_days"] = [d.value for d in h.new_working_days]
    data["previous_working_days"] = [d.value for d in h.previous_working_days]
    return data


def register(app: Flask, container: Container) -> None:
    salaries = container.salary_service
    history = container.salary_history_service
    earnings = container.earnings_service

    @app.route("/api/salary", endpoint="my_salary")
    @login_required
    def my_salary():
        return ok([salaries.to_ui(r) for r in salaries.list_for_user(current_user().user_id)])

    @app.route("/api/salary/latest", endpoint="my_latest_salary")
    @login_required
    def my_latest_salary():
        rec = salaries.latest(current_user().user_id)
        return ok(salaries.to_ui(rec) if rec else None)

    @app.route("/api/salary/earnings", endpoint="my_earnings")
    @login_required
    def my_earnings():
        now = datetime.now()
        month = int_arg(request.args.get("month", now.month), "month")
        year = int_arg(request.args.get("year", now.year), "year")
        return ok(asdict(earnings.monthly_earnings(current_user().user_id, month, year)))

    @app.route("/api/salary/history", endpoint="my_salary_history")
    @login_required
    def my_history():
        user_id = current_user().user_id
        pending = history.pending(user_id)
        return ok(
            {
                "history": [_history_ui(h) for h in history.list_for_user(user_id)],
                "pending": _history_ui(pending) if pending else None,
            }
        )

    # HR

    @app.route("/api/hr/salary", endpoint="hr_salary_month")
    @hr_required
    def hr_month():
        now = datetime.now()
        month = int_arg(request.args.get("month", now.month), "month")
        year = int_arg(request.args.get("year", now.year), "year")
        return ok(salaries.month_totals(month, year))

    @app.route("/api/hr/salary", methods=["POST"], endpoint="hr_create_salary")
    @hr_required
    def hr_create():
        data = body()
        result = salaries.create(
            user_id=int_arg(data.get("user_id"), "user_id"),
            month=int_arg(data.get("month"), "month"),
            year=int_arg(data.get("year"), "year"),
            base_salary=data.get("base_salary", "0"),
            allowances=data.get("allowances", "0"),
            deductions=data.get("deductions", "0"),
            bonus=data.get("bonus", "0"),
            working_days=int_arg(data.get("working_days"), "working_days"),
            present_days=int_arg(data.get("present_days"), "present_days"),
            leaves_taken=int_arg(data.get("leaves_taken", 0), "leaves_taken"),
            created_by=current_user().user_id,
            notes=data.get("notes"),
        )
        return mutation_ok(result, salaries.to_ui(result.data), message="Salary record created", status=201)

    @app.route("/api/hr/salary/<int:record_id>", methods=["PATCH"], endpoint="hr_update_salary")
    @hr_required
    def hr_update(record_id: int):
        result = salaries.update(record_id, **body())
        return mutation_ok(result, salaries.to_ui(result.data), message="Salary record updated")

    @app.route("/api/hr/salary/<int:record_id>/status", methods=["POST"], endpoint="hr_salary_status")
    @hr_required
    def hr_status(record_id: int):
        data = body()
        result = salaries.set_status(
            record_id,
            data.get("status", ""),
            approved_by=current_user().user_id,
            payment_method=data.get("payment_method"),
            override=bool(data.get("override", False)),
        )
        return mutation_ok(result, salaries.to_ui(result.data), message="Salary status updated")

    @app.route("/api/hr/salary/<int:record_id>", methods=["DELETE"], endpoint="hr_delete_salary")
    @hr_required
    def hr_delete(record_id: int):
        return mutation_ok(salaries.delete(record_id), message="Salary record deleted")

    @app.route("/api/hr/employees/<int:user_id>/salary", methods=["POST"], endpoint="hr_change_salary")
    @hr_required
    def hr_change_salary(user_id: int):
        data = body()
        result = history.change_salary(
            user_id=user_id,
            base_salary=data.get("base_salary", "0"),
            working_days=data.get("working_days") or [],
            daily_hours=data.get("daily_hours", 8),
            changed_by=current_user().user_id,
            reason=data.get("reason"),
            notes=data.get("notes"),
            effective_from=date_arg(data.get("effective_from"), "effective_from", required=False),
        )
        message = "Salary updated" if result.data.is_applied else "Salary change scheduled"
        return mutation_ok(result, _history_ui(result.data), message=message, status=201)

    @app.route("/api/hr/salary-history", endpoint="hr_salary_history")
    @hr_required
    def hr_history():
        args = request.args
        rows = history.list_all(
            user_id=int_arg(args["user_id"], "user_id") if args.get("user_id") else None,
            from_date=date_arg(args.get("from"), "from", required=False),
            to_date=date_arg(args.get("to"), "to", required=False),
        )
        return ok([_history_ui(h) for h in rows])

    @app.route("/api/hr/salary-history/apply", methods=["POST"], endpoint="hr_apply_salary_changes")
    @hr_required
    def hr_apply():
        result = history.apply_pending()
        return mutation_ok(result, {"applied": result.data}, message=f"Applied {len(result.data)} change(s)")

    @app.route("/api/hr/salary-history/<int:history_id>", methods=["PATCH"], endpoint="hr_salary_history_notes")
    @hr_required
    def hr_history_notes(history_id: int):
        result = history.update_notes(history_id, body().get("notes"))
        return mutation_ok(result, _history_ui(result.data))

    @app.route("/api/hr/salary-history/<int:history_id>", methods=["DELETE"], endpoint="hr_delete_salary_history")
    @hr_required
    def hr_history_delete(history_id: int):
        return mutation_ok(history.delete(history_id), message="Salary change deleted")

    @app.route("/api/hr/employees/<int:user_id>/earnings", endpoint="hr_employee_earnings")
    @hr_required
    def hr_earnings(user_id: int):
        now = datetime.now()
        month = int_arg(request.args.get("month", now.month), "month")
        year = int_arg(request.args.get("year", now.year), "year")
        return ok(asdict(earnings.monthly_earnings(user_id, month, year)))
