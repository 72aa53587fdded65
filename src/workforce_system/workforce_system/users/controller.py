from __future__ import annotations

from flask import Flask, request

from ..common.web import body, current_user, date_arg, hr_required, login_required, mutation_ok, ok, session_provider
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def _role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Invalid role")


def register(app: Flask, container: Container) -> None:
    users = container.user_service

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = body()
        auth = container.auth_service.sign_in(session_provider(), data.get("email", ""), data.get("password", ""))
        return ok(
            {
                "user_id": auth.user_id,
                "full_name": auth.full_name,
                "role": auth.role.value,
                "organization_id": auth.organization_id,
            },
            message="Signed in",
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        result = container.auth_service.sign_out(session_provider())
        return mutation_ok(result, message="Signed out")

    @app.route("/api/auth/password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        data = body()
        container.auth_service.change_password(
            current_user().user_id,
            current_password=data.get("current_password", ""),
            new_password=data.get("new_password", ""),
        )
        return ok(message="Password changed")

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        return ok(users.to_ui(users.get(current_user().user_id)))

    @app.route("/api/hr/employees", endpoint="hr_employees")
    @hr_required
    def list_employees():
        active_only = request.args.get("active_only", "0") in {"1", "true", "yes"}
        members = users.list_for_organization(current_user().organization_id or 0, active_only=active_only)
        return ok([users.to_ui(u) for u in members])

    @app.route("/api/hr/employees", methods=["POST"], endpoint="hr_add_employee")
    @hr_required
    def add_employee():
        data = body()
        result = users.create_employee(
            email=data.get("email", ""),
            full_name=data.get("full_name", ""),
            password=data.get("password", ""),
            organization_id=current_user().organization_id or 0,
            role=_role(data.get("role", Role.EMPLOYEE.value)),
            employee_code=data.get("employee_code"),
            working_days=data.get("working_days"),
            daily_working_hours=data.get("daily_working_hours", 8),
            base_salary=data.get("base_salary", "0"),
            wifi_verification_required=bool(data.get("wifi_verification_required", True)),
            phone=data.get("phone"),
            department=data.get("department"),
            designation=data.get("designation"),
            date_of_joining=date_arg(data.get("date_of_joining"), "date_of_joining", required=False),
        )
        return mutation_ok(result, users.to_ui(result.data), message="Employee added", status=201)

    @app.route("/api/hr/employees/<int:user_id>", methods=["PATCH"], endpoint="hr_update_employee")
    @hr_required
    def update_employee(user_id: int):
        data = body()
        allowed = ("full_name", "phone", "department", "designation", "employee_code")
        fields = {k: data[k] for k in allowed if k in data}
        if "role" in data:
            fields["role"] = _role(data["role"])
        if "date_of_joining" in data:
            fields["date_of_joining"] = date_arg(data["date_of_joining"], "date_of_joining", required=False)

        result = users.update_profile(user_id, **fields)
        return mutation_ok(result, users.to_ui(result.data), message="Employee updated")

    @app.route("/api/hr/employees/<int:user_id>/active", methods=["POST"], endpoint="hr_set_active")
    @hr_required
    def set_active(user_id: int):
        result = users.set_active(user_id, is_active=bool(body().get("is_active", True)))
        return mutation_ok(result, users.to_ui(result.data))

    @app.route("/api/hr/employees/<int:user_id>", methods=["DELETE"], endpoint="hr_delete_employee")
    @hr_required
    def delete_employee(user_id: int):
        result = users.delete_employee(current_role=current_user().role, user_id=user_id)
        return mutation_ok(result, message="Employee deleted")
