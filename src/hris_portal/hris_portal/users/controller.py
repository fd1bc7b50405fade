from __future__ import annotations

from flask import Flask, g, request, session

from ..common.web import handles_errors, json_ok, make_guards, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.session_resolver)

    @app.route("/auth/sign-up", methods=["POST"], endpoint="sign_up")
    @handles_errors("System error while signing up")
    def sign_up():
        data = request_data()
        identity = container.identity_gateway.sign_up(
            data.get("email", ""),
            data.get("password", ""),
            {
                "name": data.get("name", ""),
                "employee_id": data.get("employee_id", ""),
                "department": data.get("department", ""),
                "position": data.get("position", ""),
            },
        )
        session.clear()
        session["uid"] = identity.uid
        return json_ok(201, actor=container.session_resolver.resolve(identity.uid))

    @app.route("/auth/sign-in", methods=["POST"], endpoint="sign_in")
    @handles_errors("System error while signing in")
    def sign_in():
        data = request_data()
        identity, _ = container.identity_gateway.sign_in(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["uid"] = identity.uid
        return json_ok(actor=container.session_resolver.resolve(identity.uid))

    @app.route("/auth/sign-out", methods=["POST"], endpoint="sign_out")
    @handles_errors("System error while signing out")
    def sign_out():
        session.clear()
        container.identity_gateway.sign_out()
        return json_ok()

    @app.route("/me", methods=["GET"], endpoint="me")
    @handles_errors("System error while loading your profile")
    @login_required
    def me():
        return json_ok(actor=g.actor)

    @app.route("/admin/employees", methods=["GET"], endpoint="admin_employees")
    @handles_errors("System error while loading employees")
    @admin_required
    def admin_employees():
        term = request.args.get("q")
        if term:
            employees = container.user_service.search_employees(term)
        else:
            employees = container.user_service.list_employees()
        return json_ok(employees=employees)

    @app.route("/admin/employees", methods=["POST"], endpoint="add_employee")
    @handles_errors("System error while adding employee")
    @admin_required
    def add_employee():
        data = request_data()
        employee = container.user_service.add_employee(
            g.actor,
            email=data.get("email", ""),
            password=data.get("password", ""),
            name=data.get("name", ""),
            employee_id=data.get("employee_id", ""),
            department=data.get("department", ""),
            position=data.get("position", ""),
            role=data.get("role") or "employee",
        )
        return json_ok(201, employee=employee)

    @app.route("/admin/employees/<uid>", methods=["PATCH"], endpoint="update_employee")
    @handles_errors("System error while updating employee")
    @admin_required
    def update_employee(uid: str):
        employee = container.user_service.update_employee(g.actor, uid, request_data())
        return json_ok(employee=employee)

    @app.route("/admin/employees/<uid>", methods=["DELETE"], endpoint="delete_employee")
    @handles_errors("System error while deleting employee")
    @admin_required
    def delete_employee(uid: str):
        container.user_service.delete_employee(g.actor, uid)
        return json_ok()
