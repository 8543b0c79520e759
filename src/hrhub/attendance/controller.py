from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, current_employee_id, employee_required, login_required
from ..common.responses import result_response
from ..common.validators import require_date, require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/my", methods=["GET"], endpoint="attendance_my")
    @login_required
    def attendance_my():
        # No role requirement so the first visit can finish identity linking.
        employee_id = current_employee_id()
        if employee_id is None:
            return jsonify({"ok": False, "error": "NotFound", "message": "No employee record is linked to this account."}), 404

        today = container.attendance_tracker.today()
        result = container.attendance_tracker.status(employee_id, today)
        return result_response(result, employee_id=employee_id, date=today.isoformat())

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @employee_required
    def attendance_check_in():
        return result_response(container.attendance_tracker.check_in_now(current_employee_id()))

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @employee_required
    def attendance_check_out():
        return result_response(container.attendance_tracker.check_out_now(current_employee_id()))

    @app.route("/admin/attendance/report", methods=["GET"], endpoint="attendance_report")
    @admin_required
    def attendance_report():
        on = request.args.get("date")
        year = request.args.get("year")
        month = request.args.get("month")

        rows = container.attendance_tracker.report(
            on=require_date(on, "date") if on else None,
            year=require_int(year, "year") if year else None,
            month=require_int(month, "month") if month else None,
        )
        return jsonify(
            {
                "rows": [
                    {
                        "employee_id": r.employee_id,
                        "employee": r.employee_name,
                        "date": r.work_date.isoformat(),
                        "in_time": r.in_time.isoformat() if r.in_time else None,
                        "out_time": r.out_time.isoformat() if r.out_time else None,
                    }
                    for r in rows
                ]
            }
        )
