from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, current_employee_id, employee_required
from ..common.responses import result_response
from ..common.validators import optional_text, require_date, require_int
from ..container import Container
from .model import LeaveRow


def _row_json(r: LeaveRow) -> dict:
    return {
        "leave_id": r.leave_id,
        "employee_id": r.employee_id,
        "employee": r.employee_name,
        "leave_type": r.leave_type_name,
        "start_date": r.start_date.isoformat(),
        "end_date": r.end_date.isoformat(),
        "days": str(r.days),
        "status": r.status.value,
        "reason": r.reason,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/leaves/types", methods=["GET"], endpoint="leave_types")
    @employee_required
    def leave_types():
        return jsonify(
            {
                "types": [
                    {"leave_type_id": t.leave_type_id, "name": t.name, "annual_quota": str(t.annual_quota)}
                    for t in container.leave_service.list_types()
                ]
            }
        )

    @app.route("/leaves/my", methods=["GET"], endpoint="my_leaves")
    @employee_required
    def my_leaves():
        rows = container.leave_service.list_for_employee(current_employee_id())
        return jsonify({"leaves": [_row_json(r) for r in rows]})

    @app.route("/leaves", methods=["POST"], endpoint="apply_leave")
    @employee_required
    def apply_leave():
        form = request.get_json(silent=True) or request.form
        result = container.leave_service.submit(
            employee_id=current_employee_id(),
            leave_type_id=require_int(form.get("leave_type_id"), "leave_type_id"),
            start=require_date(form.get("start_date"), "start_date"),
            end=require_date(form.get("end_date"), "end_date"),
            reason=optional_text(form.get("reason")),
        )
        leave_id = result.leave.leave_id if result.ok else None
        return result_response(result, created=True, leave_id=leave_id)

    @app.route("/admin/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    @admin_required
    def pending_leaves():
        return jsonify({"leaves": [_row_json(r) for r in container.leave_service.list_pending()]})

    @app.route("/admin/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="approve_leave")
    @admin_required
    def approve_leave(leave_id: int):
        # Approver may be an admin with no employee record.
        return result_response(container.leave_service.approve(leave_id, current_employee_id()))

    @app.route("/admin/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="reject_leave")
    @admin_required
    def reject_leave(leave_id: int):
        return result_response(container.leave_service.reject(leave_id))
