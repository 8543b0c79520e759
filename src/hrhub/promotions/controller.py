from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required
from ..common.responses import result_response
from ..common.validators import optional_text, require_date, require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/promotions", methods=["POST"], endpoint="create_promotion")
    @admin_required
    def create_promotion():
        form = request.get_json(silent=True) or request.form
        result = container.promotion_applier.apply(
            employee_id=require_int(form.get("employee_id"), "employee_id"),
            old_designation_id=require_int(form.get("old_designation_id"), "old_designation_id"),
            new_designation_id=require_int(form.get("new_designation_id"), "new_designation_id"),
            effective_date=require_date(form.get("effective_date"), "effective_date"),
            notes=optional_text(form.get("notes")),
        )
        promotion_id = result.promotion.promotion_id if result.ok else None
        return result_response(result, created=True, promotion_id=promotion_id)

    @app.route("/admin/promotions/<int:employee_id>", methods=["GET"], endpoint="promotion_history")
    @admin_required
    def promotion_history(employee_id: int):
        history = container.promotion_applier.history(employee_id)
        if history is None:
            return jsonify({"ok": False, "error": "NotFound", "message": "Employee not found."}), 404
        return jsonify(
            {
                "employee_id": history.employee_id,
                "employee_name": history.employee_name,
                "promotions": [
                    {
                        "promotion_id": r.promotion_id,
                        "effective_date": r.effective_date.isoformat(),
                        "old_designation": r.old_designation,
                        "new_designation": r.new_designation,
                        "notes": r.notes,
                    }
                    for r in history.promotions
                ],
            }
        )

    @app.route("/admin/promotions/<int:employee_id>/new", methods=["GET"], endpoint="promotion_form")
    @admin_required
    def promotion_form(employee_id: int):
        form = container.promotion_applier.prepare(employee_id)
        if not form.ok:
            return result_response(form)
        return jsonify(
            {
                "employee_id": form.employee_id,
                "employee_name": form.employee_name,
                "current_designation_id": form.current_designation_id,
                "current_designation": form.current_designation,
                "last_promotion_date": form.last_promotion_date.isoformat() if form.last_promotion_date else None,
                "designations": [
                    {"designation_id": d.designation_id, "title": d.title} for d in form.designations
                ],
            }
        )
