from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.auth import login_required, session_roles
from ..container import Container
from .model import Principal

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.before_request
    def bootstrap_identity():
        # Runs the link once per session; the result is cached in the cookie.
        if "principal_id" not in session or session.get("identity_checked"):
            return None

        principal = Principal(
            principal_id=str(session["principal_id"]),
            email=session.get("email"),
            roles=frozenset(session_roles()),
        )
        identity = container.identity_linker.link_or_create(principal)
        session["identity_checked"] = True
        if identity is not None:
            session["employee_id"] = identity.employee_id
            session["name"] = identity.full_name
            session["roles"] = sorted(r.value for r in identity.roles)
        else:
            logger.info("Principal %s has no linked employee", principal.principal_id)
        return None

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "principal_id": session["principal_id"],
                "employee_id": session.get("employee_id"),
                "name": session.get("name"),
                "roles": session.get("roles", []),
            }
        )
