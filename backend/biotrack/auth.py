from __future__ import annotations

from flask import Blueprint, request, jsonify

from biotrack.extensions import db, login_manager
from biotrack.models import User
from biotrack.utils.jwt_utils import create_access_token, decode_token, get_bearer_token

api_auth = Blueprint("api_auth", __name__, url_prefix="/api/auth")


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.request_loader
def load_user_from_request(req):
    """Allow @login_required to work with Bearer tokens too.

    This keeps compatibility with Flask-Login sessions (web) and tokens (mobile).
    """
    token = get_bearer_token(req.headers.get("Authorization", ""))
    if not token:
        return None
    payload = decode_token(token)
    if not payload or payload.get("type") != "access":
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"message": "Unauthorized"}), 401


@api_auth.post("/token")
def issue_token():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        return jsonify({"error": "email and password required"}), 400
    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return jsonify({"error": "invalid credentials"}), 401
    if not user.is_active:
        return jsonify({"error": "email not verified"}), 403
    return jsonify({"ok": True, "token": create_access_token(user.id), "user": user.to_dict()})
