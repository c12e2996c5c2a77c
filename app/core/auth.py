from __future__ import annotations

from flask import Blueprint, jsonify, request, session
from flask_login import current_user, login_required, login_user, logout_user
from werkzeug.security import check_password_hash

from app.core.i18n import SUPPORTED_LANGS, get_locale, translate
from app.core.models import User

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _credentials() -> tuple[str, str]:
    data = request.get_json(silent=True) if request.is_json else request.form
    data = data or {}
    return (data.get("email") or "").strip().lower(), data.get("password") or ""


@auth_bp.post("/login")
def login_post():
    email, password = _credentials()
    user = User.query.filter_by(email=email).first()
    if not user or not user.is_active or not check_password_hash(user.password_hash, password):
        return jsonify({"error": translate("auth.invalid_credentials")}), 401
    login_user(user)
    return jsonify({"id": user.id, "email": user.email, "full_name": user.full_name, "role": user.role})


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(
        {
            "id": current_user.id,
            "email": current_user.email,
            "full_name": current_user.full_name,
            "role": current_user.role,
            "lang": get_locale(),
        }
    )


@auth_bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@auth_bp.post("/lang")
def set_lang():
    data = (request.get_json(silent=True) if request.is_json else request.form) or {}
    lang = data.get("lang", "pt")
    if lang not in SUPPORTED_LANGS:
        lang = "pt"
    session["lang"] = lang
    return jsonify({"lang": lang})
