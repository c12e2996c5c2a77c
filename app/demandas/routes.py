from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import login_required

from app.demandas.services import (
    RecordNotFound,
    demanda_detail,
    incomplete_queue,
    list_demandas,
    list_documentos,
    update_demanda,
    update_documento,
)

demandas_bp = Blueprint("demandas", __name__, url_prefix="/demandas")
documentos_bp = Blueprint("documentos", __name__, url_prefix="/documentos")


def _payload() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _error(exc: ValueError):
    status = 404 if isinstance(exc, RecordNotFound) else 400
    return jsonify({"error": str(exc)}), status


@demandas_bp.get("/")
@login_required
def demandas_list():
    return jsonify({"demandas": list_demandas(request.args.to_dict())})


@demandas_bp.get("/<int:demanda_id>")
@login_required
def demanda_show(demanda_id: int):
    try:
        return jsonify(demanda_detail(demanda_id))
    except ValueError as exc:
        return _error(exc)


@demandas_bp.post("/<int:demanda_id>/atualizar")
@login_required
def demanda_update(demanda_id: int):
    try:
        result = update_demanda(demanda_id, _payload())
    except ValueError as exc:
        return _error(exc)
    return jsonify(result)


@documentos_bp.get("/")
@login_required
def documentos_list():
    return jsonify({"documentos": list_documentos(request.args.to_dict())})


@documentos_bp.get("/incompletos")
@login_required
def documentos_incompletos():
    analistas = request.args.getlist("analista")
    return jsonify({"documentos": incomplete_queue(analistas)})


@documentos_bp.patch("/<int:documento_id>")
@login_required
def documento_update(documento_id: int):
    try:
        documento = update_documento(documento_id, _payload())
    except ValueError as exc:
        return _error(exc)
    return jsonify(documento)
