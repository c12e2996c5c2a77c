from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict
from datetime import date

from sqlalchemy.orm import selectinload

from app.core.i18n import lifecycle_label, status_label
from app.core.models import Demanda, Documento
from app.demandas.completeness import is_incomplete, recipient_incomplete
from app.demandas.dates import demanda_duration_text, format_for_display
from app.demandas.lifecycle import effective_final_date, lifecycle_state, validate_date_not_future
from app.demandas.orchestrator import (
    ModalType,
    get_modal_type,
    has_changes,
    initialize_temp_states,
    prepare_update,
    temp_states_from_payload,
)
from app.demandas.repository import (
    DOCUMENTO_DATE_FIELDS,
    DOCUMENTO_FLAG_FIELDS,
    DemandaRepository,
    SqlAlchemyDemandaRepository,
    demanda_snapshot,
    documento_snapshot,
)
from app.demandas.status import (
    available_statuses,
    calculate_demanda_status,
    document_status,
    recipient_status,
    status_color,
    status_filter_enabled,
    status_rank,
)
from app.demandas.types import (
    DemandaSnapshot,
    DemandaStatus,
    DocumentoSnapshot,
    DocumentoStatus,
    DocumentoTipo,
    is_set,
    is_truthy,
)

logger = logging.getLogger(__name__)

MSG_RESPOSTA_OBRIGATORIA = "Data de resposta é obrigatória quando marcado como respondido."

STATUS_A_ATUALIZAR = frozenset(
    {DemandaStatus.EM_ANDAMENTO, DemandaStatus.AGUARDANDO, DemandaStatus.FILA_DE_ESPERA}
)


class RecordNotFound(ValueError):
    pass


def default_repository() -> DemandaRepository:
    return SqlAlchemyDemandaRepository()


def _analistas(values: Iterable[str] | None) -> set[str]:
    return {item.strip() for item in values or () if item and item.strip()}


def serialize_documento(documento: DocumentoSnapshot) -> dict[str, object]:
    status = document_status(documento)
    row: dict[str, object] = {
        "id": documento.id,
        "demanda_id": documento.demanda_id,
        "tipo_documento": documento.tipo_documento.value,
        "assunto": documento.assunto,
        "status": status.value,
        "status_label": status_label(status),
        "status_rank": status_rank(status),
        "status_color": status_color(status),
        "incompleto": is_incomplete(documento),
    }
    for name in DOCUMENTO_DATE_FIELDS:
        if hasattr(documento, name):
            row[name] = format_for_display(getattr(documento, name))
    for name in ("numero_atena", "codigo_rastreio", "nao_possui_rastreio", "respondido", "apresentou_defeito"):
        if hasattr(documento, name):
            row[name] = getattr(documento, name)
    if hasattr(documento, "selected_midias"):
        row["selected_midias"] = list(documento.selected_midias)
        row["selected_relatorios_tecnicos"] = list(documento.selected_relatorios_tecnicos)
        row["selected_relatorios_inteligencia"] = list(documento.selected_relatorios_inteligencia)
        row["selected_autos_circunstanciados"] = list(documento.selected_autos_circunstanciados)
        row["selected_decisoes"] = list(documento.selected_decisoes)
    if hasattr(documento, "destinatarios"):
        row["destinatarios"] = [
            {
                "nome": dest.nome,
                "data_envio": format_for_display(dest.data_envio),
                "data_resposta": format_for_display(dest.data_resposta),
                "codigo_rastreio": dest.codigo_rastreio,
                "nao_possui_rastreio": dest.nao_possui_rastreio,
                "respondido": dest.respondido,
                "status": recipient_status(dest).value,
                "incompleto": recipient_incomplete(dest),
            }
            for dest in documento.destinatarios
        ]
    return row


def serialize_demanda_snapshot(
    demanda: DemandaSnapshot,
    documentos: list[DocumentoSnapshot],
    today: date | None = None,
) -> dict[str, object]:
    state = lifecycle_state(demanda)
    stored_status = DemandaStatus(demanda.status)
    final = effective_final_date(demanda)
    return {
        "id": demanda.id,
        "analista": demanda.analista,
        "status": stored_status.value,
        "status_label": status_label(stored_status),
        "status_calculado": calculate_demanda_status(demanda, documentos).value,
        "situacao": state.value,
        "situacao_label": lifecycle_label(state),
        "data_inicial": format_for_display(demanda.data_inicial),
        "data_final": format_for_display(demanda.data_final),
        "data_reabertura": format_for_display(demanda.data_reabertura),
        "nova_data_final": format_for_display(demanda.nova_data_final),
        "duracao": demanda_duration_text(
            demanda.data_inicial,
            final,
            DemandaStatus.FINALIZADA.value if final else stored_status.value,
            reference=today,
        ),
        "documentos_incompletos": sum(1 for doc in documentos if is_incomplete(doc)),
    }


def serialize_demanda(model: Demanda, today: date | None = None) -> dict[str, object]:
    documentos = [documento_snapshot(doc) for doc in model.documentos]
    row = serialize_demanda_snapshot(demanda_snapshot(model), documentos, today=today)
    row.update(
        {
            "sged": model.sged,
            "tipo_demanda": model.tipo_demanda,
            "orgao": model.orgao,
            "descricao": model.descricao,
        }
    )
    return row


def _demandas_query():
    return Demanda.query.options(
        selectinload(Demanda.documentos).selectinload(Documento.destinatarios)
    ).order_by(Demanda.data_inicial.desc(), Demanda.id.desc())


def list_demandas(filters: dict[str, str], today: date | None = None) -> list[dict[str, object]]:
    query = _demandas_query()
    status = (filters.get("status") or "").strip()
    if status:
        try:
            query = query.filter(Demanda.status == DemandaStatus(status))
        except ValueError:
            return []
    analista = (filters.get("analista") or "").strip()
    if analista:
        query = query.filter(Demanda.analista == analista)
    return [serialize_demanda(model, today=today) for model in query.all()]


def demanda_by_id(demanda_id: int) -> Demanda:
    demanda = _demandas_query().filter(Demanda.id == demanda_id).first()
    if not demanda:
        raise RecordNotFound("Demanda não encontrada")
    return demanda


def demanda_detail(demanda_id: int, today: date | None = None) -> dict[str, object]:
    model = demanda_by_id(demanda_id)
    row = serialize_demanda(model, today=today)
    row["documentos"] = [serialize_documento(documento_snapshot(doc)) for doc in model.documentos]
    row["edicao"] = asdict(initialize_temp_states(demanda_snapshot(model)))
    return row


def update_demanda(
    demanda_id: int,
    payload: dict,
    repo: DemandaRepository | None = None,
    today: date | None = None,
) -> dict[str, object]:
    repo = repo or default_repository()
    demanda = repo.find_demand(demanda_id)
    if demanda is None:
        raise RecordNotFound("Demanda não encontrada")

    modal_type = (payload.get("modal_type") or "").strip() or get_modal_type(demanda, payload.get("context")).value
    temp = temp_states_from_payload(payload)
    if modal_type in {item.value for item in ModalType} and not has_changes(
        temp, initialize_temp_states(demanda), modal_type
    ):
        logger.info("Demanda %s sem alterações (%s)", demanda_id, modal_type)
        return {"patch": {}, "alterado": False, "demanda": _demanda_payload(repo, demanda, today)}

    result = prepare_update(temp, modal_type, demanda, today=today)
    if not result.ok:
        logger.warning("Atualização rejeitada para demanda %s: %s", demanda_id, result.error)
        raise ValueError(result.error)

    patch = {key: getattr(value, "value", value) for key, value in result.data.items()}
    if not patch:
        return {"patch": {}, "alterado": False, "demanda": _demanda_payload(repo, demanda, today)}
    updated = repo.update_demand(demanda_id, patch)
    logger.info("Demanda %s atualizada via %s: %s", demanda_id, modal_type, ", ".join(sorted(patch)))
    return {"patch": patch, "alterado": True, "demanda": _demanda_payload(repo, updated, today)}


def _demanda_payload(repo: DemandaRepository, demanda: DemandaSnapshot, today: date | None) -> dict[str, object]:
    return serialize_demanda_snapshot(demanda, repo.list_documents(demanda.id), today=today)


def list_documentos(
    filters: dict[str, str],
    repo: DemandaRepository | None = None,
) -> list[dict[str, object]]:
    repo = repo or default_repository()
    demanda_id = (filters.get("demanda_id") or "").strip()
    if demanda_id and not demanda_id.isdigit():
        return []
    documentos = repo.list_documents(int(demanda_id) if demanda_id else None)

    tipo_raw = (filters.get("tipo") or "").strip()
    tipo: DocumentoTipo | None = None
    if tipo_raw:
        try:
            tipo = DocumentoTipo(tipo_raw)
        except ValueError:
            return []
        documentos = [doc for doc in documentos if doc.tipo_documento == tipo]

    status_raw = (filters.get("status") or "").strip()
    if status_raw and status_filter_enabled(tipo):
        try:
            status = DocumentoStatus(status_raw)
        except ValueError:
            return []
        if tipo is not None and status not in available_statuses(tipo):
            return []
        documentos = [doc for doc in documentos if document_status(doc) == status]

    rows = [serialize_documento(doc) for doc in documentos]
    sort = (filters.get("sort") or "").strip()
    if sort in {"status", "-status"}:
        # stable: equal ranks keep id order
        rows.sort(key=lambda row: row["status_rank"], reverse=sort.startswith("-"))
    return rows


def _open_demand_ids(demandas: Iterable[DemandaSnapshot], analistas: set[str]) -> set[int]:
    return {
        demanda.id
        for demanda in demandas
        if demanda.analista in analistas and not is_set(demanda.data_final)
    }


def incomplete_queue(
    analistas: Iterable[str] | None = None,
    repo: DemandaRepository | None = None,
) -> list[dict[str, object]]:
    """Documents needing attention; restricted to open demands when filtering by analyst."""
    repo = repo or default_repository()
    selected = _analistas(analistas)
    documentos = repo.list_documents()
    if selected:
        demand_ids = _open_demand_ids(repo.list_demands(), selected)
        documentos = [doc for doc in documentos if doc.demanda_id in demand_ids]
    return [serialize_documento(doc) for doc in documentos if is_incomplete(doc)]


def management_counters(
    analistas: Iterable[str] | None = None,
    repo: DemandaRepository | None = None,
) -> dict[str, object]:
    repo = repo or default_repository()
    selected = _analistas(analistas)
    demandas = repo.list_demands()
    a_atualizar = [
        demanda
        for demanda in demandas
        if not is_set(demanda.data_final)
        and DemandaStatus(demanda.status) in STATUS_A_ATUALIZAR
        and (not selected or demanda.analista in selected)
    ]
    return {
        "demandas_a_atualizar": len(a_atualizar),
        "documentos_incompletos": len(incomplete_queue(selected, repo=repo)),
        "analistas": sorted({demanda.analista for demanda in demandas if demanda.analista}),
    }


def _validate_document_dates(values: dict, today: date | None) -> None:
    for name in DOCUMENTO_DATE_FIELDS:
        value = values.get(name)
        if isinstance(value, str):
            check = validate_date_not_future(value, today=today)
            if not check.valid:
                raise ValueError(check.message)


def update_documento(
    documento_id: int,
    payload: dict,
    repo: DemandaRepository | None = None,
    today: date | None = None,
) -> dict[str, object]:
    repo = repo or default_repository()
    documento = repo.find_documento(documento_id)
    if documento is None:
        raise RecordNotFound("Documento não encontrado")

    patch = dict(payload)
    _validate_document_dates(patch, today)
    for name in DOCUMENTO_FLAG_FIELDS:
        if name in patch:
            patch[name] = is_truthy(patch[name])
    respondido = patch.get("respondido", getattr(documento, "respondido", False))
    data_resposta = patch.get("data_resposta", getattr(documento, "data_resposta", None))
    if respondido and not is_set(data_resposta):
        raise ValueError(MSG_RESPOSTA_OBRIGATORIA)

    destinatarios = patch.get("destinatarios") or []
    if not isinstance(destinatarios, list):
        raise ValueError("Destinatários devem ser uma lista")
    for dest in destinatarios:
        if not isinstance(dest, dict):
            raise ValueError("Destinatário inválido")
        _validate_document_dates(dest, today)
        if is_truthy(dest.get("respondido")) and not is_set(dest.get("data_resposta")):
            raise ValueError(MSG_RESPOSTA_OBRIGATORIA)

    updated = repo.update_documento(documento_id, patch)
    logger.info("Documento %s atualizado: %s", documento_id, ", ".join(sorted(patch)))
    return serialize_documento(updated)


def status_report() -> list[dict[str, object]]:
    rows = []
    for model in _demandas_query().all():
        documentos = [documento_snapshot(doc) for doc in model.documentos]
        snapshot = demanda_snapshot(model)
        rows.append(
            {
                "sged": model.sged,
                "status": DemandaStatus(model.status).value,
                "status_calculado": calculate_demanda_status(snapshot, documentos).value,
                "incompletos": sum(1 for doc in documentos if is_incomplete(doc)),
            }
        )
    return rows
