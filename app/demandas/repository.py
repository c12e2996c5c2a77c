"""
Repository contract for demands and documents, plus two implementations.

The rules engine only sees the immutable snapshots from
``app.demandas.types``; the repositories own loading those snapshots and
persisting field patches (``update_demand`` / ``update_documento``).
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import fields, replace
from datetime import date

from app.core.extensions import db
from app.core.models import Demanda, DestinatarioCircular, Documento
from app.demandas.dates import parse_date
from app.demandas.types import (
    PRODUCAO_TIPOS,
    DemandaSnapshot,
    DemandaStatus,
    Destinatario,
    DocumentoSnapshot,
    DocumentoTipo,
    Midia,
    Oficio,
    OficioCircular,
    Relatorio,
    is_truthy,
)

logger = logging.getLogger(__name__)

DEMANDA_DATE_FIELDS = ("data_final", "data_reabertura", "nova_data_final")
DOCUMENTO_DATE_FIELDS = ("data_envio", "data_resposta", "data_finalizacao")
DOCUMENTO_FLAG_FIELDS = ("nao_possui_rastreio", "respondido", "apresentou_defeito")
DOCUMENTO_LIST_FIELDS = (
    "selected_midias",
    "selected_relatorios_tecnicos",
    "selected_relatorios_inteligencia",
    "selected_autos_circunstanciados",
    "selected_decisoes",
)


def _patch_date(value, field_name: str) -> date | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Formato de data inválido para {field_name}")
    return parsed


def _editable_fields(documento: DocumentoSnapshot) -> set[str]:
    return {item.name for item in fields(documento)} - {"id", "demanda_id", "tipo"}


def _patch_status(value) -> DemandaStatus:
    try:
        return DemandaStatus(value)
    except ValueError as exc:
        raise ValueError("Status inválido.") from exc


def destinatario_from_payload(raw: dict) -> Destinatario:
    if not isinstance(raw, dict):
        raise ValueError("Destinatário inválido")
    nome = str(raw.get("nome") or "").strip()
    if not nome:
        raise ValueError("Nome do destinatário é obrigatório")
    return Destinatario(
        nome=nome,
        data_envio=_patch_date(raw.get("data_envio"), "data de envio"),
        data_resposta=_patch_date(raw.get("data_resposta"), "data de resposta"),
        codigo_rastreio=str(raw.get("codigo_rastreio") or "").strip(),
        nao_possui_rastreio=is_truthy(raw.get("nao_possui_rastreio")),
        respondido=is_truthy(raw.get("respondido")),
    )


def demanda_snapshot(model: Demanda) -> DemandaSnapshot:
    return DemandaSnapshot(
        id=model.id,
        data_inicial=model.data_inicial,
        status=model.status,
        data_final=model.data_final,
        data_reabertura=model.data_reabertura,
        nova_data_final=model.nova_data_final,
        analista=model.analista,
    )


def documento_snapshot(model: Documento) -> DocumentoSnapshot:
    tipo = model.tipo_documento
    if tipo == DocumentoTipo.MIDIA:
        return Midia(
            id=model.id,
            demanda_id=model.demanda_id,
            assunto=model.assunto,
            apresentou_defeito=model.apresentou_defeito,
        )
    if tipo in PRODUCAO_TIPOS:
        return Relatorio(
            id=model.id,
            demanda_id=model.demanda_id,
            tipo=tipo,
            assunto=model.assunto,
            data_finalizacao=model.data_finalizacao,
        )
    if tipo == DocumentoTipo.OFICIO_CIRCULAR:
        return OficioCircular(
            id=model.id,
            demanda_id=model.demanda_id,
            assunto=model.assunto,
            numero_atena=model.numero_atena,
            data_envio=model.data_envio,
            data_resposta=model.data_resposta,
            codigo_rastreio=model.codigo_rastreio,
            nao_possui_rastreio=model.nao_possui_rastreio,
            respondido=model.respondido,
            destinatarios=tuple(
                Destinatario(
                    nome=dest.nome,
                    data_envio=dest.data_envio,
                    data_resposta=dest.data_resposta,
                    codigo_rastreio=dest.codigo_rastreio,
                    nao_possui_rastreio=dest.nao_possui_rastreio,
                    respondido=dest.respondido,
                )
                for dest in model.destinatarios
            ),
        )
    return Oficio(
        id=model.id,
        demanda_id=model.demanda_id,
        assunto=model.assunto,
        numero_atena=model.numero_atena,
        data_envio=model.data_envio,
        data_resposta=model.data_resposta,
        codigo_rastreio=model.codigo_rastreio,
        nao_possui_rastreio=model.nao_possui_rastreio,
        respondido=model.respondido,
        **{name: tuple(getattr(model, name) or ()) for name in DOCUMENTO_LIST_FIELDS},
    )


class DemandaRepository(ABC):
    """Read/write contract used by the services layer."""

    @abstractmethod
    def find_demand(self, demanda_id: int) -> DemandaSnapshot | None:
        ...

    @abstractmethod
    def list_demands(self) -> list[DemandaSnapshot]:
        ...

    @abstractmethod
    def list_documents(self, demanda_id: int | None = None) -> list[DocumentoSnapshot]:
        ...

    @abstractmethod
    def find_documento(self, documento_id: int) -> DocumentoSnapshot | None:
        ...

    @abstractmethod
    def update_demand(self, demanda_id: int, patch: dict) -> DemandaSnapshot:
        ...

    @abstractmethod
    def update_documento(self, documento_id: int, patch: dict) -> DocumentoSnapshot:
        ...


class InMemoryDemandaRepository(DemandaRepository):
    def __init__(
        self,
        demandas: list[DemandaSnapshot] | None = None,
        documentos: list[DocumentoSnapshot] | None = None,
    ) -> None:
        self._demandas: dict[int, DemandaSnapshot] = {d.id: d for d in demandas or []}
        self._documentos: dict[int, DocumentoSnapshot] = {d.id: d for d in documentos or []}

    def find_demand(self, demanda_id: int) -> DemandaSnapshot | None:
        return self._demandas.get(demanda_id)

    def list_demands(self) -> list[DemandaSnapshot]:
        return [self._demandas[key] for key in sorted(self._demandas)]

    def list_documents(self, demanda_id: int | None = None) -> list[DocumentoSnapshot]:
        return [
            self._documentos[key]
            for key in sorted(self._documentos)
            if demanda_id is None or self._documentos[key].demanda_id == demanda_id
        ]

    def find_documento(self, documento_id: int) -> DocumentoSnapshot | None:
        return self._documentos.get(documento_id)

    def update_demand(self, demanda_id: int, patch: dict) -> DemandaSnapshot:
        current = self._demandas.get(demanda_id)
        if current is None:
            raise ValueError("Demanda não encontrada")
        changes: dict[str, object] = {}
        for key, value in patch.items():
            if key in DEMANDA_DATE_FIELDS:
                changes[key] = _patch_date(value, key)
            elif key == "status":
                changes[key] = _patch_status(value)
            else:
                raise ValueError(f"Campo não editável: {key}")
        updated = replace(current, **changes)
        self._demandas[demanda_id] = updated
        return updated

    def update_documento(self, documento_id: int, patch: dict) -> DocumentoSnapshot:
        current = self._documentos.get(documento_id)
        if current is None:
            raise ValueError("Documento não encontrado")
        allowed = _editable_fields(current)
        changes: dict[str, object] = {}
        for key, value in patch.items():
            if key not in allowed:
                raise ValueError(f"Campo não editável para {current.tipo_documento.value}: {key}")
            if key in DOCUMENTO_DATE_FIELDS:
                changes[key] = _patch_date(value, key)
            elif key in DOCUMENTO_LIST_FIELDS:
                changes[key] = tuple(str(item) for item in value or ())
            elif key == "destinatarios":
                changes[key] = tuple(destinatario_from_payload(item) for item in value or ())
            elif key in DOCUMENTO_FLAG_FIELDS:
                changes[key] = is_truthy(value)
            else:
                changes[key] = str(value or "").strip()
        updated = replace(current, **changes)
        self._documentos[documento_id] = updated
        return updated


class SqlAlchemyDemandaRepository(DemandaRepository):
    def find_demand(self, demanda_id: int) -> DemandaSnapshot | None:
        model = db.session.get(Demanda, demanda_id)
        return demanda_snapshot(model) if model else None

    def list_demands(self) -> list[DemandaSnapshot]:
        return [demanda_snapshot(model) for model in Demanda.query.order_by(Demanda.id.asc()).all()]

    def list_documents(self, demanda_id: int | None = None) -> list[DocumentoSnapshot]:
        query = Documento.query
        if demanda_id is not None:
            query = query.filter_by(demanda_id=demanda_id)
        return [documento_snapshot(model) for model in query.order_by(Documento.id.asc()).all()]

    def find_documento(self, documento_id: int) -> DocumentoSnapshot | None:
        model = db.session.get(Documento, documento_id)
        return documento_snapshot(model) if model else None

    def update_demand(self, demanda_id: int, patch: dict) -> DemandaSnapshot:
        model = db.session.get(Demanda, demanda_id)
        if model is None:
            raise ValueError("Demanda não encontrada")
        changes: dict[str, object] = {}
        for key, value in patch.items():
            if key in DEMANDA_DATE_FIELDS:
                changes[key] = _patch_date(value, key)
            elif key == "status":
                changes[key] = _patch_status(value)
            else:
                raise ValueError(f"Campo não editável: {key}")
        # parse all fields before mutating the model
        for key, value in changes.items():
            setattr(model, key, value)
        db.session.add(model)
        db.session.commit()
        logger.debug("Demanda %s gravada: %s", demanda_id, ", ".join(sorted(patch)))
        return demanda_snapshot(model)

    def update_documento(self, documento_id: int, patch: dict) -> DocumentoSnapshot:
        model = db.session.get(Documento, documento_id)
        if model is None:
            raise ValueError("Documento não encontrado")
        allowed = _editable_fields(documento_snapshot(model))
        changes: dict[str, object] = {}
        for key, value in patch.items():
            if key not in allowed:
                raise ValueError(f"Campo não editável para {model.tipo_documento.value}: {key}")
            if key in DOCUMENTO_DATE_FIELDS:
                changes[key] = _patch_date(value, key)
            elif key in DOCUMENTO_LIST_FIELDS:
                changes[key] = [str(item) for item in value or ()]
            elif key in DOCUMENTO_FLAG_FIELDS:
                changes[key] = is_truthy(value)
            elif key == "destinatarios":
                changes[key] = [
                    DestinatarioCircular(
                        ordem=index,
                        nome=dest.nome,
                        data_envio=dest.data_envio,
                        data_resposta=dest.data_resposta,
                        codigo_rastreio=dest.codigo_rastreio,
                        nao_possui_rastreio=dest.nao_possui_rastreio,
                        respondido=dest.respondido,
                    )
                    for index, dest in enumerate(destinatario_from_payload(item) for item in value or ())
                ]
            else:
                changes[key] = str(value or "").strip()
        for key, value in changes.items():
            setattr(model, key, value)
        db.session.add(model)
        db.session.commit()
        logger.debug("Documento %s gravado: %s", documento_id, ", ".join(sorted(patch)))
        return documento_snapshot(model)
