from __future__ import annotations

from collections.abc import Iterable

from app.demandas.types import (
    PRODUCAO_TIPOS,
    DemandaSnapshot,
    DemandaStatus,
    Destinatario,
    DocumentoSnapshot,
    DocumentoStatus,
    DocumentoTipo,
    Midia,
    Oficio,
    OficioCircular,
    Relatorio,
    is_set,
)

ASSUNTO_OUTROS = "Outros"
ASSUNTO_ENCAMINHAMENTO_MIDIA = "Encaminhamento de mídia"
ASSUNTO_ENCAMINHAMENTO_RELATORIO_TECNICO = "Encaminhamento de relatório técnico"
ASSUNTO_ENCAMINHAMENTO_RELATORIO_INTELIGENCIA = "Encaminhamento de relatório de inteligência"
ASSUNTO_ENCAMINHAMENTO_AUTOS = "Encaminhamento de autos circunstanciados"
ASSUNTO_ENCAMINHAMENTO_RELATORIO_MIDIA = "Encaminhamento de relatório técnico e mídia"
ASSUNTO_NAO_CUMPRIMENTO = "Comunicação de não cumprimento de decisão judicial"

ASSUNTOS_ENCAMINHAMENTO = (
    ASSUNTO_ENCAMINHAMENTO_MIDIA,
    ASSUNTO_ENCAMINHAMENTO_RELATORIO_TECNICO,
    ASSUNTO_ENCAMINHAMENTO_RELATORIO_INTELIGENCIA,
    ASSUNTO_ENCAMINHAMENTO_AUTOS,
    ASSUNTO_ENCAMINHAMENTO_RELATORIO_MIDIA,
    ASSUNTO_NAO_CUMPRIMENTO,
    ASSUNTO_OUTROS,
)

OFICIO_TIPOS = frozenset({DocumentoTipo.OFICIO, DocumentoTipo.OFICIO_CIRCULAR})

STATUS_RANK: dict[DocumentoStatus, int] = {
    DocumentoStatus.NAO_ENVIADO: 1,
    DocumentoStatus.EM_PRODUCAO: 2,
    DocumentoStatus.PENDENTE: 3,
    DocumentoStatus.ENCAMINHADO: 4,
    DocumentoStatus.RESPONDIDO: 5,
    DocumentoStatus.FINALIZADO: 6,
    DocumentoStatus.SEM_STATUS: 7,
}

STATUS_COLORS: dict[DocumentoStatus, str] = {
    DocumentoStatus.NAO_ENVIADO: "#6C757D",
    DocumentoStatus.EM_PRODUCAO: "#6C757D",
    DocumentoStatus.PENDENTE: "#FF6B35",
    DocumentoStatus.ENCAMINHADO: "#007BFF",
    DocumentoStatus.RESPONDIDO: "#007BFF",
    DocumentoStatus.FINALIZADO: "#007BFF",
    DocumentoStatus.SEM_STATUS: "#6C757D",
}

# Statuses that keep a demand "Aguardando" while it has no final date.
PENDING_DOCUMENT_STATUSES = frozenset(
    {DocumentoStatus.NAO_ENVIADO, DocumentoStatus.PENDENTE, DocumentoStatus.EM_PRODUCAO}
)


def is_encaminhamento(tipo_documento: DocumentoTipo | str, assunto: str | None) -> bool:
    """True for letters that only transmit other documents (no response leg)."""
    if DocumentoTipo(tipo_documento) not in OFICIO_TIPOS:
        return False
    subject = (assunto or "").strip()
    if not subject:
        return False
    return any(subject == item or subject.startswith(item) for item in ASSUNTOS_ENCAMINHAMENTO)


def recipient_status(destinatario: Destinatario) -> DocumentoStatus:
    return _send_response_status(destinatario.data_envio, destinatario.data_resposta)


def _send_response_status(data_envio, data_resposta) -> DocumentoStatus:
    if not is_set(data_envio):
        return DocumentoStatus.NAO_ENVIADO
    if not is_set(data_resposta):
        return DocumentoStatus.PENDENTE
    return DocumentoStatus.RESPONDIDO


def aggregate_recipient_status(statuses: Iterable[DocumentoStatus]) -> DocumentoStatus:
    collected = list(statuses)
    if not collected:
        return DocumentoStatus.NAO_ENVIADO
    if all(item == DocumentoStatus.RESPONDIDO for item in collected):
        return DocumentoStatus.RESPONDIDO
    if all(item == DocumentoStatus.NAO_ENVIADO for item in collected):
        return DocumentoStatus.NAO_ENVIADO
    return DocumentoStatus.PENDENTE


def document_status(documento: DocumentoSnapshot) -> DocumentoStatus:
    if isinstance(documento, Midia):
        return DocumentoStatus.SEM_STATUS
    if isinstance(documento, Relatorio):
        if is_set(documento.data_finalizacao):
            return DocumentoStatus.FINALIZADO
        return DocumentoStatus.EM_PRODUCAO
    if isinstance(documento, (Oficio, OficioCircular)):
        if is_encaminhamento(documento.tipo_documento, documento.assunto):
            if is_set(documento.data_envio):
                return DocumentoStatus.ENCAMINHADO
            return DocumentoStatus.NAO_ENVIADO
        if isinstance(documento, OficioCircular) and documento.destinatarios:
            return aggregate_recipient_status(recipient_status(dest) for dest in documento.destinatarios)
        return _send_response_status(documento.data_envio, documento.data_resposta)
    raise TypeError(f"Documento sem classificação de status: {type(documento).__name__}")


def status_rank(status: DocumentoStatus) -> int:
    return STATUS_RANK[status]


def status_color(status: DocumentoStatus) -> str:
    return STATUS_COLORS.get(status, "#6C757D")


def has_status(documento: DocumentoSnapshot) -> bool:
    return document_status(documento) != DocumentoStatus.SEM_STATUS


def all_filterable_statuses() -> list[DocumentoStatus]:
    return [status for status in STATUS_RANK if status != DocumentoStatus.SEM_STATUS]


def available_statuses(tipo_documento: DocumentoTipo | str | None) -> list[DocumentoStatus]:
    if not tipo_documento:
        return all_filterable_statuses()
    try:
        tipo = DocumentoTipo(tipo_documento)
    except ValueError:
        return all_filterable_statuses()
    if tipo in OFICIO_TIPOS:
        return [
            DocumentoStatus.NAO_ENVIADO,
            DocumentoStatus.PENDENTE,
            DocumentoStatus.RESPONDIDO,
            DocumentoStatus.ENCAMINHADO,
        ]
    if tipo in PRODUCAO_TIPOS:
        return [DocumentoStatus.EM_PRODUCAO, DocumentoStatus.FINALIZADO]
    return []


def status_filter_enabled(tipo_documento: DocumentoTipo | str | None) -> bool:
    return tipo_documento != DocumentoTipo.MIDIA and tipo_documento != DocumentoTipo.MIDIA.value


def sort_by_status(documentos: Iterable[DocumentoSnapshot], reverse: bool = False) -> list[DocumentoSnapshot]:
    return sorted(documentos, key=lambda doc: status_rank(document_status(doc)), reverse=reverse)


def calculate_demanda_status(
    demanda: DemandaSnapshot,
    documentos: Iterable[DocumentoSnapshot],
) -> DemandaStatus:
    """Status implied by the demand's dates and its documents' workflow.

    A reopened demand counts as finalized only once its new final date is
    set; otherwise the open-demand rules apply again.
    """
    if is_set(demanda.data_reabertura):
        if is_set(demanda.nova_data_final):
            return DemandaStatus.FINALIZADA
    elif is_set(demanda.data_final):
        return DemandaStatus.FINALIZADA

    if not is_set(demanda.data_inicial):
        return demanda.status or DemandaStatus.FILA_DE_ESPERA

    proprios = [doc for doc in documentos if demanda.id is None or doc.demanda_id == demanda.id]
    if not proprios:
        return DemandaStatus.FILA_DE_ESPERA
    if any(document_status(doc) in PENDING_DOCUMENT_STATUSES for doc in proprios):
        return DemandaStatus.AGUARDANDO
    return DemandaStatus.EM_ANDAMENTO
