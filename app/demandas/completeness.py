"""Completeness rules: does a document still need attention?

A sent letter (or circular recipient) that has tracking data but has not
been answered is always reported as incomplete.  This is intended: such
letters stay in the attention queue until the answer arrives.
"""
from __future__ import annotations

from collections.abc import Iterable

from app.demandas.status import (
    ASSUNTO_ENCAMINHAMENTO_AUTOS,
    ASSUNTO_ENCAMINHAMENTO_MIDIA,
    ASSUNTO_ENCAMINHAMENTO_RELATORIO_INTELIGENCIA,
    ASSUNTO_ENCAMINHAMENTO_RELATORIO_MIDIA,
    ASSUNTO_ENCAMINHAMENTO_RELATORIO_TECNICO,
    ASSUNTO_OUTROS,
    is_encaminhamento,
)
from app.demandas.types import (
    Destinatario,
    DocumentoSnapshot,
    Midia,
    Oficio,
    OficioCircular,
    Relatorio,
    is_set,
)


def _has_tracking(item: Oficio | Destinatario) -> bool:
    return is_set(item.codigo_rastreio) or item.nao_possui_rastreio


def recipient_incomplete(destinatario: Destinatario) -> bool:
    sent = is_set(destinatario.data_envio)
    if sent and not _has_tracking(destinatario):
        return True
    if destinatario.respondido and not is_set(destinatario.data_resposta):
        return True
    if sent and _has_tracking(destinatario) and not destinatario.respondido:
        # sent-and-trackable but unanswered: kept visible until answered
        return True
    return False


def _circular_incomplete(documento: OficioCircular) -> bool:
    if not is_set(documento.numero_atena):
        return True
    if documento.assunto == ASSUNTO_OUTROS:
        return not is_set(documento.data_envio)
    if not is_set(documento.data_envio):
        return True
    if not documento.destinatarios:
        return True
    if not any(is_set(dest.data_envio) for dest in documento.destinatarios):
        return True
    return any(recipient_incomplete(dest) for dest in documento.destinatarios)


def _missing_forwarded_selection(documento: Oficio) -> bool:
    assunto = (documento.assunto or "").strip()
    if assunto.startswith(ASSUNTO_ENCAMINHAMENTO_RELATORIO_MIDIA):
        return not documento.selected_relatorios_tecnicos or not documento.selected_midias
    if assunto.startswith(ASSUNTO_ENCAMINHAMENTO_MIDIA):
        return not documento.selected_midias
    if assunto.startswith(ASSUNTO_ENCAMINHAMENTO_RELATORIO_TECNICO):
        return not documento.selected_relatorios_tecnicos
    if assunto.startswith(ASSUNTO_ENCAMINHAMENTO_RELATORIO_INTELIGENCIA):
        return not documento.selected_relatorios_inteligencia
    if assunto.startswith(ASSUNTO_ENCAMINHAMENTO_AUTOS):
        return not documento.selected_autos_circunstanciados
    # non-compliance notice and "Outros" carry no attachments
    return False


def _oficio_incomplete(documento: Oficio) -> bool:
    if not is_set(documento.numero_atena):
        return True
    if is_encaminhamento(documento.tipo_documento, documento.assunto):
        if not is_set(documento.data_envio):
            return True
        return _missing_forwarded_selection(documento)
    if not is_set(documento.data_envio):
        return True
    if not _has_tracking(documento):
        return True
    if documento.respondido and not is_set(documento.data_resposta):
        return True
    # unanswered request letters always need follow-up
    return not documento.respondido


def is_incomplete(documento: DocumentoSnapshot) -> bool:
    if isinstance(documento, Midia):
        return False
    if isinstance(documento, Relatorio):
        return not is_set(documento.data_finalizacao)
    if isinstance(documento, OficioCircular):
        return _circular_incomplete(documento)
    if isinstance(documento, Oficio):
        return _oficio_incomplete(documento)
    raise TypeError(f"Documento sem regra de completude: {type(documento).__name__}")


def incomplete_documents(documentos: Iterable[DocumentoSnapshot]) -> list[DocumentoSnapshot]:
    return [doc for doc in documentos if is_incomplete(doc)]


def count_incomplete(documentos: Iterable[DocumentoSnapshot]) -> int:
    return sum(1 for doc in documentos if is_incomplete(doc))
