from __future__ import annotations

import pytest

from app.demandas.status import (
    STATUS_RANK,
    aggregate_recipient_status,
    all_filterable_statuses,
    available_statuses,
    calculate_demanda_status,
    document_status,
    has_status,
    is_encaminhamento,
    sort_by_status,
    status_color,
    status_filter_enabled,
)
from app.demandas.types import (
    DemandaSnapshot,
    DemandaStatus,
    Destinatario,
    DocumentoStatus,
    DocumentoTipo,
    Midia,
    Oficio,
    OficioCircular,
    Relatorio,
)


def _circular(*destinatarios, assunto="Requisição de dados"):
    return OficioCircular(
        id=9,
        demanda_id=1,
        assunto=assunto,
        numero_atena="AT-9",
        data_envio="2024-01-09",
        destinatarios=tuple(destinatarios),
    )


def test_media_never_has_status():
    midia = Midia(id=1, demanda_id=1, apresentou_defeito=True)
    assert document_status(midia) == DocumentoStatus.SEM_STATUS
    assert has_status(midia) is False


@pytest.mark.parametrize(
    "tipo",
    [DocumentoTipo.RELATORIO_TECNICO, DocumentoTipo.RELATORIO_INTELIGENCIA, DocumentoTipo.AUTOS_CIRCUNSTANCIADOS],
)
def test_production_documents_follow_completion_date(tipo):
    assert document_status(Relatorio(id=1, demanda_id=1, tipo=tipo)) == DocumentoStatus.EM_PRODUCAO
    finished = Relatorio(id=1, demanda_id=1, tipo=tipo, data_finalizacao="2024-02-01")
    assert document_status(finished) == DocumentoStatus.FINALIZADO


def test_relatorio_rejects_non_production_type():
    with pytest.raises(ValueError):
        Relatorio(id=1, demanda_id=1, tipo=DocumentoTipo.OFICIO)


def test_forwarding_letters_have_no_response_leg():
    oficio = Oficio(id=1, demanda_id=1, assunto="Encaminhamento de mídia")
    assert document_status(oficio) == DocumentoStatus.NAO_ENVIADO
    sent = Oficio(id=1, demanda_id=1, assunto="Encaminhamento de mídia - lote 2", data_envio="01/02/2024")
    assert document_status(sent) == DocumentoStatus.ENCAMINHADO
    circular = _circular(Destinatario(nome="A"), assunto="Outros")
    assert document_status(circular) == DocumentoStatus.ENCAMINHADO


def test_request_letters_move_from_not_sent_to_answered():
    assert document_status(Oficio(id=1, demanda_id=1, assunto="Requisição")) == DocumentoStatus.NAO_ENVIADO
    pending = Oficio(id=1, demanda_id=1, assunto="Requisição", data_envio="2024-01-15")
    assert document_status(pending) == DocumentoStatus.PENDENTE
    answered = Oficio(id=1, demanda_id=1, assunto="Requisição", data_envio="2024-01-15", data_resposta="2024-01-20")
    assert document_status(answered) == DocumentoStatus.RESPONDIDO


def test_circular_status_is_the_weakest_recipient():
    answered = Destinatario(nome="A", data_envio="2024-01-09", data_resposta="2024-01-19")
    pending = Destinatario(nome="B", data_envio="2024-01-09")
    unsent = Destinatario(nome="C")
    assert document_status(_circular(answered, answered)) == DocumentoStatus.RESPONDIDO
    assert document_status(_circular(unsent, unsent)) == DocumentoStatus.NAO_ENVIADO
    assert document_status(_circular(answered, unsent)) == DocumentoStatus.PENDENTE
    assert document_status(_circular(answered, pending, unsent)) == DocumentoStatus.PENDENTE


def test_circular_without_recipients_uses_its_own_dates():
    circular = OficioCircular(id=2, demanda_id=1, assunto="Requisição", data_envio="2024-01-09")
    assert document_status(circular) == DocumentoStatus.PENDENTE


def test_aggregate_of_no_recipients_is_not_sent():
    assert aggregate_recipient_status([]) == DocumentoStatus.NAO_ENVIADO


def test_forwarding_predicate_only_applies_to_letters():
    assert is_encaminhamento(DocumentoTipo.OFICIO, "Comunicação de não cumprimento de decisão judicial")
    assert is_encaminhamento("Ofício Circular", "Outros")
    assert not is_encaminhamento(DocumentoTipo.OFICIO, "Encaminhamento de decisão judicial")
    assert not is_encaminhamento(DocumentoTipo.OFICIO, "")
    assert not is_encaminhamento(DocumentoTipo.MIDIA, "Encaminhamento de mídia")


def test_status_rank_orders_rows():
    docs = [
        Midia(id=1, demanda_id=1),
        Oficio(id=2, demanda_id=1, assunto="Requisição", data_envio="2024-01-15"),
        Relatorio(id=3, demanda_id=1, tipo=DocumentoTipo.RELATORIO_TECNICO),
        Oficio(id=4, demanda_id=1, assunto="Requisição"),
    ]
    assert [doc.id for doc in sort_by_status(docs)] == [4, 3, 2, 1]
    assert [doc.id for doc in sort_by_status(docs, reverse=True)] == [1, 2, 3, 4]
    assert STATUS_RANK[DocumentoStatus.NAO_ENVIADO] == 1
    assert STATUS_RANK[DocumentoStatus.SEM_STATUS] == 7


def test_status_presentation_helpers():
    assert status_color(DocumentoStatus.PENDENTE) == "#FF6B35"
    assert DocumentoStatus.SEM_STATUS not in all_filterable_statuses()
    assert available_statuses(DocumentoTipo.RELATORIO_TECNICO) == [
        DocumentoStatus.EM_PRODUCAO,
        DocumentoStatus.FINALIZADO,
    ]
    assert DocumentoStatus.ENCAMINHADO in available_statuses("Ofício")
    assert available_statuses(DocumentoTipo.MIDIA) == []
    assert available_statuses(None) == all_filterable_statuses()
    assert status_filter_enabled(DocumentoTipo.MIDIA) is False
    assert status_filter_enabled(None) is True


def test_calculated_demand_status():
    demanda = DemandaSnapshot(id=1, data_inicial="2024-01-10")
    assert calculate_demanda_status(demanda, []) == DemandaStatus.FILA_DE_ESPERA

    pending = Oficio(id=1, demanda_id=1, assunto="Requisição", data_envio="2024-01-15")
    assert calculate_demanda_status(demanda, [pending]) == DemandaStatus.AGUARDANDO

    answered = Oficio(id=2, demanda_id=1, assunto="Requisição", data_envio="2024-01-15", data_resposta="2024-01-20")
    assert calculate_demanda_status(demanda, [answered]) == DemandaStatus.EM_ANDAMENTO

    other_demand = Oficio(id=3, demanda_id=2, assunto="Requisição")
    assert calculate_demanda_status(demanda, [answered, other_demand]) == DemandaStatus.EM_ANDAMENTO


def test_calculated_status_after_reopening():
    reopened = DemandaSnapshot(id=1, data_inicial="2024-01-10", data_final="2024-02-01", data_reabertura="2024-03-01")
    assert calculate_demanda_status(reopened, []) == DemandaStatus.FILA_DE_ESPERA
    refinalized = DemandaSnapshot(
        id=1,
        data_inicial="2024-01-10",
        data_final="2024-02-01",
        data_reabertura="2024-03-01",
        nova_data_final="2024-03-10",
    )
    assert calculate_demanda_status(refinalized, []) == DemandaStatus.FINALIZADA
    finalized = DemandaSnapshot(id=1, data_inicial="2024-01-10", data_final="2024-02-01")
    assert calculate_demanda_status(finalized, []) == DemandaStatus.FINALIZADA
