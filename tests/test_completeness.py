from __future__ import annotations

import itertools

import pytest

from app.demandas.completeness import count_incomplete, incomplete_documents, is_incomplete, recipient_incomplete
from app.demandas.status import ASSUNTOS_ENCAMINHAMENTO
from app.demandas.types import Destinatario, DocumentoTipo, Midia, Oficio, OficioCircular, Relatorio


def _oficio(**overrides):
    values = {
        "id": 1,
        "demanda_id": 1,
        "assunto": "Requisição de dados cadastrais",
        "numero_atena": "AT-1",
        "data_envio": "2024-01-15",
        "codigo_rastreio": "BR1",
    }
    values.update(overrides)
    return Oficio(**values)


def _circular(destinatarios, **overrides):
    values = {
        "id": 2,
        "demanda_id": 1,
        "assunto": "Requisição de dados cadastrais",
        "numero_atena": "AT-2",
        "data_envio": "2024-01-09",
        "destinatarios": tuple(destinatarios),
    }
    values.update(overrides)
    return OficioCircular(**values)


ANSWERED = Destinatario(nome="A", data_envio="2024-01-09", data_resposta="2024-01-19", codigo_rastreio="X", respondido=True)


def test_media_is_never_incomplete():
    assert is_incomplete(Midia(id=1, demanda_id=1)) is False


def test_reports_need_completion_date():
    relatorio = Relatorio(id=1, demanda_id=1, tipo=DocumentoTipo.AUTOS_CIRCUNSTANCIADOS)
    assert is_incomplete(relatorio) is True
    done = Relatorio(id=1, demanda_id=1, tipo=DocumentoTipo.AUTOS_CIRCUNSTANCIADOS, data_finalizacao="2024-02-01")
    assert is_incomplete(done) is False


def test_sent_tracked_unanswered_letter_is_flagged():
    assert is_incomplete(_oficio(respondido=False)) is True


def test_request_letter_rules():
    assert is_incomplete(_oficio(numero_atena="")) is True
    assert is_incomplete(_oficio(data_envio=None)) is True
    assert is_incomplete(_oficio(codigo_rastreio="", respondido=True, data_resposta="2024-01-20")) is True
    assert is_incomplete(_oficio(respondido=True)) is True
    assert is_incomplete(_oficio(respondido=True, data_resposta="2024-01-20")) is False
    assert (
        is_incomplete(_oficio(codigo_rastreio="", nao_possui_rastreio=True, respondido=True, data_resposta="2024-01-20"))
        is False
    )


def test_forwarding_letter_requires_selection_for_its_subject():
    assert is_incomplete(_oficio(assunto="Encaminhamento de mídia", codigo_rastreio="")) is True
    assert is_incomplete(_oficio(assunto="Encaminhamento de mídia", selected_midias=("7",))) is False
    assert is_incomplete(_oficio(assunto="Encaminhamento de mídia", data_envio=None, selected_midias=("7",))) is True
    assert is_incomplete(_oficio(assunto="Encaminhamento de relatório técnico")) is True
    assert (
        is_incomplete(_oficio(assunto="Encaminhamento de relatório de inteligência", selected_relatorios_inteligencia=("3",)))
        is False
    )
    assert is_incomplete(_oficio(assunto="Encaminhamento de autos circunstanciados")) is True


def test_combined_report_and_media_needs_both_selections():
    assunto = "Encaminhamento de relatório técnico e mídia"
    assert is_incomplete(_oficio(assunto=assunto, selected_relatorios_tecnicos=("1",))) is True
    assert is_incomplete(_oficio(assunto=assunto, selected_midias=("2",))) is True
    assert is_incomplete(_oficio(assunto=assunto, selected_relatorios_tecnicos=("1",), selected_midias=("2",))) is False


def test_notice_and_other_subjects_need_no_selection():
    assert is_incomplete(_oficio(assunto="Comunicação de não cumprimento de decisão judicial")) is False
    assert is_incomplete(_oficio(assunto="Outros")) is False


def test_circular_other_subject_only_needs_sent_date():
    assert is_incomplete(_circular([], assunto="Outros")) is False
    assert is_incomplete(_circular([], assunto="Outros", data_envio=None)) is True
    assert is_incomplete(_circular([], assunto="Outros", numero_atena="")) is True


def test_circular_recipient_rules():
    assert is_incomplete(_circular([])) is True
    assert is_incomplete(_circular([Destinatario(nome="A")])) is True
    assert is_incomplete(_circular([ANSWERED])) is False
    assert is_incomplete(_circular([ANSWERED, Destinatario(nome="B")])) is False
    assert is_incomplete(_circular([ANSWERED], data_envio=None)) is True

    untracked = Destinatario(nome="B", data_envio="2024-01-09")
    assert recipient_incomplete(untracked) is True
    unanswered = Destinatario(nome="B", data_envio="2024-01-09", codigo_rastreio="Y")
    assert recipient_incomplete(unanswered) is True
    assert is_incomplete(_circular([ANSWERED, unanswered])) is True
    missing_answer = Destinatario(nome="C", data_envio="2024-01-09", nao_possui_rastreio=True, respondido=True)
    assert recipient_incomplete(missing_answer) is True


def test_evaluator_is_total_over_the_catalog():
    subjects = list(ASSUNTOS_ENCAMINHAMENTO) + ["Requisição", ""]
    flags = list(itertools.product([None, "2024-01-15"], ["", "BR1"], [False, True]))
    for assunto, (data_envio, rastreio, respondido) in itertools.product(subjects, flags):
        oficio = _oficio(assunto=assunto, data_envio=data_envio, codigo_rastreio=rastreio, respondido=respondido)
        circular = _circular(
            [Destinatario(nome="A", data_envio=data_envio, codigo_rastreio=rastreio, respondido=respondido)],
            assunto=assunto,
            data_envio=data_envio,
        )
        assert is_incomplete(oficio) in (True, False)
        assert is_incomplete(circular) in (True, False)


def test_unknown_variant_is_a_programming_error():
    with pytest.raises(TypeError):
        is_incomplete(object())


def test_collection_helpers():
    docs = [Midia(id=1, demanda_id=1), _oficio(), _oficio(id=3, respondido=True, data_resposta="2024-01-20")]
    incompletos = incomplete_documents(docs)
    assert len(incompletos) == 1
    assert isinstance(incompletos[0], Oficio)
    assert count_incomplete(docs) == 1
