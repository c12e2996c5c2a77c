from __future__ import annotations

from datetime import date

from app.demandas.lifecycle import (
    MSG_DATA_FUTURA,
    MSG_FINAL_ANTES_INICIAL,
    MSG_FINAL_FUTURA,
    MSG_NOVA_FINAL_ANTES_REABERTURA,
    MSG_NOVA_FINAL_FUTURA,
    MSG_REABERTURA_ANTES_FINAL,
    MSG_REABERTURA_FUTURA,
    LifecycleState,
    effective_final_date,
    lifecycle_state,
    validate_date_not_future,
    validate_final_date,
    validate_new_final_date,
    validate_reopening_date,
)
from app.demandas.orchestrator import TempDemandStates
from app.demandas.types import DemandaSnapshot

TODAY = date(2024, 6, 1)


def test_final_date_bounds(open_demand):
    assert validate_final_date("09/01/2024", open_demand, today=TODAY).message == MSG_FINAL_ANTES_INICIAL
    assert validate_final_date("02/06/2024", open_demand, today=TODAY).message == MSG_FINAL_FUTURA
    assert validate_final_date("10/01/2024", open_demand, today=TODAY).valid
    assert validate_final_date("01/06/2024", open_demand, today=TODAY).valid
    assert validate_final_date(date(2024, 3, 1), open_demand, today=TODAY).valid


def test_malformed_dates_impose_no_constraint(open_demand):
    assert validate_final_date("99/99/2024", open_demand, today=TODAY).valid
    assert validate_final_date("", open_demand, today=TODAY).valid
    no_initial = DemandaSnapshot(id=2, data_inicial=None)
    assert validate_final_date("01/01/1990", no_initial, today=TODAY).valid
    assert validate_final_date("02/06/2024", no_initial, today=TODAY).message == MSG_FINAL_FUTURA
    assert validate_reopening_date("ontem", open_demand, today=TODAY).valid


def test_reopening_date_against_edited_final_date(finalized_demand):
    assert validate_reopening_date("01/02/2024", finalized_demand, today=TODAY).valid
    result = validate_reopening_date("31/01/2024", finalized_demand, today=TODAY)
    assert result.valid is False
    assert result.message == MSG_REABERTURA_ANTES_FINAL
    assert validate_reopening_date("02/06/2024", finalized_demand, today=TODAY).message == MSG_REABERTURA_FUTURA

    edited = TempDemandStates(data_final="2024-03-01")
    assert validate_reopening_date("15/02/2024", finalized_demand, edited, today=TODAY).message == (
        MSG_REABERTURA_ANTES_FINAL
    )


def test_new_final_date_against_edited_reopening_date(finalized_demand):
    edited = TempDemandStates(data_reabertura="2024-03-01")
    assert validate_new_final_date("01/03/2024", finalized_demand, edited, today=TODAY).valid
    assert validate_new_final_date("29/02/2024", finalized_demand, edited, today=TODAY).message == (
        MSG_NOVA_FINAL_ANTES_REABERTURA
    )
    assert validate_new_final_date("02/06/2024", finalized_demand, edited, today=TODAY).message == (
        MSG_NOVA_FINAL_FUTURA
    )
    assert validate_new_final_date("01/01/2024", finalized_demand, today=TODAY).valid


def test_date_not_future_skips_partial_input():
    assert validate_date_not_future("02/06/2024", today=TODAY).message == MSG_DATA_FUTURA
    assert validate_date_not_future("01/06/2024", today=TODAY).valid
    assert validate_date_not_future("02/06", today=TODAY).valid
    assert validate_date_not_future(None, today=TODAY).valid


def test_lifecycle_states():
    base = {"id": 1, "data_inicial": "2024-01-10"}
    assert lifecycle_state(DemandaSnapshot(**base)) == LifecycleState.ABERTA
    finalized = DemandaSnapshot(**base, data_final="2024-02-01")
    assert lifecycle_state(finalized) == LifecycleState.FINALIZADA
    reopened = DemandaSnapshot(**base, data_final="2024-02-01", data_reabertura="2024-03-01")
    assert lifecycle_state(reopened) == LifecycleState.REABERTA_PENDENTE
    assert effective_final_date(reopened) is None
    refinalized = DemandaSnapshot(
        **base, data_final="2024-02-01", data_reabertura="2024-03-01", nova_data_final="2024-03-20"
    )
    assert lifecycle_state(refinalized) == LifecycleState.REABERTA_FINALIZADA
    assert effective_final_date(refinalized) == date(2024, 3, 20)
    assert effective_final_date(finalized) == date(2024, 2, 1)
