from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from app.demandas.dates import DateInput, compare_calendar_dates, parse_date
from app.demandas.dates import today as current_day
from app.demandas.types import DemandaSnapshot, is_set

MSG_FINAL_ANTES_INICIAL = "Data final não pode ser anterior à data inicial."
MSG_FINAL_FUTURA = "Data final não pode ser posterior à data atual."
MSG_REABERTURA_FUTURA = "Data de reabertura não pode ser posterior à data atual."
MSG_REABERTURA_ANTES_FINAL = "Data de reabertura não pode ser anterior à data final."
MSG_NOVA_FINAL_FUTURA = "Nova data final não pode ser posterior à data atual."
MSG_NOVA_FINAL_ANTES_REABERTURA = "A nova data final não pode ser anterior à data de reabertura."
MSG_DATA_FUTURA = "A data informada deve ser igual ou anterior à data atual."


class LifecycleState(str, Enum):
    ABERTA = "Aberta"
    FINALIZADA = "Finalizada"
    REABERTA_PENDENTE = "Reaberta"
    REABERTA_FINALIZADA = "Reaberta e finalizada"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(False, message)


def lifecycle_state(demanda: DemandaSnapshot) -> LifecycleState:
    if not is_set(demanda.data_final):
        return LifecycleState.ABERTA
    if not is_set(demanda.data_reabertura):
        return LifecycleState.FINALIZADA
    if not is_set(demanda.nova_data_final):
        return LifecycleState.REABERTA_PENDENTE
    return LifecycleState.REABERTA_FINALIZADA


def effective_final_date(demanda: DemandaSnapshot) -> date | None:
    """Final date currently in force: the new one after a reopening, else the first one."""
    if is_set(demanda.data_reabertura):
        return parse_date(demanda.nova_data_final)
    return parse_date(demanda.data_final)


def _is_future(candidate: DateInput, today: date | None) -> bool:
    return compare_calendar_dates(candidate, today or current_day()) == 1


def _is_before(candidate: DateInput, reference: DateInput) -> bool:
    return compare_calendar_dates(candidate, reference) == -1


def validate_final_date(
    candidate: DateInput,
    demanda: DemandaSnapshot,
    today: date | None = None,
) -> ValidationResult:
    # Unparseable values impose no constraint.
    if not is_set(candidate):
        return ValidationResult.ok()
    if is_set(demanda.data_inicial) and _is_before(candidate, demanda.data_inicial):
        return ValidationResult.fail(MSG_FINAL_ANTES_INICIAL)
    if _is_future(candidate, today):
        return ValidationResult.fail(MSG_FINAL_FUTURA)
    return ValidationResult.ok()


def validate_reopening_date(
    candidate: DateInput,
    demanda: DemandaSnapshot,
    temp_states=None,
    today: date | None = None,
) -> ValidationResult:
    if not is_set(candidate):
        return ValidationResult.ok()
    if _is_future(candidate, today):
        return ValidationResult.fail(MSG_REABERTURA_FUTURA)
    edited_final = getattr(temp_states, "data_final", None) if temp_states is not None else None
    final_reference = edited_final if is_set(edited_final) else demanda.data_final
    if is_set(final_reference) and _is_before(candidate, final_reference):
        return ValidationResult.fail(MSG_REABERTURA_ANTES_FINAL)
    return ValidationResult.ok()


def validate_new_final_date(
    candidate: DateInput,
    demanda: DemandaSnapshot,
    temp_states=None,
    today: date | None = None,
) -> ValidationResult:
    if not is_set(candidate):
        return ValidationResult.ok()
    if _is_future(candidate, today):
        return ValidationResult.fail(MSG_NOVA_FINAL_FUTURA)
    edited_reopening = getattr(temp_states, "data_reabertura", None) if temp_states is not None else None
    reopening_reference = edited_reopening if is_set(edited_reopening) else demanda.data_reabertura
    if is_set(reopening_reference) and _is_before(candidate, reopening_reference):
        return ValidationResult.fail(MSG_NOVA_FINAL_ANTES_REABERTURA)
    return ValidationResult.ok()


def validate_date_not_future(value: str | None, today: date | None = None) -> ValidationResult:
    """Document date fields (sent/response/completion) cannot be in the future.

    Partially typed values (anything but a full ``DD/MM/YYYY`` or
    ``YYYY-MM-DD``) are left alone.
    """
    if not value or len(value.strip()) != 10:
        return ValidationResult.ok()
    if _is_future(value.strip(), today):
        return ValidationResult.fail(MSG_DATA_FUTURA)
    return ValidationResult.ok()
