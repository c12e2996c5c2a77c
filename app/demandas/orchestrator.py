"""Turns an edited demand form into the field patch to persist.

The result carries either ``data`` (the patch) or ``error`` (a user-facing
message), never both.  Dates in the patch use the display form
``DD/MM/YYYY``; an empty string clears the field.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from app.demandas.dates import SORTABLE_RE, format_for_display, to_sortable
from app.demandas.lifecycle import (
    validate_final_date,
    validate_new_final_date,
    validate_reopening_date,
)
from app.demandas.types import DemandaSnapshot, DemandaStatus, is_set, is_truthy

MSG_REABERTURA_OBRIGATORIA = "Data de reabertura é obrigatória quando marcado como reaberto."
MSG_REABERTURA_SEM_FINAL = "Informe a data final antes de reabrir a demanda."
MSG_STATUS_INVALIDO = "Status inválido."


class ModalType(str, Enum):
    FINAL_DATE = "final_date"
    REOPEN_DEMAND = "reopen_demand"
    STATUS_UPDATE = "status_update"
    DEFAULT = "default"


@dataclass
class TempDemandStates:
    data_final: str = ""
    is_reaberto: bool = False
    data_reabertura: str = ""
    nova_data_final: str = ""
    status: str = DemandaStatus.EM_ANDAMENTO.value
    observacoes: str = ""


@dataclass
class UpdateResult:
    data: dict[str, str] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_sortable(value) -> str:
    if not is_set(value):
        return ""
    if isinstance(value, date):
        return value.isoformat()
    raw = str(value).strip()
    if SORTABLE_RE.match(raw):
        return raw
    return to_sortable(raw) or raw


def _display(value) -> str:
    return format_for_display(value) or str(value).strip()


def _parse_status(value) -> DemandaStatus | None:
    try:
        return DemandaStatus(value)
    except ValueError:
        pass
    try:
        return DemandaStatus[str(value or "").strip().upper()]
    except KeyError:
        return None


def temp_states_from_payload(payload: dict) -> TempDemandStates:
    return TempDemandStates(
        data_final=str(payload.get("data_final") or "").strip(),
        is_reaberto=is_truthy(payload.get("is_reaberto")),
        data_reabertura=str(payload.get("data_reabertura") or "").strip(),
        nova_data_final=str(payload.get("nova_data_final") or "").strip(),
        status=str(payload.get("status") or "").strip(),
        observacoes=str(payload.get("observacoes") or "").strip(),
    )


def get_modal_type(demanda: DemandaSnapshot | None, context: str | None = None) -> ModalType:
    if demanda is None:
        return ModalType.DEFAULT
    if context == "reopen":
        return ModalType.REOPEN_DEMAND
    if context == "final_date":
        return ModalType.FINAL_DATE
    if context == "status":
        return ModalType.STATUS_UPDATE
    return ModalType.FINAL_DATE


def initialize_temp_states(demanda: DemandaSnapshot | None) -> TempDemandStates:
    if demanda is None:
        return TempDemandStates()
    status = demanda.status.value if isinstance(demanda.status, DemandaStatus) else demanda.status
    return TempDemandStates(
        data_final=_as_sortable(demanda.data_final),
        is_reaberto=is_set(demanda.data_reabertura),
        data_reabertura=_as_sortable(demanda.data_reabertura),
        nova_data_final=_as_sortable(demanda.nova_data_final),
        status=status or DemandaStatus.EM_ANDAMENTO.value,
    )


def has_changes(temp: TempDemandStates, initial: TempDemandStates, modal_type: ModalType | str) -> bool:
    modal_type = ModalType(modal_type)

    def changed(attr: str) -> bool:
        return format_for_display(getattr(temp, attr)) != format_for_display(getattr(initial, attr))

    if modal_type == ModalType.FINAL_DATE:
        return (
            changed("data_final")
            or temp.is_reaberto != initial.is_reaberto
            or changed("data_reabertura")
            or changed("nova_data_final")
        )
    if modal_type == ModalType.REOPEN_DEMAND:
        if is_set(initial.data_reabertura):
            return temp.is_reaberto != initial.is_reaberto or changed("nova_data_final")
        return temp.is_reaberto != initial.is_reaberto or changed("data_reabertura") or changed("nova_data_final")
    if modal_type == ModalType.STATUS_UPDATE:
        return temp.status != initial.status
    return (
        changed("data_final")
        or temp.is_reaberto != initial.is_reaberto
        or changed("data_reabertura")
        or changed("nova_data_final")
        or temp.status != initial.status
        or temp.observacoes != initial.observacoes
    )


def _prepare_final_or_reopen(
    temp: TempDemandStates,
    demanda: DemandaSnapshot,
    today: date | None,
) -> UpdateResult:
    patch: dict[str, str] = {}

    if temp.is_reaberto:
        if not is_set(temp.data_reabertura):
            return UpdateResult(error=MSG_REABERTURA_OBRIGATORIA)
        # reopening needs a final date, either persisted or entered alongside
        if not is_set(demanda.data_final) and not is_set(temp.data_final):
            return UpdateResult(error=MSG_REABERTURA_SEM_FINAL)
        # an edited final date is persisted; the reopening date is checked against it
        if is_set(temp.data_final) and _as_sortable(temp.data_final) != _as_sortable(demanda.data_final):
            check = validate_final_date(temp.data_final, demanda, today=today)
            if not check.valid:
                return UpdateResult(error=check.message)
            patch["data_final"] = _display(temp.data_final)
        check = validate_reopening_date(temp.data_reabertura, demanda, temp, today=today)
        if not check.valid:
            return UpdateResult(error=check.message)
        if is_set(temp.nova_data_final):
            check = validate_new_final_date(temp.nova_data_final, demanda, temp, today=today)
            if not check.valid:
                return UpdateResult(error=check.message)
        patch["data_reabertura"] = _display(temp.data_reabertura)
        patch["nova_data_final"] = _display(temp.nova_data_final) if is_set(temp.nova_data_final) else ""
        patch["status"] = (
            DemandaStatus.FINALIZADA if is_set(temp.nova_data_final) else DemandaStatus.EM_ANDAMENTO
        )
        return UpdateResult(data=patch)

    if is_set(demanda.data_reabertura):
        patch["data_reabertura"] = ""
        patch["nova_data_final"] = ""

    if is_set(temp.data_final):
        check = validate_final_date(temp.data_final, demanda, today=today)
        if not check.valid:
            return UpdateResult(error=check.message)
        patch["data_final"] = _display(temp.data_final)
        patch["status"] = DemandaStatus.FINALIZADA
    else:
        patch["data_final"] = ""
        patch["status"] = DemandaStatus.EM_ANDAMENTO
    return UpdateResult(data=patch)


def prepare_update(
    temp: TempDemandStates,
    modal_type: ModalType | str,
    demanda: DemandaSnapshot,
    today: date | None = None,
) -> UpdateResult:
    try:
        modal_type = ModalType(modal_type)
    except ValueError:
        modal_type = ModalType.DEFAULT

    if modal_type in (ModalType.FINAL_DATE, ModalType.REOPEN_DEMAND):
        return _prepare_final_or_reopen(temp, demanda, today)

    if modal_type == ModalType.STATUS_UPDATE:
        status = _parse_status(temp.status)
        if status is None:
            return UpdateResult(error=MSG_STATUS_INVALIDO)
        return UpdateResult(data={"status": status})

    patch: dict[str, str] = {}
    if is_set(temp.data_final):
        check = validate_final_date(temp.data_final, demanda, today=today)
        if not check.valid:
            return UpdateResult(error=check.message)
        patch["data_final"] = _display(temp.data_final)
    if is_set(temp.status):
        status = _parse_status(temp.status)
        if status is None:
            return UpdateResult(error=MSG_STATUS_INVALIDO)
        patch["status"] = status
    return UpdateResult(data=patch)
