from __future__ import annotations

from flask import current_app, has_app_context, has_request_context, session

SUPPORTED_LANGS = {"pt", "en"}

I18N: dict[str, dict[str, str]] = {
    "status.Em Andamento": {"pt": "Em Andamento", "en": "In progress"},
    "status.Finalizada": {"pt": "Finalizada", "en": "Finalized"},
    "status.Fila de Espera": {"pt": "Fila de Espera", "en": "Queued"},
    "status.Aguardando": {"pt": "Aguardando", "en": "Waiting"},
    "status.Não Enviado": {"pt": "Não Enviado", "en": "Not sent"},
    "status.Em Produção": {"pt": "Em Produção", "en": "In production"},
    "status.Pendente": {"pt": "Pendente", "en": "Pending"},
    "status.Encaminhado": {"pt": "Encaminhado", "en": "Forwarded"},
    "status.Respondido": {"pt": "Respondido", "en": "Answered"},
    "status.Finalizado": {"pt": "Finalizado", "en": "Completed"},
    "status.Sem Status": {"pt": "Sem Status", "en": "No status"},
    "lifecycle.Aberta": {"pt": "Aberta", "en": "Open"},
    "lifecycle.Finalizada": {"pt": "Finalizada", "en": "Finalized"},
    "lifecycle.Reaberta": {"pt": "Reaberta", "en": "Reopened"},
    "lifecycle.Reaberta e finalizada": {"pt": "Reaberta e finalizada", "en": "Reopened and finalized"},
    "auth.invalid_credentials": {"pt": "Credenciais inválidas", "en": "Invalid credentials"},
    "auth.login_required": {"pt": "Autenticação necessária", "en": "Authentication required"},
    "error.forbidden": {"pt": "Acesso negado", "en": "Forbidden"},
    "error.not_found": {"pt": "Recurso não encontrado", "en": "Not found"},
}


def get_locale() -> str:
    default = current_app.config.get("DEFAULT_LANG", "pt") if has_app_context() else "pt"
    lang = session.get("lang", default) if has_request_context() else default
    if lang not in SUPPORTED_LANGS:
        return "pt"
    return lang


def translate(key: str) -> str:
    lang = get_locale()
    return I18N.get(key, {}).get(lang, key)


def status_label(status: str) -> str:
    value = getattr(status, "value", status)
    return I18N.get(f"status.{value}", {}).get(get_locale(), value)


def lifecycle_label(state: str) -> str:
    value = getattr(state, "value", state)
    return I18N.get(f"lifecycle.{value}", {}).get(get_locale(), value)
