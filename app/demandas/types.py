from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class DemandaStatus(str, Enum):
    EM_ANDAMENTO = "Em Andamento"
    FINALIZADA = "Finalizada"
    FILA_DE_ESPERA = "Fila de Espera"
    AGUARDANDO = "Aguardando"


class DocumentoTipo(str, Enum):
    OFICIO = "Ofício"
    OFICIO_CIRCULAR = "Ofício Circular"
    MIDIA = "Mídia"
    RELATORIO_TECNICO = "Relatório Técnico"
    RELATORIO_INTELIGENCIA = "Relatório de Inteligência"
    AUTOS_CIRCUNSTANCIADOS = "Autos Circunstanciados"


class DocumentoStatus(str, Enum):
    NAO_ENVIADO = "Não Enviado"
    EM_PRODUCAO = "Em Produção"
    PENDENTE = "Pendente"
    ENCAMINHADO = "Encaminhado"
    RESPONDIDO = "Respondido"
    FINALIZADO = "Finalizado"
    SEM_STATUS = "Sem Status"


PRODUCAO_TIPOS = frozenset(
    {
        DocumentoTipo.RELATORIO_TECNICO,
        DocumentoTipo.RELATORIO_INTELIGENCIA,
        DocumentoTipo.AUTOS_CIRCUNSTANCIADOS,
    }
)

DateValue = date | str | None


@dataclass(frozen=True)
class Destinatario:
    nome: str
    data_envio: DateValue = None
    data_resposta: DateValue = None
    codigo_rastreio: str = ""
    nao_possui_rastreio: bool = False
    respondido: bool = False


@dataclass(frozen=True)
class Midia:
    id: int | None
    demanda_id: int | None
    assunto: str = ""
    apresentou_defeito: bool = False

    @property
    def tipo_documento(self) -> DocumentoTipo:
        return DocumentoTipo.MIDIA


@dataclass(frozen=True)
class Relatorio:
    """Technical report, intelligence report or detailed record."""

    id: int | None
    demanda_id: int | None
    tipo: DocumentoTipo
    assunto: str = ""
    data_finalizacao: DateValue = None

    def __post_init__(self) -> None:
        if self.tipo not in PRODUCAO_TIPOS:
            raise ValueError(f"Tipo de relatório inválido: {self.tipo}")

    @property
    def tipo_documento(self) -> DocumentoTipo:
        return self.tipo


@dataclass(frozen=True)
class Oficio:
    id: int | None
    demanda_id: int | None
    assunto: str = ""
    numero_atena: str = ""
    data_envio: DateValue = None
    data_resposta: DateValue = None
    codigo_rastreio: str = ""
    nao_possui_rastreio: bool = False
    respondido: bool = False
    selected_midias: tuple[str, ...] = ()
    selected_relatorios_tecnicos: tuple[str, ...] = ()
    selected_relatorios_inteligencia: tuple[str, ...] = ()
    selected_autos_circunstanciados: tuple[str, ...] = ()
    selected_decisoes: tuple[str, ...] = ()

    @property
    def tipo_documento(self) -> DocumentoTipo:
        return DocumentoTipo.OFICIO


@dataclass(frozen=True)
class OficioCircular:
    id: int | None
    demanda_id: int | None
    assunto: str = ""
    numero_atena: str = ""
    data_envio: DateValue = None
    data_resposta: DateValue = None
    codigo_rastreio: str = ""
    nao_possui_rastreio: bool = False
    respondido: bool = False
    destinatarios: tuple[Destinatario, ...] = field(default_factory=tuple)

    @property
    def tipo_documento(self) -> DocumentoTipo:
        return DocumentoTipo.OFICIO_CIRCULAR


DocumentoSnapshot = Midia | Relatorio | Oficio | OficioCircular


@dataclass(frozen=True)
class DemandaSnapshot:
    id: int | None
    data_inicial: DateValue
    status: DemandaStatus = DemandaStatus.EM_ANDAMENTO
    data_final: DateValue = None
    data_reabertura: DateValue = None
    nova_data_final: DateValue = None
    analista: str = ""


def is_set(value: object) -> bool:
    """Presence test for optional date/text fields (``None`` and blank strings are unset)."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


TRUTHY = frozenset({"1", "true", "on", "sim", "yes"})


def is_truthy(value: object) -> bool:
    """Form and JSON flag parsing: ``"false"``, ``"0"`` and blanks are False."""
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY
