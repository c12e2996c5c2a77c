from __future__ import annotations

from datetime import date, datetime, timezone

from flask_login import UserMixin
from sqlalchemy import CheckConstraint, Enum as SAEnum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from werkzeug.security import generate_password_hash

from app.core.extensions import db
from app.demandas.types import DemandaStatus, DocumentoTipo


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(db.String(120), nullable=False)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    role: Mapped[str] = mapped_column(db.String(30), nullable=False, default="analista")
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)


class Demanda(db.Model):
    __tablename__ = "demanda"
    __table_args__ = (
        CheckConstraint("data_final IS NULL OR data_final >= data_inicial", name="ck_demanda_final_date"),
        CheckConstraint(
            "nova_data_final IS NULL OR data_reabertura IS NULL OR nova_data_final >= data_reabertura",
            name="ck_demanda_new_final_date",
        ),
        Index("ix_demanda_status_analista", "status", "analista"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    sged: Mapped[str] = mapped_column(db.String(40), nullable=False, unique=True)
    tipo_demanda: Mapped[str] = mapped_column(db.String(120), nullable=False, default="")
    orgao: Mapped[str] = mapped_column(db.String(120), nullable=False, default="")
    analista: Mapped[str] = mapped_column(db.String(120), nullable=False, default="")
    descricao: Mapped[str] = mapped_column(db.String(500), nullable=False, default="")
    status: Mapped[DemandaStatus] = mapped_column(
        SAEnum(DemandaStatus, name="demanda_status"),
        nullable=False,
        default=DemandaStatus.FILA_DE_ESPERA,
    )
    data_inicial: Mapped[date] = mapped_column(nullable=False)
    data_final: Mapped[date | None] = mapped_column(nullable=True)
    data_reabertura: Mapped[date | None] = mapped_column(nullable=True)
    nova_data_final: Mapped[date | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    documentos = relationship(
        "Documento",
        back_populates="demanda",
        order_by="Documento.id",
    )


class Documento(db.Model):
    __tablename__ = "documento"
    __table_args__ = (
        Index("ix_documento_demanda_tipo", "demanda_id", "tipo_documento"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    demanda_id: Mapped[int] = mapped_column(ForeignKey("demanda.id"), nullable=False, index=True)
    tipo_documento: Mapped[DocumentoTipo] = mapped_column(
        SAEnum(DocumentoTipo, name="documento_tipo"),
        nullable=False,
    )
    assunto: Mapped[str] = mapped_column(db.String(200), nullable=False, default="")
    numero_documento: Mapped[str] = mapped_column(db.String(40), nullable=False, default="")
    numero_atena: Mapped[str] = mapped_column(db.String(40), nullable=False, default="")
    destinatario: Mapped[str] = mapped_column(db.String(255), nullable=False, default="")
    data_envio: Mapped[date | None] = mapped_column(nullable=True)
    data_resposta: Mapped[date | None] = mapped_column(nullable=True)
    data_finalizacao: Mapped[date | None] = mapped_column(nullable=True)
    codigo_rastreio: Mapped[str] = mapped_column(db.String(60), nullable=False, default="")
    nao_possui_rastreio: Mapped[bool] = mapped_column(nullable=False, default=False)
    respondido: Mapped[bool] = mapped_column(nullable=False, default=False)
    apresentou_defeito: Mapped[bool] = mapped_column(nullable=False, default=False)
    selected_midias: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    selected_relatorios_tecnicos: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    selected_relatorios_inteligencia: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    selected_autos_circunstanciados: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    selected_decisoes: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    demanda = relationship("Demanda", back_populates="documentos")
    destinatarios = relationship(
        "DestinatarioCircular",
        back_populates="documento",
        cascade="all, delete-orphan",
        order_by="DestinatarioCircular.ordem",
    )


class DestinatarioCircular(db.Model):
    __tablename__ = "destinatario_circular"
    __table_args__ = (
        CheckConstraint(
            "data_resposta IS NULL OR data_envio IS NOT NULL",
            name="ck_destinatario_resposta_after_envio",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    documento_id: Mapped[int] = mapped_column(ForeignKey("documento.id"), nullable=False, index=True)
    ordem: Mapped[int] = mapped_column(nullable=False, default=0)
    nome: Mapped[str] = mapped_column(db.String(120), nullable=False)
    data_envio: Mapped[date | None] = mapped_column(nullable=True)
    data_resposta: Mapped[date | None] = mapped_column(nullable=True)
    codigo_rastreio: Mapped[str] = mapped_column(db.String(60), nullable=False, default="")
    nao_possui_rastreio: Mapped[bool] = mapped_column(nullable=False, default=False)
    respondido: Mapped[bool] = mapped_column(nullable=False, default=False)

    documento = relationship("Documento", back_populates="destinatarios")


def seed_demo_data(session) -> None:
    admin = User(
        email="admin@demandas.local",
        full_name="Admin Demandas",
        password_hash=generate_password_hash("admin123"),
        role="admin",
    )
    analista = User(
        email="analista@demandas.local",
        full_name="Ana Analista",
        password_hash=generate_password_hash("analista123"),
        role="analista",
    )
    session.add_all([admin, analista])
    session.flush()

    aberta = Demanda(
        sged="23412",
        tipo_demanda="Cooperação Técnica",
        orgao="Vara Criminal",
        analista="Ana Analista",
        descricao="Demanda aberta sem data final",
        status=DemandaStatus.EM_ANDAMENTO,
        data_inicial=date(2024, 1, 10),
    )
    finalizada = Demanda(
        sged="23413",
        tipo_demanda="Requisição Judicial",
        orgao="Ministério Público",
        analista="Bruno Souza",
        descricao="Demanda finalizada",
        status=DemandaStatus.FINALIZADA,
        data_inicial=date(2024, 1, 10),
        data_final=date(2024, 2, 1),
    )
    reaberta = Demanda(
        sged="23414",
        tipo_demanda="Requisição Judicial",
        orgao="Polícia Federal",
        analista="Ana Analista",
        descricao="Demanda reaberta aguardando nova finalização",
        status=DemandaStatus.EM_ANDAMENTO,
        data_inicial=date(2023, 11, 3),
        data_final=date(2023, 12, 15),
        data_reabertura=date(2024, 1, 8),
    )
    fila = Demanda(
        sged="23415",
        tipo_demanda="Cooperação Técnica",
        orgao="Vara Federal",
        analista="Bruno Souza",
        descricao="Demanda sem documentos",
        status=DemandaStatus.FILA_DE_ESPERA,
        data_inicial=date(2024, 3, 4),
    )
    session.add_all([aberta, finalizada, reaberta, fila])
    session.flush()

    midia = Documento(
        demanda_id=aberta.id,
        tipo_documento=DocumentoTipo.MIDIA,
        assunto="",
        numero_documento="M-001/2024",
    )
    relatorio = Documento(
        demanda_id=aberta.id,
        tipo_documento=DocumentoTipo.RELATORIO_TECNICO,
        assunto="Análise de dados",
        numero_documento="RT-001/2024",
    )
    session.add_all([midia, relatorio])
    session.flush()

    session.add_all(
        [
            Documento(
                demanda_id=aberta.id,
                tipo_documento=DocumentoTipo.OFICIO,
                assunto="Requisição de dados cadastrais",
                numero_documento="OF-010/2024",
                numero_atena="AT-1001",
                destinatario="Operadora Alfa",
                data_envio=date(2024, 1, 15),
                codigo_rastreio="BR123456789",
                respondido=False,
            ),
            Documento(
                demanda_id=aberta.id,
                tipo_documento=DocumentoTipo.OFICIO,
                assunto="Encaminhamento de mídia",
                numero_documento="OF-011/2024",
                numero_atena="AT-1002",
                destinatario="Vara Criminal",
                data_envio=date(2024, 1, 20),
                nao_possui_rastreio=True,
                selected_midias=[str(midia.id)],
            ),
            Documento(
                demanda_id=finalizada.id,
                tipo_documento=DocumentoTipo.OFICIO,
                assunto="Requisição de dados cadastrais",
                numero_documento="OF-012/2024",
                numero_atena="AT-1003",
                destinatario="Operadora Beta",
                data_envio=date(2024, 1, 12),
                data_resposta=date(2024, 1, 25),
                codigo_rastreio="BR987654321",
                respondido=True,
            ),
            Documento(
                demanda_id=finalizada.id,
                tipo_documento=DocumentoTipo.RELATORIO_INTELIGENCIA,
                assunto="Consolidação",
                numero_documento="RI-004/2024",
                data_finalizacao=date(2024, 1, 30),
            ),
        ]
    )

    circular = Documento(
        demanda_id=reaberta.id,
        tipo_documento=DocumentoTipo.OFICIO_CIRCULAR,
        assunto="Requisição de dados cadastrais",
        numero_documento="OC-002/2024",
        numero_atena="AT-1004",
        destinatario="Operadora Alfa, Operadora Beta e Operadora Gama",
        data_envio=date(2024, 1, 9),
    )
    circular.destinatarios = [
        DestinatarioCircular(
            ordem=0,
            nome="Operadora Alfa",
            data_envio=date(2024, 1, 9),
            data_resposta=date(2024, 1, 19),
            codigo_rastreio="BR111",
            respondido=True,
        ),
        DestinatarioCircular(
            ordem=1,
            nome="Operadora Beta",
            data_envio=date(2024, 1, 9),
            codigo_rastreio="BR222",
        ),
        DestinatarioCircular(ordem=2, nome="Operadora Gama"),
    ]
    session.add(circular)
    session.commit()
