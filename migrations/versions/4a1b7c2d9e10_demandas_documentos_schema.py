"""demandas, documentos and circular recipients

Revision ID: 4a1b7c2d9e10
Revises:
Create Date: 2026-10-19 10:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4a1b7c2d9e10"
down_revision = None
branch_labels = None
depends_on = None

DEMANDA_STATUS = ("EM_ANDAMENTO", "FINALIZADA", "FILA_DE_ESPERA", "AGUARDANDO")
DOCUMENTO_TIPO = (
    "OFICIO",
    "OFICIO_CIRCULAR",
    "MIDIA",
    "RELATORIO_TECNICO",
    "RELATORIO_INTELIGENCIA",
    "AUTOS_CIRCUNSTANCIADOS",
)


def upgrade():
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=120), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=30), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "demanda",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sged", sa.String(length=40), nullable=False),
        sa.Column("tipo_demanda", sa.String(length=120), nullable=False),
        sa.Column("orgao", sa.String(length=120), nullable=False),
        sa.Column("analista", sa.String(length=120), nullable=False),
        sa.Column("descricao", sa.String(length=500), nullable=False),
        sa.Column("status", sa.Enum(*DEMANDA_STATUS, name="demanda_status"), nullable=False),
        sa.Column("data_inicial", sa.Date(), nullable=False),
        sa.Column("data_final", sa.Date(), nullable=True),
        sa.Column("data_reabertura", sa.Date(), nullable=True),
        sa.Column("nova_data_final", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("data_final IS NULL OR data_final >= data_inicial", name="ck_demanda_final_date"),
        sa.CheckConstraint(
            "nova_data_final IS NULL OR data_reabertura IS NULL OR nova_data_final >= data_reabertura",
            name="ck_demanda_new_final_date",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sged"),
    )
    with op.batch_alter_table("demanda", schema=None) as batch_op:
        batch_op.create_index("ix_demanda_status_analista", ["status", "analista"], unique=False)

    op.create_table(
        "documento",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("demanda_id", sa.Integer(), nullable=False),
        sa.Column("tipo_documento", sa.Enum(*DOCUMENTO_TIPO, name="documento_tipo"), nullable=False),
        sa.Column("assunto", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("numero_documento", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("numero_atena", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("destinatario", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("data_envio", sa.Date(), nullable=True),
        sa.Column("data_resposta", sa.Date(), nullable=True),
        sa.Column("data_finalizacao", sa.Date(), nullable=True),
        sa.Column("codigo_rastreio", sa.String(length=60), nullable=False, server_default=""),
        sa.Column("nao_possui_rastreio", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("respondido", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("apresentou_defeito", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("selected_midias", sa.JSON(), nullable=False),
        sa.Column("selected_relatorios_tecnicos", sa.JSON(), nullable=False),
        sa.Column("selected_relatorios_inteligencia", sa.JSON(), nullable=False),
        sa.Column("selected_autos_circunstanciados", sa.JSON(), nullable=False),
        sa.Column("selected_decisoes", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["demanda_id"], ["demanda.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("documento", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_documento_demanda_id"), ["demanda_id"], unique=False)
        batch_op.create_index("ix_documento_demanda_tipo", ["demanda_id", "tipo_documento"], unique=False)

    op.create_table(
        "destinatario_circular",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("documento_id", sa.Integer(), nullable=False),
        sa.Column("ordem", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("nome", sa.String(length=120), nullable=False),
        sa.Column("data_envio", sa.Date(), nullable=True),
        sa.Column("data_resposta", sa.Date(), nullable=True),
        sa.Column("codigo_rastreio", sa.String(length=60), nullable=False, server_default=""),
        sa.Column("nao_possui_rastreio", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("respondido", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint(
            "data_resposta IS NULL OR data_envio IS NOT NULL",
            name="ck_destinatario_resposta_after_envio",
        ),
        sa.ForeignKeyConstraint(["documento_id"], ["documento.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("destinatario_circular", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_destinatario_circular_documento_id"), ["documento_id"], unique=False)


def downgrade():
    with op.batch_alter_table("destinatario_circular", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_destinatario_circular_documento_id"))
    op.drop_table("destinatario_circular")

    with op.batch_alter_table("documento", schema=None) as batch_op:
        batch_op.drop_index("ix_documento_demanda_tipo")
        batch_op.drop_index(batch_op.f("ix_documento_demanda_id"))
    op.drop_table("documento")

    with op.batch_alter_table("demanda", schema=None) as batch_op:
        batch_op.drop_index("ix_demanda_status_analista")
    op.drop_table("demanda")
    op.drop_table("user_account")

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        op.execute(sa.text("DROP TYPE IF EXISTS documento_tipo"))
        op.execute(sa.text("DROP TYPE IF EXISTS demanda_status"))
