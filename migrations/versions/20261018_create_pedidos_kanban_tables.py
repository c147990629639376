"""Create pedidos/pedidos_historico tables and status ENUMs

Revision ID: 20261018_create_pedidos_kanban_tables
Revises: 
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_create_pedidos_kanban_tables"
down_revision = None
branch_labels = None
depends_on = None


STATUS_VALUES = ("pendente", "em_preparo", "saiu_entrega", "finalizado", "cancelado")
TIPO_ENTREGA_VALUES = ("delivery", "balcao", "mesa")
FORMA_PAGAMENTO_VALUES = ("dinheiro", "pix", "credito", "debito")

status_enum = postgresql.ENUM(*STATUS_VALUES, name="pedido_status_enum", schema="pedidos", create_type=False)
tipo_entrega_enum = postgresql.ENUM(*TIPO_ENTREGA_VALUES, name="tipo_entrega_enum", schema="pedidos", create_type=False)
forma_pagamento_enum = postgresql.ENUM(*FORMA_PAGAMENTO_VALUES, name="forma_pagamento_enum", schema="pedidos", create_type=False)


def upgrade() -> None:
    # Ensure schema exists
    op.execute("CREATE SCHEMA IF NOT EXISTS pedidos")

    bind = op.get_bind()
    status_enum.create(bind, checkfirst=True)
    tipo_entrega_enum.create(bind, checkfirst=True)
    forma_pagamento_enum.create(bind, checkfirst=True)

    # pedidos.pedidos
    op.create_table(
        "pedidos",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("numero_pedido", sa.String(20), nullable=False, unique=True),
        sa.Column("nome_cliente", sa.String(120), nullable=True),
        sa.Column("telefone_cliente", sa.String(20), nullable=True),
        sa.Column("tipo_entrega", tipo_entrega_enum, nullable=False, server_default="delivery"),
        sa.Column("endereco_entrega", sa.String(255), nullable=True),
        sa.Column("status", status_enum, nullable=False, server_default="pendente"),
        sa.Column("ordem_kanban", sa.Integer, nullable=False, server_default="0"),
        sa.Column("subtotal", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("taxa_entrega", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("forma_pagamento", forma_pagamento_enum, nullable=False, server_default="dinheiro"),
        sa.Column("troco_para", sa.Numeric(18, 2), nullable=True),
        sa.Column("observacoes", sa.Text, nullable=True),
        sa.Column("motivo_cancelamento", sa.Text, nullable=True),
        sa.Column("alterado_por", sa.String(60), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        schema="pedidos",
    )
    op.create_index("idx_pedidos_status", "pedidos", ["status"], schema="pedidos")
    op.create_index("idx_pedidos_status_ordem", "pedidos", ["status", "ordem_kanban"], schema="pedidos")
    op.create_index("idx_pedidos_created_at", "pedidos", ["created_at"], schema="pedidos")

    # pedidos.pedidos_historico (somente inserção)
    op.create_table(
        "pedidos_historico",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("pedido_id", sa.Integer, sa.ForeignKey("pedidos.pedidos.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status_anterior", status_enum, nullable=True),
        sa.Column("status_novo", status_enum, nullable=False),
        sa.Column("alterado_por", sa.String(60), nullable=True),
        sa.Column("observacao", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        schema="pedidos",
    )
    op.create_index("idx_pedidos_historico_pedido", "pedidos_historico", ["pedido_id"], schema="pedidos")
    op.create_index("idx_pedidos_historico_status_novo", "pedidos_historico", ["status_novo"], schema="pedidos")
    op.create_index(
        "idx_pedidos_historico_pedido_created_at",
        "pedidos_historico",
        ["pedido_id", "created_at"],
        schema="pedidos",
    )


def downgrade() -> None:
    op.drop_index("idx_pedidos_historico_pedido_created_at", table_name="pedidos_historico", schema="pedidos")
    op.drop_index("idx_pedidos_historico_status_novo", table_name="pedidos_historico", schema="pedidos")
    op.drop_index("idx_pedidos_historico_pedido", table_name="pedidos_historico", schema="pedidos")
    op.drop_table("pedidos_historico", schema="pedidos")

    op.drop_index("idx_pedidos_created_at", table_name="pedidos", schema="pedidos")
    op.drop_index("idx_pedidos_status_ordem", table_name="pedidos", schema="pedidos")
    op.drop_index("idx_pedidos_status", table_name="pedidos", schema="pedidos")
    op.drop_table("pedidos", schema="pedidos")

    bind = op.get_bind()
    forma_pagamento_enum.drop(bind, checkfirst=True)
    tipo_entrega_enum.drop(bind, checkfirst=True)
    status_enum.drop(bind, checkfirst=True)
