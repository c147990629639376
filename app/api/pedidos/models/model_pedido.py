# app/api/pedidos/models/model_pedido.py
import enum

from sqlalchemy import (
    Column, Integer, String, DateTime, Numeric, Text, Enum as SAEnum, Index
)
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed
from app.api.pedidos.core.status_machine import (
    BadgeStyle,
    StatusPedido,
    badge_style_for,
    label_for,
)


class TipoEntrega(enum.Enum):
    """Modalidade do pedido."""
    DELIVERY = "delivery"
    BALCAO = "balcao"
    MESA = "mesa"


class FormaPagamento(enum.Enum):
    DINHEIRO = "dinheiro"
    PIX = "pix"
    CREDITO = "credito"
    DEBITO = "debito"


# ENUMs do PostgreSQL no schema pedidos (criados em app/database/infrastructure/enums.py)
StatusPedidoEnum = SAEnum(
    *[s.value for s in StatusPedido],
    name="pedido_status_enum",
    create_type=False,
    schema="pedidos"
)

TipoEntregaEnum = SAEnum(
    *[t.value for t in TipoEntrega],
    name="tipo_entrega_enum",
    create_type=False,
    schema="pedidos"
)

FormaPagamentoEnum = SAEnum(
    *[f.value for f in FormaPagamento],
    name="forma_pagamento_enum",
    create_type=False,
    schema="pedidos"
)


class PedidoModel(Base):
    """
    Pedido do fluxo Kanban.

    O campo `status` só deve ser alterado pelo PedidoRepository depois que a
    máquina de estados aprovou a transição (ver PedidoStatusService).
    """
    __tablename__ = "pedidos"
    __table_args__ = (
        Index("idx_pedidos_status", "status"),
        Index("idx_pedidos_status_ordem", "status", "ordem_kanban"),
        Index("idx_pedidos_created_at", "created_at"),
        {"schema": "pedidos"},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    numero_pedido = Column(String(20), nullable=False, unique=True)

    # Dados do cliente
    nome_cliente = Column(String(120), nullable=True)
    telefone_cliente = Column(String(20), nullable=True)

    # Entrega
    tipo_entrega = Column(TipoEntregaEnum, nullable=False, default=TipoEntrega.DELIVERY.value)
    endereco_entrega = Column(String(255), nullable=True)

    # Status e controle
    status = Column(StatusPedidoEnum, nullable=False, default=StatusPedido.PENDENTE.value)
    ordem_kanban = Column(Integer, nullable=False, default=0)

    # Valores
    subtotal = Column(Numeric(18, 2), nullable=False, default=0)
    taxa_entrega = Column(Numeric(18, 2), nullable=False, default=0)
    total = Column(Numeric(18, 2), nullable=False, default=0)
    forma_pagamento = Column(FormaPagamentoEnum, nullable=False, default=FormaPagamento.DINHEIRO.value)
    troco_para = Column(Numeric(18, 2), nullable=True)

    # Observações
    observacoes = Column(Text, nullable=True)
    motivo_cancelamento = Column(Text, nullable=True)

    # Auditoria
    alterado_por = Column(String(60), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)

    historico = relationship(
        "PedidoHistoricoModel",
        back_populates="pedido",
        cascade="all, delete-orphan",
        order_by="PedidoHistoricoModel.id",
    )

    @property
    def status_label(self) -> str:
        return label_for(self.status)

    @property
    def status_badge(self) -> BadgeStyle:
        return badge_style_for(self.status)
