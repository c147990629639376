# app/api/pedidos/models/model_pedido_historico.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed
from .model_pedido import StatusPedidoEnum


class PedidoHistoricoModel(Base):
    """
    Histórico de mudanças de status (somente inserção).

    A primeira entrada de cada pedido tem `status_anterior` nulo (criação).
    Registros nunca são alterados nem removidos pela aplicação.
    """
    __tablename__ = "pedidos_historico"
    __table_args__ = (
        Index("idx_pedidos_historico_pedido", "pedido_id"),
        Index("idx_pedidos_historico_status_novo", "status_novo"),
        Index("idx_pedidos_historico_pedido_created_at", "pedido_id", "created_at"),
        {"schema": "pedidos"},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    pedido_id = Column(
        Integer,
        ForeignKey("pedidos.pedidos.id", ondelete="CASCADE"),
        nullable=False
    )
    pedido = relationship("PedidoModel", back_populates="historico")

    status_anterior = Column(StatusPedidoEnum, nullable=True)
    status_novo = Column(StatusPedidoEnum, nullable=False)

    alterado_por = Column(String(60), nullable=True)
    observacao = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)

    @property
    def resumo(self) -> str:
        if self.status_anterior is None:
            return f"Pedido criado como '{self.status_novo}'"
        return f"Status alterado de '{self.status_anterior}' para '{self.status_novo}'"
