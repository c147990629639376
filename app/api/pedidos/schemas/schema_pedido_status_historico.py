from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from app.api.pedidos.core.status_machine import StatusPedido


class PedidoStatusHistoricoOut(BaseModel):
    """Entrada do histórico; `status_anterior` nulo indica a criação do pedido."""
    id: int
    pedido_id: int
    status_anterior: Optional[StatusPedido] = None
    status_novo: StatusPedido
    alterado_por: Optional[str] = None
    observacao: Optional[str] = None
    resumo: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HistoricoDoPedidoResponse(BaseModel):
    pedido_id: int
    historicos: List[PedidoStatusHistoricoOut]

    model_config = ConfigDict(from_attributes=True)
