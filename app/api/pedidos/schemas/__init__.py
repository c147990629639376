from .schema_pedido import (
    FiltrosPedidos,
    KanbanColunaResponse,
    KanbanResponse,
    PedidoAcoesResponse,
    PedidoAvancarRequest,
    PedidoCancelarRequest,
    PedidoCreateRequest,
    PedidoMoverKanbanRequest,
    PedidoOrdemRequest,
    PedidoResponse,
    PedidoStatusPatchRequest,
    StatusInfoResponse,
)
from .schema_pedido_status_historico import (
    HistoricoDoPedidoResponse,
    PedidoStatusHistoricoOut,
)

__all__ = [
    "FiltrosPedidos",
    "HistoricoDoPedidoResponse",
    "KanbanColunaResponse",
    "KanbanResponse",
    "PedidoAcoesResponse",
    "PedidoAvancarRequest",
    "PedidoCancelarRequest",
    "PedidoCreateRequest",
    "PedidoMoverKanbanRequest",
    "PedidoOrdemRequest",
    "PedidoResponse",
    "PedidoStatusHistoricoOut",
    "PedidoStatusPatchRequest",
    "StatusInfoResponse",
]
