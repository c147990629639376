"""
Services do bounded context de Pedidos.
"""

from .service_pedidos import PedidoService
from .service_pedido_status import PedidoStatusService
from .service_pedido_kanban import KanbanService

__all__ = [
    "PedidoService",
    "PedidoStatusService",
    "KanbanService",
]
