"""
Models do bounded context de Pedidos.
"""

from .model_pedido import (
    PedidoModel,
    TipoEntrega,
    FormaPagamento,
    StatusPedidoEnum,
    TipoEntregaEnum,
    FormaPagamentoEnum,
)
from .model_pedido_historico import PedidoHistoricoModel

__all__ = [
    "PedidoModel",
    "PedidoHistoricoModel",
    # Enums e tipos
    "TipoEntrega",
    "FormaPagamento",
    "StatusPedidoEnum",
    "TipoEntregaEnum",
    "FormaPagamentoEnum",
]
