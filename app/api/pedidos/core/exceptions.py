"""
Exceções do domínio de status de pedidos.

- StatusInvalidoError: valor fora do conjunto fechado de status (defeito de
  programação ou dado corrompido). Deve ser logado como erro.
- TransicaoNaoPermitidaError: movimento bem formado mas não permitido. É um
  resultado esperado; só a camada de serviço levanta, ao recusar uma escrita.
"""
from typing import Any


class PedidoStatusError(Exception):
    """Base para erros de status de pedido."""


class StatusInvalidoError(PedidoStatusError, ValueError):
    def __init__(self, valor: Any):
        self.valor = valor
        super().__init__(f"Status de pedido inválido: {valor!r}")


class TransicaoNaoPermitidaError(PedidoStatusError):
    def __init__(self, status_atual, status_novo):
        self.status_atual = status_atual
        self.status_novo = status_novo
        atual = getattr(status_atual, "value", status_atual)
        novo = getattr(status_novo, "value", status_novo)
        super().__init__(f"Transição não permitida: {atual} → {novo}")
