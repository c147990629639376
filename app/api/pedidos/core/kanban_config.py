"""Configuração das colunas do Kanban de pedidos."""
from dataclasses import dataclass

from app.api.pedidos.core.status_machine import StatusPedido, verificar_cobertura


@dataclass(frozen=True)
class ColunaKanban:
    id: StatusPedido
    titulo: str
    cor: str
    cor_texto: str
    icone: str
    ordem: int


COLUNAS_KANBAN: tuple[ColunaKanban, ...] = (
    ColunaKanban(StatusPedido.PENDENTE, "Pendente", "bg-yellow-500", "text-white", "clock", 1),
    ColunaKanban(StatusPedido.EM_PREPARO, "Em Preparo", "bg-blue-500", "text-white", "chef-hat", 2),
    ColunaKanban(StatusPedido.SAIU_ENTREGA, "Saiu para Entrega", "bg-purple-500", "text-white", "truck", 3),
    ColunaKanban(StatusPedido.FINALIZADO, "Finalizado", "bg-green-500", "text-white", "check-circle", 4),
    ColunaKanban(StatusPedido.CANCELADO, "Cancelado", "bg-red-500", "text-white", "x-circle", 5),
)

verificar_cobertura((c.id for c in COLUNAS_KANBAN), "COLUNAS_KANBAN")

COLUNAS_POR_STATUS = {coluna.id: coluna for coluna in COLUNAS_KANBAN}


def coluna_do_status(status: StatusPedido) -> ColunaKanban:
    return COLUNAS_POR_STATUS[status]
