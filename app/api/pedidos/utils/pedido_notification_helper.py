"""
Helper para notificações de mudança de status de pedidos.

Chamado somente depois do commit: a mudança já está gravada, então falhas
aqui são logadas e nunca propagam para quem alterou o status. O transporte
(WebSocket, fila, push) fica com quem se inscreve no publisher.
"""
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Callable, Optional
import logging

from app.api.pedidos.core.status_machine import label_for
from app.api.pedidos.models.model_pedido import PedidoModel
from app.utils.database_utils import now_trimmed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PedidoStatusEvento:
    pedido_id: int
    numero_pedido: str
    status_anterior: Optional[str]
    status_novo: str
    status_label: str
    alterado_por: Optional[str] = None
    ocorrido_em: datetime = field(default_factory=now_trimmed)


Assinante = Callable[[PedidoStatusEvento], None]


class PedidoEventPublisher:
    """Publisher em processo; cada assinante recebe todos os eventos de status."""

    def __init__(self) -> None:
        self._assinantes: list[Assinante] = []
        self._lock = Lock()

    def inscrever(self, assinante: Assinante) -> Callable[[], None]:
        with self._lock:
            self._assinantes.append(assinante)

        def cancelar_inscricao() -> None:
            with self._lock:
                if assinante in self._assinantes:
                    self._assinantes.remove(assinante)

        return cancelar_inscricao

    def publicar(self, evento: PedidoStatusEvento) -> None:
        with self._lock:
            assinantes = list(self._assinantes)
        for assinante in assinantes:
            try:
                assinante(evento)
            except Exception as e:
                logger.error(
                    f"Erro em assinante de status do pedido {evento.pedido_id}: {e}",
                    exc_info=True,
                )


publisher = PedidoEventPublisher()


def notificar_status_alterado(
    pedido: PedidoModel,
    status_anterior: Optional[str],
    publicador: PedidoEventPublisher | None = None,
) -> None:
    """
    Notifica assinantes sobre o novo status do pedido.

    Args:
        pedido: pedido já commitado com o novo status
        status_anterior: status antes da mudança (None na criação)
    """
    # Extrai o ID logo no início para poder logar mesmo se o objeto estiver desconectado da sessão
    try:
        pedido_id = pedido.id
    except Exception as e:
        logger.error(f"Erro ao extrair ID do pedido: {e}", exc_info=True)
        return

    try:
        evento = PedidoStatusEvento(
            pedido_id=pedido_id,
            numero_pedido=pedido.numero_pedido,
            status_anterior=status_anterior,
            status_novo=pedido.status,
            status_label=label_for(pedido.status),
            alterado_por=pedido.alterado_por,
        )
        (publicador or publisher).publicar(evento)
        logger.info(
            f"Notificação de status enviada: pedido_id={pedido_id} "
            f"{status_anterior} -> {pedido.status}"
        )
    except Exception as e:
        # Loga o erro mas não propaga: o status já foi gravado
        logger.error(f"Erro ao notificar status do pedido {pedido_id}: {e}", exc_info=True)
