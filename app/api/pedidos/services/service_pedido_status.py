from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.pedidos.core.exceptions import TransicaoNaoPermitidaError
from app.api.pedidos.core.status_machine import (
    StatusPedido,
    badge_style_for,
    is_terminal,
    is_transicao_permitida,
    label_for,
    parse_status,
    proximo_status,
    transicoes_disponiveis,
)
from app.api.pedidos.models.model_pedido import PedidoModel
from app.api.pedidos.repositories.repo_pedidos import PedidoRepository
from app.api.pedidos.schemas import PedidoAcoesResponse, StatusInfoResponse
from app.api.pedidos.utils.pedido_notification_helper import (
    PedidoEventPublisher,
    notificar_status_alterado,
)
from app.utils.logger import logger
from app.utils.prometheus_metrics import registrar_transicao, registrar_transicao_rejeitada


def build_status_info(atual: StatusPedido | str) -> StatusInfoResponse:
    atual = parse_status(atual)
    return StatusInfoResponse(
        status=atual,
        label=label_for(atual),
        badge=badge_style_for(atual),
        terminal=is_terminal(atual),
        proximo_status=proximo_status(atual),
        transicoes=transicoes_disponiveis(atual),
    )


class PedidoStatusService:
    """
    Mudanças de status de pedidos (Kanban, botões do PDV e detalhe do pedido).

    Sempre valida antes de gravar: trava a linha, lê o status persistido,
    consulta a máquina de estados e só então grava status + histórico.
    """

    def __init__(
        self,
        db: Session,
        repo: PedidoRepository | None = None,
        publicador: PedidoEventPublisher | None = None,
    ):
        self.db = db
        self.repo = repo or PedidoRepository(db)
        self.publicador = publicador

    def _get_pedido(self, pedido_id: int, *, para_atualizacao: bool = False) -> PedidoModel:
        if para_atualizacao:
            pedido = self.repo.get_pedido_para_atualizacao(pedido_id)
        else:
            pedido = self.repo.get_pedido(pedido_id)
        if not pedido:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Pedido não encontrado")
        return pedido

    def atualizar_status(
        self,
        pedido_id: int,
        novo_status: StatusPedido | str,
        *,
        alterado_por: Optional[str] = None,
        observacao: Optional[str] = None,
        motivo_cancelamento: Optional[str] = None,
        ordem_kanban: Optional[int] = None,
    ) -> PedidoModel:
        novo_status = parse_status(novo_status)
        pedido = self._get_pedido(pedido_id, para_atualizacao=True)
        status_anterior = pedido.status

        if not is_transicao_permitida(status_anterior, novo_status):
            self.repo.rollback()
            registrar_transicao_rejeitada(str(status_anterior), novo_status.value)
            logger.info(
                f"[StatusPedido] Transição recusada pedido_id={pedido_id}: "
                f"{status_anterior} -> {novo_status.value}"
            )
            raise TransicaoNaoPermitidaError(parse_status(status_anterior), novo_status)

        self.repo.atualizar_status_pedido(
            pedido,
            novo_status,
            alterado_por=alterado_por,
            observacao=observacao,
            motivo_cancelamento=motivo_cancelamento,
            ordem_kanban=ordem_kanban,
        )
        self.repo.commit()
        self.repo.refresh(pedido)

        registrar_transicao(str(status_anterior), novo_status.value)
        logger.info(
            f"[StatusPedido] pedido_id={pedido_id} {status_anterior} -> {novo_status.value} "
            f"(alterado_por={alterado_por})"
        )
        notificar_status_alterado(pedido, status_anterior, self.publicador)
        return pedido

    def avancar_status(
        self,
        pedido_id: int,
        *,
        alterado_por: Optional[str] = None,
        observacao: Optional[str] = None,
    ) -> PedidoModel:
        """Botão "avançar": move para o próximo status do fluxo linear."""
        pedido = self._get_pedido(pedido_id)
        atual = parse_status(pedido.status)
        proximo = proximo_status(atual)
        if proximo is None:
            raise TransicaoNaoPermitidaError(atual, None)
        return self.atualizar_status(
            pedido_id,
            proximo,
            alterado_por=alterado_por,
            observacao=observacao,
        )

    def cancelar(
        self,
        pedido_id: int,
        motivo_cancelamento: str,
        *,
        alterado_por: Optional[str] = None,
    ) -> PedidoModel:
        motivo = (motivo_cancelamento or "").strip()
        if not motivo:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Motivo do cancelamento é obrigatório")
        return self.atualizar_status(
            pedido_id,
            StatusPedido.CANCELADO,
            alterado_por=alterado_por,
            observacao=f"Cancelado: {motivo}",
            motivo_cancelamento=motivo,
        )

    def acoes_disponiveis(self, pedido_id: int) -> PedidoAcoesResponse:
        pedido = self._get_pedido(pedido_id)
        info = build_status_info(pedido.status)
        return PedidoAcoesResponse(
            pedido_id=pedido.id,
            status_atual=info,
            pode_avancar=info.proximo_status is not None,
            pode_cancelar=StatusPedido.CANCELADO in info.transicoes,
            pode_finalizar=StatusPedido.FINALIZADO in info.transicoes,
        )

    @staticmethod
    def catalogo_status() -> list[StatusInfoResponse]:
        return [build_status_info(s) for s in StatusPedido]
