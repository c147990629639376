from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.pedidos.models.model_pedido import PedidoModel
from app.api.pedidos.repositories.repo_pedidos import PedidoRepository
from app.api.pedidos.schemas import (
    FiltrosPedidos,
    HistoricoDoPedidoResponse,
    PedidoCreateRequest,
    PedidoStatusHistoricoOut,
)
from app.api.pedidos.utils.pedido_notification_helper import (
    PedidoEventPublisher,
    notificar_status_alterado,
)
from app.utils.logger import logger


class PedidoService:
    """Criação e consulta de pedidos."""

    def __init__(
        self,
        db: Session,
        repo: PedidoRepository | None = None,
        publicador: PedidoEventPublisher | None = None,
    ):
        self.db = db
        self.repo = repo or PedidoRepository(db)
        self.publicador = publicador

    def criar_pedido(self, payload: PedidoCreateRequest) -> PedidoModel:
        if payload.tipo_entrega.value == "delivery" and not payload.endereco_entrega:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Endereço de entrega é obrigatório para delivery")

        total = payload.subtotal + payload.taxa_entrega
        if payload.troco_para is not None and payload.troco_para < total:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Troco para deve ser maior ou igual ao total do pedido")

        try:
            pedido = self.repo.criar_pedido(
                tipo_entrega=payload.tipo_entrega.value,
                subtotal=payload.subtotal,
                taxa_entrega=payload.taxa_entrega,
                forma_pagamento=payload.forma_pagamento.value,
                nome_cliente=payload.nome_cliente,
                telefone_cliente=payload.telefone_cliente,
                endereco_entrega=payload.endereco_entrega,
                troco_para=payload.troco_para,
                observacoes=payload.observacoes,
                alterado_por=payload.alterado_por,
            )
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        self.repo.refresh(pedido)
        logger.info(f"[Pedidos] Pedido criado id={pedido.id} numero={pedido.numero_pedido}")
        notificar_status_alterado(pedido, None, self.publicador)
        return pedido

    def obter_pedido(self, pedido_id: int) -> PedidoModel:
        pedido = self.repo.get_pedido(pedido_id)
        if not pedido:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Pedido não encontrado")
        return pedido

    def listar_pedidos(
        self,
        filtros: FiltrosPedidos | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[PedidoModel]:
        return self.repo.listar(filtros, skip=skip, limit=min(limit, 200))

    def obter_historico(self, pedido_id: int) -> HistoricoDoPedidoResponse:
        self.obter_pedido(pedido_id)
        historicos = self.repo.listar_historico(pedido_id)
        return HistoricoDoPedidoResponse(
            pedido_id=pedido_id,
            historicos=[PedidoStatusHistoricoOut.model_validate(h) for h in historicos],
        )
