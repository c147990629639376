from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.api.pedidos.core.kanban_config import COLUNAS_KANBAN
from app.api.pedidos.core.status_machine import StatusPedido, badge_style_for, parse_status
from app.api.pedidos.models.model_pedido import PedidoModel
from app.api.pedidos.repositories.repo_pedidos import PedidoRepository
from app.api.pedidos.schemas import (
    FiltrosPedidos,
    KanbanColunaResponse,
    KanbanResponse,
    PedidoResponse,
)
from app.api.pedidos.services.service_pedido_status import PedidoStatusService
from app.config.settings import KANBAN_LIMITE_PADRAO
from app.utils.logger import logger


class KanbanService:
    """Serviço responsável pela lógica do Kanban de pedidos."""

    def __init__(
        self,
        db: Session,
        repo: PedidoRepository | None = None,
        status_service: PedidoStatusService | None = None,
    ):
        self.db = db
        self.repo = repo or PedidoRepository(db)
        self.status_service = status_service or PedidoStatusService(db, self.repo)

    def listar_kanban(
        self,
        filtros: FiltrosPedidos | None = None,
        limit: int = KANBAN_LIMITE_PADRAO,
    ) -> KanbanResponse:
        """
        Lista pedidos agrupados por coluna (uma por status), na ordem do Kanban.

        Dentro de cada coluna os pedidos seguem `ordem_kanban`. Cada coluna traz
        a quantidade e o valor somado dos pedidos.
        """
        pedidos = self.repo.list_kanban(filtros, limit=limit)

        grupos: dict[StatusPedido, list[PedidoModel]] = defaultdict(list)
        for pedido in pedidos:
            grupos[parse_status(pedido.status)].append(pedido)

        colunas = []
        for coluna in COLUNAS_KANBAN:
            pedidos_coluna = sorted(grupos.get(coluna.id, []), key=lambda p: (p.ordem_kanban, p.id))
            valor_total = sum((p.total or Decimal("0") for p in pedidos_coluna), Decimal("0"))
            colunas.append(
                KanbanColunaResponse(
                    id=coluna.id,
                    titulo=coluna.titulo,
                    cor=coluna.cor,
                    cor_texto=coluna.cor_texto,
                    icone=coluna.icone,
                    ordem=coluna.ordem,
                    badge=badge_style_for(coluna.id),
                    total_pedidos=len(pedidos_coluna),
                    valor_total=valor_total,
                    pedidos=[PedidoResponse.model_validate(p) for p in pedidos_coluna],
                )
            )

        logger.info(f"[Kanban] Listados {len(pedidos)} pedidos em {len(colunas)} colunas")
        return KanbanResponse(colunas=colunas, total_pedidos=len(pedidos))

    def atualizar_ordem(self, pedido_id: int, ordem_kanban: int) -> PedidoModel:
        pedido = self.repo.get_pedido(pedido_id)
        if not pedido:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Pedido não encontrado")
        self.repo.atualizar_ordem(pedido, ordem_kanban)
        self.repo.commit()
        self.repo.refresh(pedido)
        return pedido

    def mover_pedido(
        self,
        pedido_id: int,
        status_destino: StatusPedido | str,
        ordem_kanban: Optional[int] = None,
        *,
        alterado_por: Optional[str] = None,
    ) -> PedidoModel:
        """
        Card solto numa coluna do Kanban.

        Mesma coluna: só reordena. Outra coluna: valida e grava a transição
        (TransicaoNaoPermitidaError se recusada) já na posição pedida, num único commit.
        """
        destino = parse_status(status_destino)
        pedido = self.repo.get_pedido(pedido_id)
        if not pedido:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Pedido não encontrado")

        if parse_status(pedido.status) == destino:
            if ordem_kanban is None:
                logger.info(f"[Kanban] Pedido {pedido_id} permaneceu na mesma coluna")
                return pedido
            return self.atualizar_ordem(pedido_id, ordem_kanban)

        return self.status_service.atualizar_status(
            pedido_id,
            destino,
            alterado_por=alterado_por,
            ordem_kanban=ordem_kanban,
        )
