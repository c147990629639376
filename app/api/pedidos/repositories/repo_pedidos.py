from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.api.pedidos.core.status_machine import StatusPedido, label_for
from app.api.pedidos.models.model_pedido import PedidoModel, TipoEntrega
from app.api.pedidos.models.model_pedido_historico import PedidoHistoricoModel
from app.api.pedidos.schemas.schema_pedido import FiltrosPedidos

# Prefixo do número do pedido por modalidade
PREFIXOS_NUMERO_PEDIDO = {
    TipoEntrega.DELIVERY.value: "DV",
    TipoEntrega.BALCAO.value: "BL",
    TipoEntrega.MESA.value: "MS",
}


class PedidoRepository:
    """
    Acesso a dados de pedidos e histórico.

    Não valida transições: quem chama (PedidoStatusService/KanbanService)
    deve consultar a máquina de estados antes de `atualizar_status_pedido`.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------- Queries -------------
    def get_pedido(self, pedido_id: int) -> Optional[PedidoModel]:
        return self.db.get(PedidoModel, pedido_id)

    def get_pedido_para_atualizacao(self, pedido_id: int) -> Optional[PedidoModel]:
        """SELECT ... FOR UPDATE: trava a linha até o commit para validar e gravar o status."""
        return (
            self.db.query(PedidoModel)
            .filter(PedidoModel.id == pedido_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def get_by_numero(self, numero_pedido: str) -> Optional[PedidoModel]:
        return self.db.query(PedidoModel).filter(PedidoModel.numero_pedido == numero_pedido).first()

    def _aplicar_filtros(self, query, filtros: FiltrosPedidos | None):
        if not filtros:
            return query

        if filtros.status:
            query = query.filter(PedidoModel.status.in_([s.value for s in filtros.status]))

        if filtros.tipo_entrega:
            query = query.filter(PedidoModel.tipo_entrega.in_([t.value for t in filtros.tipo_entrega]))

        if filtros.data_inicio:
            query = query.filter(PedidoModel.created_at >= datetime.combine(filtros.data_inicio, datetime.min.time()))

        if filtros.data_fim:
            # data_fim inclusiva
            fim = datetime.combine(filtros.data_fim, datetime.min.time()) + timedelta(days=1)
            query = query.filter(PedidoModel.created_at < fim)

        if filtros.busca:
            # % e _ digitados na busca são literais
            busca = filtros.busca.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            termo = f"%{busca}%"
            query = query.filter(
                or_(
                    PedidoModel.numero_pedido.ilike(termo, escape="\\"),
                    PedidoModel.nome_cliente.ilike(termo, escape="\\"),
                    PedidoModel.telefone_cliente.ilike(termo, escape="\\"),
                )
            )
        return query

    def listar(self, filtros: FiltrosPedidos | None = None, skip: int = 0, limit: int = 50) -> list[PedidoModel]:
        query = self._aplicar_filtros(self.db.query(PedidoModel), filtros)
        return (
            query.order_by(PedidoModel.created_at.desc(), PedidoModel.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def list_kanban(self, filtros: FiltrosPedidos | None = None, limit: int = 500) -> list[PedidoModel]:
        query = self._aplicar_filtros(self.db.query(PedidoModel), filtros)
        return (
            query.order_by(PedidoModel.ordem_kanban.asc(), PedidoModel.created_at.asc(), PedidoModel.id.asc())
            .limit(limit)
            .all()
        )

    def listar_historico(self, pedido_id: int) -> list[PedidoHistoricoModel]:
        return (
            self.db.query(PedidoHistoricoModel)
            .filter(PedidoHistoricoModel.pedido_id == pedido_id)
            .order_by(PedidoHistoricoModel.created_at.asc(), PedidoHistoricoModel.id.asc())
            .all()
        )

    def proximo_numero_pedido(self, tipo_entrega: str) -> str:
        """Número sequencial por modalidade: DV-000001, BL-000001, MS-000001."""
        seq = (
            self.db.query(PedidoModel)
            .filter(PedidoModel.tipo_entrega == tipo_entrega)
            .count()
            + 1
        )
        return f"{PREFIXOS_NUMERO_PEDIDO[tipo_entrega]}-{seq:06d}"

    def proxima_ordem_kanban(self, status: str) -> int:
        """Posição logo depois do último card da coluna do status."""
        ultima = (
            self.db.query(func.coalesce(func.max(PedidoModel.ordem_kanban), -1))
            .filter(PedidoModel.status == status)
            .scalar()
        )
        return ultima + 1

    # -------------------- Mutations -------------------
    def criar_pedido(
        self,
        *,
        tipo_entrega: str,
        subtotal: Decimal,
        taxa_entrega: Decimal,
        forma_pagamento: str,
        nome_cliente: str | None = None,
        telefone_cliente: str | None = None,
        endereco_entrega: str | None = None,
        troco_para: Decimal | None = None,
        observacoes: str | None = None,
        alterado_por: str | None = None,
    ) -> PedidoModel:
        """Cria o pedido sempre como pendente, com a entrada de criação no histórico."""
        status = StatusPedido.PENDENTE.value
        pedido = PedidoModel(
            numero_pedido=self.proximo_numero_pedido(tipo_entrega),
            tipo_entrega=tipo_entrega,
            nome_cliente=nome_cliente,
            telefone_cliente=telefone_cliente,
            endereco_entrega=endereco_entrega,
            status=status,
            ordem_kanban=self.proxima_ordem_kanban(status),
            subtotal=subtotal,
            taxa_entrega=taxa_entrega,
            total=subtotal + taxa_entrega,
            forma_pagamento=forma_pagamento,
            troco_para=troco_para,
            observacoes=observacoes,
            alterado_por=alterado_por,
        )
        self.db.add(pedido)
        self.db.flush()
        self.add_status_historico(
            pedido.id,
            status_anterior=None,
            status_novo=status,
            alterado_por=alterado_por,
            observacao="Pedido criado",
        )
        return pedido

    def add_status_historico(
        self,
        pedido_id: int,
        *,
        status_anterior: str | None,
        status_novo: str,
        alterado_por: str | None = None,
        observacao: str | None = None,
    ) -> PedidoHistoricoModel:
        hist = PedidoHistoricoModel(
            pedido_id=pedido_id,
            status_anterior=status_anterior,
            status_novo=status_novo,
            alterado_por=alterado_por,
            observacao=observacao,
        )
        self.db.add(hist)
        return hist

    def atualizar_status_pedido(
        self,
        pedido: PedidoModel,
        novo_status: StatusPedido,
        *,
        alterado_por: str | None = None,
        observacao: str | None = None,
        motivo_cancelamento: str | None = None,
        ordem_kanban: int | None = None,
    ) -> PedidoHistoricoModel:
        """
        Grava o novo status e registra a transição no histórico.

        O card sai da coluna antiga (que é compactada) e entra no fim da nova,
        ou em `ordem_kanban` quando informado. Tudo na mesma transação.
        """
        status_anterior = pedido.status
        self._fechar_posicao(status_anterior, pedido.ordem_kanban, pedido.id)

        # Fim da coluna de destino, calculado antes de o pedido entrar nela
        pedido.ordem_kanban = self.proxima_ordem_kanban(novo_status.value)
        pedido.status = novo_status.value
        pedido.alterado_por = alterado_por
        if motivo_cancelamento is not None:
            pedido.motivo_cancelamento = motivo_cancelamento

        # Formata a observação como transição de status se não fornecida
        if observacao is None:
            observacao = f"{label_for(status_anterior)} → {label_for(novo_status)}"

        hist = self.add_status_historico(
            pedido.id,
            status_anterior=status_anterior,
            status_novo=novo_status.value,
            alterado_por=alterado_por,
            observacao=observacao,
        )
        self.db.flush()

        if ordem_kanban is not None:
            self.atualizar_ordem(pedido, ordem_kanban)
        return hist

    def atualizar_ordem(self, pedido: PedidoModel, ordem_kanban: int) -> PedidoModel:
        """Move o card para `ordem_kanban` dentro da coluna, deslocando os demais."""
        self._fechar_posicao(pedido.status, pedido.ordem_kanban, pedido.id)
        self._abrir_posicao(pedido.status, ordem_kanban, pedido.id)
        pedido.ordem_kanban = ordem_kanban
        self.db.flush()
        return pedido

    def _outros_da_coluna(self, status: str, pedido_id: int):
        return self.db.query(PedidoModel).filter(
            PedidoModel.status == status,
            PedidoModel.id != pedido_id,
        )

    def _fechar_posicao(self, status: str, ordem_kanban: int, pedido_id: int) -> None:
        # Cards abaixo da posição liberada sobem uma casa
        self._outros_da_coluna(status, pedido_id).filter(
            PedidoModel.ordem_kanban > ordem_kanban
        ).update(
            {PedidoModel.ordem_kanban: PedidoModel.ordem_kanban - 1},
            synchronize_session=False,
        )

    def _abrir_posicao(self, status: str, ordem_kanban: int, pedido_id: int) -> None:
        self._outros_da_coluna(status, pedido_id).filter(
            PedidoModel.ordem_kanban >= ordem_kanban
        ).update(
            {PedidoModel.ordem_kanban: PedidoModel.ordem_kanban + 1},
            synchronize_session=False,
        )

    # ---------------- Unit of Work ---------------------
    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, pedido: PedidoModel) -> PedidoModel:
        self.db.refresh(pedido)
        return pedido
