"""
Router de pedidos para admin: Kanban, PDV e detalhe do pedido.
Toda mudança de status passa pela máquina de estados (via services).
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from app.api.pedidos.core.exceptions import StatusInvalidoError
from app.api.pedidos.core.status_machine import parse_status
from app.api.pedidos.models.model_pedido import TipoEntrega
from app.api.pedidos.schemas import (
    FiltrosPedidos,
    HistoricoDoPedidoResponse,
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
from app.api.pedidos.services.dependencies import (
    get_kanban_service,
    get_pedido_service,
    get_pedido_status_service,
)
from app.api.pedidos.services.service_pedido_kanban import KanbanService
from app.api.pedidos.services.service_pedido_status import PedidoStatusService
from app.api.pedidos.services.service_pedidos import PedidoService
from app.config.settings import KANBAN_LIMITE_PADRAO
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/pedidos/admin",
    tags=["Admin - Pedidos"],
)


def get_filtros(
    busca: Optional[str] = Query(None, description="Busca por número, nome ou telefone"),
    status_filter: Optional[List[str]] = Query(
        None, alias="status", description="Filtrar por status (aceita também confirmado/entregue)"
    ),
    tipo_entrega: Optional[List[TipoEntrega]] = Query(None, description="Filtrar por modalidade"),
    data_inicio: Optional[date] = Query(None, description="Data inicial (YYYY-MM-DD)"),
    data_fim: Optional[date] = Query(None, description="Data final inclusiva (YYYY-MM-DD)"),
) -> FiltrosPedidos:
    try:
        status_list = [parse_status(s) for s in status_filter] if status_filter else None
    except StatusInvalidoError as e:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, str(e))
    return FiltrosPedidos(
        busca=busca,
        status=status_list,
        tipo_entrega=tipo_entrega,
        data_inicio=data_inicio,
        data_fim=data_fim,
    )


# ======================================================================
# ====================== STATUS / KANBAN ===============================
# ======================================================================
@router.get(
    "/status",
    response_model=List[StatusInfoResponse],
    status_code=status.HTTP_200_OK,
)
def listar_status():
    """
    Catálogo de status: label, badge, se é terminal, próximo status e destinos permitidos.
    Usado pelo front para montar colunas e botões sem duplicar regras.
    """
    return PedidoStatusService.catalogo_status()


@router.get(
    "/kanban",
    response_model=KanbanResponse,
    status_code=status.HTTP_200_OK,
)
def listar_pedidos_admin_kanban(
    filtros: FiltrosPedidos = Depends(get_filtros),
    limit: int = Query(KANBAN_LIMITE_PADRAO, ge=1, le=1000),
    svc: KanbanService = Depends(get_kanban_service),
):
    """
    Lista pedidos para o Kanban, agrupados em uma coluna por status.

    Cada coluna traz configuração visual, total de pedidos e valor somado.
    """
    logger.info(f"[Pedidos] Listar Kanban - filtros={filtros.model_dump(exclude_none=True)}")
    return svc.listar_kanban(filtros, limit=limit)


# ======================================================================
# ====================== PEDIDOS GERAIS ===============================
# ======================================================================
@router.get(
    "",
    response_model=List[PedidoResponse],
    status_code=status.HTTP_200_OK,
)
def listar_pedidos(
    filtros: FiltrosPedidos = Depends(get_filtros),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    svc: PedidoService = Depends(get_pedido_service),
):
    return svc.listar_pedidos(filtros, skip=skip, limit=limit)


@router.post(
    "",
    response_model=PedidoResponse,
    status_code=status.HTTP_201_CREATED,
)
def criar_pedido(
    payload: PedidoCreateRequest = Body(...),
    svc: PedidoService = Depends(get_pedido_service),
):
    """Cria um pedido. Todo pedido nasce como `pendente`."""
    logger.info(f"[Pedidos] Criar pedido - tipo_entrega={payload.tipo_entrega.value}")
    return svc.criar_pedido(payload)


@router.get(
    "/{pedido_id}",
    response_model=PedidoResponse,
    status_code=status.HTTP_200_OK,
)
def get_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    svc: PedidoService = Depends(get_pedido_service),
):
    return svc.obter_pedido(pedido_id)


@router.get(
    "/{pedido_id}/historico",
    response_model=HistoricoDoPedidoResponse,
    status_code=status.HTTP_200_OK,
)
def obter_historico_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    svc: PedidoService = Depends(get_pedido_service),
):
    """
    Histórico completo de alterações de status do pedido, do mais antigo ao mais recente.
    A primeira entrada (sem status anterior) é a criação do pedido.
    """
    logger.info(f"[Pedidos] Obter histórico - pedido_id={pedido_id}")
    return svc.obter_historico(pedido_id)


@router.get(
    "/{pedido_id}/acoes",
    response_model=PedidoAcoesResponse,
    status_code=status.HTTP_200_OK,
)
def obter_acoes_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    svc: PedidoStatusService = Depends(get_pedido_status_service),
):
    """Ações habilitadas para o pedido (avançar, cancelar, finalizar e destinos permitidos)."""
    return svc.acoes_disponiveis(pedido_id)


@router.put(
    "/{pedido_id}/status",
    response_model=PedidoResponse,
    status_code=status.HTTP_200_OK,
)
def atualizar_status_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    payload: PedidoStatusPatchRequest = Body(...),
    svc: PedidoStatusService = Depends(get_pedido_status_service),
):
    """
    Atualiza o status de um pedido.

    Status disponíveis: pendente, em_preparo, saiu_entrega, finalizado, cancelado.
    Retorna 409 quando a transição não é permitida.
    """
    logger.info(f"[Pedidos] Atualizar status - pedido_id={pedido_id} -> {payload.status.value}")
    return svc.atualizar_status(
        pedido_id,
        payload.status,
        alterado_por=payload.alterado_por,
        observacao=payload.observacao,
    )


@router.post(
    "/{pedido_id}/avancar",
    response_model=PedidoResponse,
    status_code=status.HTTP_200_OK,
)
def avancar_status_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    payload: Optional[PedidoAvancarRequest] = Body(None),
    svc: PedidoStatusService = Depends(get_pedido_status_service),
):
    """Move o pedido para o próximo status do fluxo (pendente → em_preparo → saiu_entrega → finalizado)."""
    payload = payload or PedidoAvancarRequest()
    logger.info(f"[Pedidos] Avançar status - pedido_id={pedido_id}")
    return svc.avancar_status(
        pedido_id,
        alterado_por=payload.alterado_por,
        observacao=payload.observacao,
    )


@router.post(
    "/{pedido_id}/cancelar",
    response_model=PedidoResponse,
    status_code=status.HTTP_200_OK,
)
def cancelar_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    payload: PedidoCancelarRequest = Body(...),
    svc: PedidoStatusService = Depends(get_pedido_status_service),
):
    """Cancela o pedido. Pedidos finalizados não podem ser cancelados (409)."""
    logger.info(f"[Pedidos] Cancelar pedido - pedido_id={pedido_id}")
    return svc.cancelar(
        pedido_id,
        payload.motivo_cancelamento,
        alterado_por=payload.alterado_por,
    )


@router.put(
    "/{pedido_id}/kanban",
    response_model=PedidoResponse,
    status_code=status.HTTP_200_OK,
)
def mover_pedido_kanban(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    payload: PedidoMoverKanbanRequest = Body(...),
    svc: KanbanService = Depends(get_kanban_service),
):
    """Card arrastado no Kanban: muda de coluna (com validação) e/ou de posição."""
    logger.info(
        f"[Kanban] Mover pedido - pedido_id={pedido_id} -> {payload.status.value} "
        f"(ordem={payload.ordem_kanban})"
    )
    return svc.mover_pedido(
        pedido_id,
        payload.status,
        payload.ordem_kanban,
        alterado_por=payload.alterado_por,
    )


@router.put(
    "/{pedido_id}/ordem",
    response_model=PedidoResponse,
    status_code=status.HTTP_200_OK,
)
def atualizar_ordem_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    payload: PedidoOrdemRequest = Body(...),
    svc: KanbanService = Depends(get_kanban_service),
):
    return svc.atualizar_ordem(pedido_id, payload.ordem_kanban)
