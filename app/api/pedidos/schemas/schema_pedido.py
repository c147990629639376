from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

from app.api.pedidos.core.status_machine import BadgeStyle, StatusPedido, parse_status
from app.api.pedidos.models.model_pedido import FormaPagamento, TipoEntrega


def _validar_status(valor):
    # Aceita valores legados (confirmado/entregue) e normaliza maiúsculas
    if valor is None or isinstance(valor, StatusPedido):
        return valor
    return parse_status(valor)


# ---------------------------------------------------------------- Requests
class PedidoCreateRequest(BaseModel):
    nome_cliente: Optional[constr(max_length=120)] = None
    telefone_cliente: Optional[constr(max_length=20)] = None
    tipo_entrega: TipoEntrega = TipoEntrega.DELIVERY
    endereco_entrega: Optional[constr(max_length=255)] = None
    subtotal: Decimal = Field(..., ge=0)
    taxa_entrega: Decimal = Field(Decimal("0"), ge=0)
    forma_pagamento: FormaPagamento = FormaPagamento.DINHEIRO
    troco_para: Optional[Decimal] = Field(None, ge=0)
    observacoes: Optional[str] = None
    alterado_por: Optional[constr(max_length=60)] = None

    @field_validator("endereco_entrega")
    @classmethod
    def strip_endereco(cls, v):
        return v.strip() if isinstance(v, str) else v


class PedidoStatusPatchRequest(BaseModel):
    status: StatusPedido
    alterado_por: Optional[constr(max_length=60)] = None
    observacao: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalizar_status(cls, v):
        return _validar_status(v)


class PedidoAvancarRequest(BaseModel):
    alterado_por: Optional[constr(max_length=60)] = None
    observacao: Optional[str] = None


class PedidoCancelarRequest(BaseModel):
    motivo_cancelamento: constr(strip_whitespace=True, min_length=1)
    alterado_por: Optional[constr(max_length=60)] = None


class PedidoMoverKanbanRequest(BaseModel):
    """Card arrastado para `status` na posição `ordem_kanban`."""
    status: StatusPedido
    ordem_kanban: Optional[int] = Field(None, ge=0)
    alterado_por: Optional[constr(max_length=60)] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalizar_status(cls, v):
        return _validar_status(v)


class PedidoOrdemRequest(BaseModel):
    ordem_kanban: int = Field(..., ge=0)


class FiltrosPedidos(BaseModel):
    busca: Optional[str] = None
    status: Optional[List[StatusPedido]] = None
    tipo_entrega: Optional[List[TipoEntrega]] = None
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None


# --------------------------------------------------------------- Responses
class PedidoResponse(BaseModel):
    id: int
    numero_pedido: str
    nome_cliente: Optional[str] = None
    telefone_cliente: Optional[str] = None
    tipo_entrega: TipoEntrega
    endereco_entrega: Optional[str] = None
    status: StatusPedido
    status_label: str
    status_badge: BadgeStyle
    ordem_kanban: int
    subtotal: Decimal
    taxa_entrega: Decimal
    total: Decimal
    forma_pagamento: FormaPagamento
    troco_para: Optional[Decimal] = None
    observacoes: Optional[str] = None
    motivo_cancelamento: Optional[str] = None
    alterado_por: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StatusInfoResponse(BaseModel):
    status: StatusPedido
    label: str
    badge: BadgeStyle
    terminal: bool
    proximo_status: Optional[StatusPedido] = None
    transicoes: List[StatusPedido]


class PedidoAcoesResponse(BaseModel):
    """Ações disponíveis para o pedido (usado para habilitar botões)."""
    pedido_id: int
    status_atual: StatusInfoResponse
    pode_avancar: bool
    pode_cancelar: bool
    pode_finalizar: bool


class KanbanColunaResponse(BaseModel):
    id: StatusPedido
    titulo: str
    cor: str
    cor_texto: str
    icone: str
    ordem: int
    badge: BadgeStyle
    total_pedidos: int
    valor_total: Decimal
    pedidos: List[PedidoResponse]


class KanbanResponse(BaseModel):
    colunas: List[KanbanColunaResponse]
    total_pedidos: int
