"""
Máquina de estados do status de pedidos.

Fonte única das regras de transição usadas pelo Kanban (arrastar card) e pelos
botões de status do PDV/detalhe do pedido.

Fluxo:
    pendente → em_preparo → saiu_entrega → finalizado
    (cancelado a partir de qualquer status não terminal)

Regras de `is_transicao_permitida`, avaliadas nesta ordem:
    1. mesmo status nunca é uma transição;
    2. status terminal (finalizado/cancelado) não tem saída, nem para o outro terminal;
    3. cancelado é permitido a partir de qualquer status não terminal;
    4. finalizado é permitido a partir de qualquer status não terminal;
    5. demais casos seguem TRANSICOES_PERMITIDAS.

Tudo aqui é puro e sem estado mutável: seguro para chamadas concorrentes.
"""
from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from app.api.pedidos.core.exceptions import StatusInvalidoError


class StatusPedido(str, enum.Enum):
    """Status possíveis de um pedido no fluxo Kanban."""
    PENDENTE = "pendente"
    EM_PREPARO = "em_preparo"
    SAIU_ENTREGA = "saiu_entrega"
    FINALIZADO = "finalizado"
    CANCELADO = "cancelado"


class BadgeStyle(str, enum.Enum):
    """Severidade visual do badge de status (o front traduz para cor)."""
    WARNING = "warning"
    INFO = "info"
    ACCENT = "accent"
    SUCCESS = "success"
    DANGER = "danger"
    NEUTRAL = "neutral"


# Valores antigos gravados pela tela de detalhe do admin (modelo de 6 status).
# São aceitos na entrada e convertidos; nunca são emitidos.
STATUS_LEGADOS: Mapping[str, StatusPedido] = MappingProxyType({
    "confirmado": StatusPedido.EM_PREPARO,
    "entregue": StatusPedido.FINALIZADO,
})

STATUS_TERMINAIS = frozenset({StatusPedido.FINALIZADO, StatusPedido.CANCELADO})

# Fluxo normal (sem as regras de cancelamento/finalização)
TRANSICOES_PERMITIDAS: Mapping[StatusPedido, frozenset[StatusPedido]] = MappingProxyType({
    StatusPedido.PENDENTE: frozenset({StatusPedido.EM_PREPARO}),
    StatusPedido.EM_PREPARO: frozenset({StatusPedido.SAIU_ENTREGA, StatusPedido.FINALIZADO}),
    StatusPedido.SAIU_ENTREGA: frozenset({StatusPedido.FINALIZADO}),
    StatusPedido.FINALIZADO: frozenset(),
    StatusPedido.CANCELADO: frozenset(),
})

# Sucessor linear para o botão "avançar"
PROXIMO_STATUS: Mapping[StatusPedido, Optional[StatusPedido]] = MappingProxyType({
    StatusPedido.PENDENTE: StatusPedido.EM_PREPARO,
    StatusPedido.EM_PREPARO: StatusPedido.SAIU_ENTREGA,
    StatusPedido.SAIU_ENTREGA: StatusPedido.FINALIZADO,
    StatusPedido.FINALIZADO: None,
    StatusPedido.CANCELADO: None,
})

STATUS_LABELS: Mapping[StatusPedido, str] = MappingProxyType({
    StatusPedido.PENDENTE: "Pendente",
    StatusPedido.EM_PREPARO: "Em Preparo",
    StatusPedido.SAIU_ENTREGA: "Saiu para Entrega",
    StatusPedido.FINALIZADO: "Finalizado",
    StatusPedido.CANCELADO: "Cancelado",
})

STATUS_BADGES: Mapping[StatusPedido, BadgeStyle] = MappingProxyType({
    StatusPedido.PENDENTE: BadgeStyle.WARNING,
    StatusPedido.EM_PREPARO: BadgeStyle.INFO,
    StatusPedido.SAIU_ENTREGA: BadgeStyle.ACCENT,
    StatusPedido.FINALIZADO: BadgeStyle.SUCCESS,
    StatusPedido.CANCELADO: BadgeStyle.DANGER,
})


def verificar_cobertura(tabela: Iterable[Any], nome: str) -> None:
    """Garante que a tabela tem exatamente uma entrada por StatusPedido."""
    chaves = list(tabela)
    faltando = [s.value for s in StatusPedido if s not in chaves]
    sobrando = [str(c) for c in chaves if not isinstance(c, StatusPedido)]
    duplicados = len(chaves) != len(set(chaves))
    if faltando or sobrando or duplicados:
        raise RuntimeError(
            f"Tabela {nome} inconsistente com StatusPedido: "
            f"faltando={faltando} desconhecidos={sobrando} duplicados={duplicados}"
        )


for _nome, _tabela in (
    ("TRANSICOES_PERMITIDAS", TRANSICOES_PERMITIDAS),
    ("PROXIMO_STATUS", PROXIMO_STATUS),
    ("STATUS_LABELS", STATUS_LABELS),
    ("STATUS_BADGES", STATUS_BADGES),
):
    verificar_cobertura(_tabela, _nome)


def parse_status(valor: StatusPedido | str) -> StatusPedido:
    """
    Converte um valor recebido (enum ou string) para StatusPedido.

    Aceita maiúsculas/espaços e os valores legados (`confirmado`, `entregue`).
    Qualquer outro valor levanta StatusInvalidoError.
    """
    if isinstance(valor, StatusPedido):
        return valor
    if not isinstance(valor, str):
        raise StatusInvalidoError(valor)

    normalizado = valor.strip().lower()
    try:
        return StatusPedido(normalizado)
    except ValueError:
        pass
    if normalizado in STATUS_LEGADOS:
        return STATUS_LEGADOS[normalizado]
    raise StatusInvalidoError(valor)


def is_terminal(status: StatusPedido | str) -> bool:
    return parse_status(status) in STATUS_TERMINAIS


def is_transicao_permitida(atual: StatusPedido | str, novo: StatusPedido | str) -> bool:
    """Decide se o pedido pode sair de `atual` para `novo`. Não levanta para movimentos recusados."""
    atual = parse_status(atual)
    novo = parse_status(novo)

    if atual == novo:
        return False

    if atual in STATUS_TERMINAIS:
        return False

    # Cancelado e finalizado podem vir de qualquer status não terminal
    if novo in STATUS_TERMINAIS:
        return True

    return novo in TRANSICOES_PERMITIDAS[atual]


def proximo_status(atual: StatusPedido | str) -> Optional[StatusPedido]:
    """Próximo status do fluxo linear, ou None se o pedido já está em status terminal."""
    return PROXIMO_STATUS[parse_status(atual)]


def transicoes_disponiveis(atual: StatusPedido | str) -> list[StatusPedido]:
    """Todos os destinos permitidos a partir de `atual`, na ordem das colunas do Kanban."""
    atual = parse_status(atual)
    return [s for s in StatusPedido if is_transicao_permitida(atual, s)]


def label_for(status: StatusPedido | str | None) -> str:
    """Label amigável. Valor desconhecido volta como texto cru (não quebra a tela)."""
    try:
        return STATUS_LABELS.get(parse_status(status), str(status))
    except StatusInvalidoError:
        return "" if status is None else str(status)


def badge_style_for(status: StatusPedido | str | None) -> BadgeStyle:
    try:
        return STATUS_BADGES.get(parse_status(status), BadgeStyle.NEUTRAL)
    except StatusInvalidoError:
        return BadgeStyle.NEUTRAL
