import itertools

import pytest

from app.api.pedidos.core.exceptions import StatusInvalidoError
from app.api.pedidos.core.kanban_config import COLUNAS_KANBAN, coluna_do_status
from app.api.pedidos.core.status_machine import (
    PROXIMO_STATUS,
    STATUS_BADGES,
    STATUS_LABELS,
    TRANSICOES_PERMITIDAS,
    BadgeStyle,
    StatusPedido as S,
    badge_style_for,
    is_terminal,
    is_transicao_permitida,
    label_for,
    parse_status,
    proximo_status,
    transicoes_disponiveis,
    verificar_cobertura,
)

NAO_TERMINAIS = [S.PENDENTE, S.EM_PREPARO, S.SAIU_ENTREGA]


@pytest.mark.parametrize("status", list(S))
def test_mesmo_status_nunca_e_transicao(status):
    assert is_transicao_permitida(status, status) is False


@pytest.mark.parametrize("status", NAO_TERMINAIS)
def test_cancelar_permitido_de_qualquer_status_nao_terminal(status):
    assert is_transicao_permitida(status, S.CANCELADO) is True


@pytest.mark.parametrize("status", NAO_TERMINAIS)
def test_finalizar_permitido_de_qualquer_status_nao_terminal(status):
    assert is_transicao_permitida(status, S.FINALIZADO) is True


def test_finalizado_nao_pode_ser_cancelado():
    assert is_transicao_permitida(S.FINALIZADO, S.CANCELADO) is False


def test_cancelado_nao_pode_ser_finalizado():
    assert is_transicao_permitida(S.CANCELADO, S.FINALIZADO) is False


@pytest.mark.parametrize("terminal,destino", list(itertools.product([S.FINALIZADO, S.CANCELADO], list(S))))
def test_status_terminal_nao_tem_saida(terminal, destino):
    assert is_transicao_permitida(terminal, destino) is False
    assert is_terminal(terminal)


def test_pendente_nao_pula_para_saiu_entrega():
    assert is_transicao_permitida(S.PENDENTE, S.SAIU_ENTREGA) is False


def test_em_preparo_pode_ser_cancelado():
    assert is_transicao_permitida(S.EM_PREPARO, S.CANCELADO) is True


def test_nao_volta_no_fluxo():
    assert is_transicao_permitida(S.SAIU_ENTREGA, S.EM_PREPARO) is False
    assert is_transicao_permitida(S.EM_PREPARO, S.PENDENTE) is False


def test_proximo_status():
    assert proximo_status(S.PENDENTE) == S.EM_PREPARO
    assert proximo_status(S.EM_PREPARO) == S.SAIU_ENTREGA
    assert proximo_status(S.SAIU_ENTREGA) == S.FINALIZADO
    assert proximo_status(S.FINALIZADO) is None
    assert proximo_status(S.CANCELADO) is None


@pytest.mark.parametrize("status", list(S))
def test_proximo_status_sempre_e_transicao_permitida(status):
    proximo = proximo_status(status)
    if proximo is not None:
        assert is_transicao_permitida(status, proximo)


@pytest.mark.parametrize("status", list(S))
def test_transicoes_disponiveis_consistente_com_validador(status):
    esperado = [d for d in S if is_transicao_permitida(status, d)]
    assert transicoes_disponiveis(status) == esperado


def test_transicoes_disponiveis_pendente():
    assert transicoes_disponiveis(S.PENDENTE) == [S.EM_PREPARO, S.FINALIZADO, S.CANCELADO]


def test_status_desconhecido_levanta_erro():
    with pytest.raises(StatusInvalidoError) as exc:
        is_transicao_permitida("shipped", S.CANCELADO)
    assert exc.value.valor == "shipped"

    with pytest.raises(StatusInvalidoError):
        is_transicao_permitida(S.PENDENTE, "shipped")

    with pytest.raises(StatusInvalidoError):
        proximo_status(None)


def test_parse_status_aceita_texto_e_legados():
    assert parse_status("em_preparo") == S.EM_PREPARO
    assert parse_status("  PENDENTE ") == S.PENDENTE
    assert parse_status("confirmado") == S.EM_PREPARO
    assert parse_status("entregue") == S.FINALIZADO
    assert is_transicao_permitida("pendente", "confirmado") is True


def test_label_e_badge():
    assert label_for(S.SAIU_ENTREGA) == "Saiu para Entrega"
    assert label_for("cancelado") == "Cancelado"
    assert badge_style_for(S.PENDENTE) == BadgeStyle.WARNING
    assert badge_style_for(S.CANCELADO) == BadgeStyle.DANGER


def test_label_de_status_desconhecido_volta_texto_cru():
    assert label_for("shipped") == "shipped"
    assert label_for(None) == ""
    assert badge_style_for("shipped") == BadgeStyle.NEUTRAL


@pytest.mark.parametrize(
    "tabela",
    [TRANSICOES_PERMITIDAS, PROXIMO_STATUS, STATUS_LABELS, STATUS_BADGES],
)
def test_tabelas_cobrem_todos_os_status(tabela):
    assert set(tabela) == set(S)


def test_verificar_cobertura_acusa_status_faltando():
    with pytest.raises(RuntimeError):
        verificar_cobertura([S.PENDENTE, S.EM_PREPARO], "parcial")


def test_tabelas_sao_imutaveis():
    with pytest.raises(TypeError):
        TRANSICOES_PERMITIDAS[S.CANCELADO] = frozenset({S.PENDENTE})


def test_colunas_kanban_uma_por_status_na_ordem_do_fluxo():
    assert [c.id for c in COLUNAS_KANBAN] == list(S)
    assert [c.ordem for c in COLUNAS_KANBAN] == [1, 2, 3, 4, 5]
    assert coluna_do_status(S.EM_PREPARO).titulo == label_for(S.EM_PREPARO)
