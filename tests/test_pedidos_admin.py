from decimal import Decimal

BASE = "/api/pedidos/admin"


def test_root_e_health(client):
    assert client.get("/").json()["status"] == "ok"
    resp = client.get("/api/monitoring/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "banco": "ok"}


def test_metrics_expoe_contadores_de_status(client, criar_pedido):
    pedido = criar_pedido()
    client.put(f"{BASE}/{pedido['id']}/status", json={"status": "em_preparo"})

    resp = client.get("/api/monitoring/metrics")
    assert resp.status_code == 200
    assert "pedido_status_transicoes_total" in resp.text


def test_catalogo_de_status(client):
    resp = client.get(f"{BASE}/status")
    assert resp.status_code == 200
    catalogo = {item["status"]: item for item in resp.json()}

    assert list(catalogo) == ["pendente", "em_preparo", "saiu_entrega", "finalizado", "cancelado"]
    assert catalogo["pendente"]["label"] == "Pendente"
    assert catalogo["pendente"]["proximo_status"] == "em_preparo"
    assert catalogo["finalizado"]["terminal"] is True
    assert catalogo["finalizado"]["transicoes"] == []
    assert catalogo["cancelado"]["badge"] == "danger"


def test_criar_pedido(client, criar_pedido, eventos):
    pedido = criar_pedido()

    assert pedido["status"] == "pendente"
    assert pedido["status_label"] == "Pendente"
    assert pedido["status_badge"] == "warning"
    assert pedido["numero_pedido"] == "DV-000001"
    assert Decimal(pedido["total"]) == Decimal("45.00")
    assert eventos[0].pedido_id == pedido["id"]


def test_criar_delivery_sem_endereco_retorna_400(client):
    resp = client.post(
        BASE,
        json={"tipo_entrega": "delivery", "subtotal": "10.00"},
    )
    assert resp.status_code == 400
    assert resp.json()["status_code"] == 400


def test_criar_pedido_sem_subtotal_retorna_422(client):
    resp = client.post(BASE, json={"tipo_entrega": "balcao"})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Dados inválidos"


def test_get_pedido_inexistente_retorna_404(client):
    resp = client.get(f"{BASE}/999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Pedido não encontrado"


def test_atualizar_status_e_historico(client, criar_pedido):
    pedido = criar_pedido()

    resp = client.put(
        f"{BASE}/{pedido['id']}/status",
        json={"status": "em_preparo", "alterado_por": "cozinha"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "em_preparo"

    resp = client.get(f"{BASE}/{pedido['id']}/historico")
    assert resp.status_code == 200
    historicos = resp.json()["historicos"]
    assert [(h["status_anterior"], h["status_novo"]) for h in historicos] == [
        (None, "pendente"),
        ("pendente", "em_preparo"),
    ]
    assert historicos[1]["alterado_por"] == "cozinha"
    assert historicos[1]["resumo"] == "Status alterado de 'pendente' para 'em_preparo'"


def test_transicao_nao_permitida_retorna_409(client, criar_pedido):
    pedido = criar_pedido()

    resp = client.put(f"{BASE}/{pedido['id']}/status", json={"status": "saiu_entrega"})

    assert resp.status_code == 409
    body = resp.json()
    assert body["detail"] == "Transição não permitida: Pendente → Saiu para Entrega"
    assert body["status_atual"] == "pendente"
    assert body["status_solicitado"] == "saiu_entrega"
    assert client.get(f"{BASE}/{pedido['id']}").json()["status"] == "pendente"


def test_status_desconhecido_retorna_422(client, criar_pedido):
    pedido = criar_pedido()
    resp = client.put(f"{BASE}/{pedido['id']}/status", json={"status": "shipped"})
    assert resp.status_code == 422


def test_status_legado_aceito_na_entrada(client, criar_pedido):
    pedido = criar_pedido()
    resp = client.put(f"{BASE}/{pedido['id']}/status", json={"status": "CONFIRMADO"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "em_preparo"


def test_avancar_ate_o_fim(client, criar_pedido):
    pedido = criar_pedido()

    for esperado in ("em_preparo", "saiu_entrega", "finalizado"):
        resp = client.post(f"{BASE}/{pedido['id']}/avancar")
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == esperado

    resp = client.post(f"{BASE}/{pedido['id']}/avancar", json={"alterado_por": "caixa"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Transição não permitida: Finalizado → nenhum"


def test_cancelar_pedido(client, criar_pedido):
    pedido = criar_pedido()
    client.put(f"{BASE}/{pedido['id']}/status", json={"status": "em_preparo"})

    resp = client.post(
        f"{BASE}/{pedido['id']}/cancelar",
        json={"motivo_cancelamento": "Sem estoque", "alterado_por": "gerente"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "cancelado"
    assert body["motivo_cancelamento"] == "Sem estoque"
    assert body["status_badge"] == "danger"


def test_cancelar_sem_motivo_retorna_422(client, criar_pedido):
    pedido = criar_pedido()
    resp = client.post(f"{BASE}/{pedido['id']}/cancelar", json={"motivo_cancelamento": "  "})
    assert resp.status_code == 422


def test_cancelar_pedido_finalizado_retorna_409(client, criar_pedido):
    pedido = criar_pedido()
    client.put(f"{BASE}/{pedido['id']}/status", json={"status": "finalizado"})

    resp = client.post(f"{BASE}/{pedido['id']}/cancelar", json={"motivo_cancelamento": "erro"})

    assert resp.status_code == 409
    acoes = client.get(f"{BASE}/{pedido['id']}/acoes").json()
    assert acoes["pode_cancelar"] is False
    assert acoes["pode_avancar"] is False


def test_acoes_de_pedido_pendente(client, criar_pedido):
    pedido = criar_pedido()
    resp = client.get(f"{BASE}/{pedido['id']}/acoes")
    assert resp.status_code == 200
    acoes = resp.json()
    assert acoes["pode_avancar"] is True
    assert acoes["pode_cancelar"] is True
    assert acoes["status_atual"]["transicoes"] == ["em_preparo", "finalizado", "cancelado"]


def test_kanban_agrupado(client, criar_pedido):
    a = criar_pedido()
    criar_pedido(nome_cliente="Bruno")
    client.put(f"{BASE}/{a['id']}/status", json={"status": "em_preparo"})

    resp = client.get(f"{BASE}/kanban")
    assert resp.status_code == 200
    kanban = resp.json()
    colunas = {c["id"]: c for c in kanban["colunas"]}

    assert list(colunas) == ["pendente", "em_preparo", "saiu_entrega", "finalizado", "cancelado"]
    assert colunas["pendente"]["total_pedidos"] == 1
    assert colunas["em_preparo"]["pedidos"][0]["id"] == a["id"]
    assert colunas["em_preparo"]["cor"] == "bg-blue-500"
    assert kanban["total_pedidos"] == 2


def test_kanban_filtrado_por_status(client, criar_pedido):
    a = criar_pedido()
    criar_pedido()
    client.put(f"{BASE}/{a['id']}/status", json={"status": "em_preparo"})

    resp = client.get(f"{BASE}/kanban", params={"status": ["em_preparo"]})

    assert resp.status_code == 200
    assert resp.json()["total_pedidos"] == 1


def test_listar_pedidos_com_filtros(client, criar_pedido):
    criar_pedido(tipo_entrega="balcao", endereco_entrega=None)
    criar_pedido()

    resp = client.get(BASE, params={"tipo_entrega": ["balcao"]})
    assert resp.status_code == 200
    assert [p["numero_pedido"] for p in resp.json()] == ["BL-000001"]

    resp = client.get(BASE, params={"busca": "DV-"})
    assert len(resp.json()) == 1


def test_mover_card_no_kanban(client, criar_pedido):
    pedido = criar_pedido()

    resp = client.put(
        f"{BASE}/{pedido['id']}/kanban",
        json={"status": "em_preparo", "ordem_kanban": 2},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "em_preparo"
    assert resp.json()["ordem_kanban"] == 2

    resp = client.put(f"{BASE}/{pedido['id']}/kanban", json={"status": "pendente"})
    assert resp.status_code == 409


def test_reordenar_card(client, criar_pedido):
    pedido = criar_pedido()
    resp = client.put(f"{BASE}/{pedido['id']}/ordem", json={"ordem_kanban": 7})
    assert resp.status_code == 200
    assert resp.json()["ordem_kanban"] == 7
    assert resp.json()["status"] == "pendente"


def test_filtro_de_status_aceita_valor_legado(client, criar_pedido):
    a = criar_pedido()
    criar_pedido()
    client.put(f"{BASE}/{a['id']}/status", json={"status": "em_preparo"})

    resp = client.get(BASE, params={"status": ["confirmado"]})
    assert resp.status_code == 200, resp.text
    assert [p["id"] for p in resp.json()] == [a["id"]]

    resp = client.get(BASE, params={"status": ["shipped"]})
    assert resp.status_code == 422


def test_soltar_card_em_coluna_ocupada(client, criar_pedido):
    a = criar_pedido()
    b = criar_pedido()
    client.put(f"{BASE}/{a['id']}/status", json={"status": "em_preparo"})

    resp = client.put(f"{BASE}/{b['id']}/kanban", json={"status": "em_preparo", "ordem_kanban": 0})
    assert resp.status_code == 200, resp.text

    coluna = next(c for c in client.get(f"{BASE}/kanban").json()["colunas"] if c["id"] == "em_preparo")
    assert [(p["id"], p["ordem_kanban"]) for p in coluna["pedidos"]] == [(b["id"], 0), (a["id"], 1)]
