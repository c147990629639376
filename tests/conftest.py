import os

# Precisa estar definido antes de importar app.* (engine é criado no import)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUNNING_IN_DOCKER", "1")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database.db_connection import Base, get_db
from app.api.pedidos.services.dependencies import get_event_publisher
from app.api.pedidos.utils.pedido_notification_helper import PedidoEventPublisher


@pytest.fixture()
def engine():
    # SQLite não tem schemas: "pedidos.pedidos" vira "pedidos"
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        execution_options={"schema_translate_map": {"pedidos": None}},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def publicador():
    return PedidoEventPublisher()


@pytest.fixture()
def eventos(publicador):
    recebidos = []
    publicador.inscrever(recebidos.append)
    return recebidos


@pytest.fixture()
def client(session_factory, publicador):
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_publisher] = lambda: publicador
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def criar_pedido(client):
    def _criar(**overrides):
        payload = {
            "nome_cliente": "Maria",
            "telefone_cliente": "11999990000",
            "tipo_entrega": "delivery",
            "endereco_entrega": "Rua das Flores, 10",
            "subtotal": "40.00",
            "taxa_entrega": "5.00",
            "forma_pagamento": "pix",
        }
        payload.update(overrides)
        resp = client.post("/api/pedidos/admin", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _criar
