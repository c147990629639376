"""Criação de tipos ENUM do PostgreSQL."""
import logging
from sqlalchemy import text
from ..db_connection import engine

logger = logging.getLogger(__name__)


def enums_do_schema_pedidos():
    """(schema, nome, valores) de cada ENUM usado pelos models de pedidos."""
    from app.api.pedidos.core.status_machine import StatusPedido
    from app.api.pedidos.models.model_pedido import FormaPagamento, TipoEntrega

    return [
        ("pedidos", "pedido_status_enum", [s.value for s in StatusPedido]),
        ("pedidos", "tipo_entrega_enum", [t.value for t in TipoEntrega]),
        ("pedidos", "forma_pagamento_enum", [f.value for f in FormaPagamento]),
    ]


def criar_enums():
    """
    Cria os tipos ENUM do PostgreSQL com schema correto antes de criar as tabelas.

    Raises:
        Exception: Se houver erro ao criar algum ENUM.
    """
    try:
        with engine.begin() as conn:
            for schema, enum_name, values in enums_do_schema_pedidos():
                exists = conn.execute(
                    text(
                        """
                        SELECT 1 FROM pg_type t
                        JOIN pg_namespace n ON n.oid = t.typnamespace
                        WHERE n.nspname = :schema AND t.typname = :enum_name
                        """
                    ),
                    {"schema": schema, "enum_name": enum_name},
                ).scalar()

                if not exists:
                    values_str = ", ".join([f"'{v}'" for v in values])
                    conn.execute(text(f"CREATE TYPE {schema}.{enum_name} AS ENUM ({values_str})"))
                    logger.info(f"✅ ENUM {schema}.{enum_name} criado com sucesso")
                else:
                    logger.info(f"ℹ️ ENUM {schema}.{enum_name} já existe")

        logger.info("✅ Todos os ENUMs verificados/criados.")
    except Exception as e:
        logger.error(f"❌ Erro ao criar ENUMs: {e}")
        raise
