import logging

from sqlalchemy import inspect

from .db_connection import engine, Base
from .infrastructure.enums import criar_enums
from .infrastructure.schemas import criar_schemas

logger = logging.getLogger(__name__)

TABELAS_ESSENCIAIS = [
    ("pedidos", "pedidos"),
    ("pedidos", "pedidos_historico"),
]


def _is_postgres() -> bool:
    return engine.dialect.name == "postgresql"


def importar_models():
    # ─── Models Pedidos ──────────────────────────────────────────────
    from app.api.pedidos.models.model_pedido import PedidoModel  # noqa: F401
    from app.api.pedidos.models.model_pedido_historico import PedidoHistoricoModel  # noqa: F401
    logger.info("📦 Models importados com sucesso.")


def verificar_banco_inicializado() -> bool:
    """Verifica se o banco já foi inicializado consultando se as tabelas principais existem"""
    try:
        inspector = inspect(engine)
        for schema, tabela in TABELAS_ESSENCIAIS:
            if not inspector.has_table(tabela, schema=schema if _is_postgres() else None):
                logger.info(f"ℹ️ Tabela {schema}.{tabela} ainda não existe")
                return False
        return True
    except Exception as e:
        logger.error(f"❌ Erro ao verificar inicialização do banco: {e}")
        return False


def criar_tabelas():
    importar_models()
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("✅ Tabelas verificadas/criadas.")
    except Exception as e:
        logger.error(f"❌ Erro ao criar tabelas: {e}")
        raise


def inicializar_banco():
    logger.info("🚀 Iniciando processo de inicialização do banco de dados...")

    if _is_postgres():
        # SEMPRE cria/verifica os schemas primeiro
        logger.info("📦 Passo 1/3: Criando/verificando schemas...")
        criar_schemas()

        # Cria os ENUMs antes de criar as tabelas
        logger.info("📦 Passo 2/3: Criando/verificando ENUMs...")
        importar_models()
        criar_enums()
    else:
        logger.info(f"ℹ️ Banco {engine.dialect.name}: schemas e ENUMs do PostgreSQL ignorados")

    # criar_tabelas usa checkfirst=True, então não sobrescreve
    logger.info("📋 Passo 3/3: Criando/verificando todas as tabelas...")
    criar_tabelas()

    if not verificar_banco_inicializado():
        logger.error("❌ Banco não está inicializado (tabelas principais ausentes).")
        return

    logger.info("✅ Banco inicializado com sucesso.")
