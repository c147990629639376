# app/database/db_connection.py

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from ..config.settings import DB_CONFIG, DB_SSL_MODE, DATABASE_URL, DB_TIMEZONE

# Base única para todos os models
Base = declarative_base()

logger = logging.getLogger(__name__)


def montar_connection_string() -> str:
    """DATABASE_URL tem prioridade; senão monta a URL do Postgres a partir de DB_CONFIG."""
    if DATABASE_URL:
        return DATABASE_URL

    # Validação mínima de config
    missing = [k for k in ('database', 'user', 'password', 'host', 'port') if not DB_CONFIG.get(k)]
    if missing:
        raise RuntimeError(f"Configuração do banco inválida, faltando variáveis: {', '.join(missing)}")

    # SSL opcional via query
    ssl_query = f"?sslmode={DB_SSL_MODE}" if DB_SSL_MODE else ""
    return (
        f"postgresql://{DB_CONFIG['user']}:{DB_CONFIG['password']}"
        f"@{DB_CONFIG['host']}:{DB_CONFIG['port']}/{DB_CONFIG['database']}{ssl_query}"
    )


connection_string = montar_connection_string()

# Timezone só se aplica ao Postgres
connect_args = {}
if connection_string.startswith("postgresql"):
    connect_args = {"options": f"-c timezone={DB_TIMEZONE}"}

engine = create_engine(
    connection_string,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# Configura o sessionmaker
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# Dependency para FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
