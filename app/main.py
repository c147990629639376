import os
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.pedidos.core.exceptions import StatusInvalidoError, TransicaoNaoPermitidaError
from app.core.exception_handlers import (
    validation_exception_handler,
    http_exception_handler,
    status_invalido_handler,
    transicao_nao_permitida_handler,
    general_exception_handler,
)
from app.utils.logger import logger
from app.config.settings import CORS_ORIGINS, CORS_ALLOW_ALL, BASE_URL as SETTINGS_BASE_URL, ENABLE_DOCS

# ───────────────────────────
# Importar modelos antes das rotas
# Garante que todos os modelos estejam registrados no SQLAlchemy
# antes de qualquer query ser executada
# ───────────────────────────
import app.api.pedidos.models  # noqa: F401

from app.api.pedidos.router.router import api_pedidos
from app.api.monitoring.router import router as monitoring_router


BASE_URL = SETTINGS_BASE_URL or os.getenv("BASE_URL", "http://localhost:8000")
# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="API de Pedidos - Kanban",
    version="1.0.0",
    description="Fluxo de status de pedidos: Kanban, PDV e histórico",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Base URL do ambiente"}],
    redirect_slashes=False  # Evita redirecionamento 307 quando URL não termina com /
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(StatusInvalidoError, status_invalido_handler)
app.add_exception_handler(TransicaoNaoPermitidaError, transicao_nao_permitida_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# Middlewares
# ───────────────────────────
# Middlewares são executados na ORDEM REVERSA da adição (último adicionado = primeiro executado)

# Prometheus Middleware (para coletar métricas)
from app.utils.prometheus_metrics import PrometheusMiddleware
app.add_middleware(PrometheusMiddleware)

# CORS (adicionado por último, será executado primeiro)
# - Se CORS_ALLOW_ALL=true => allow_origins=["*"], allow_credentials=False
# - Caso contrário => allow_origins=CORS_ORIGINS (se vazio cai para ["*"]), allow_credentials=True somente quando houver origens explícitas
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────────────────
# Startup / Shutdown
# ───────────────────────────
@app.on_event("startup")
async def startup():
    from app.database.init_db import inicializar_banco

    logger.info("Iniciando API e banco de dados...")
    inicializar_banco()
    logger.info("API iniciada com sucesso.")


@app.on_event("shutdown")
async def shutdown():
    logger.info("API encerrada.")


# ───────────────────────────
# Rotas
# ───────────────────────────
@app.get("/")
async def root():
    return {"status": "ok", "message": "API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


app.include_router(monitoring_router)
app.include_router(api_pedidos)
