"""
Handlers globais de exceção registrados em app/main.py.
"""
from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.pedidos.core.exceptions import StatusInvalidoError, TransicaoNaoPermitidaError
from app.api.pedidos.core.status_machine import label_for
from app.utils.logger import logger


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"[Validation] {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Dados inválidos",
            "errors": jsonable_encoder(exc.errors()),
            "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error(f"[HTTP] {request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "status_code": exc.status_code},
        headers=getattr(exc, "headers", None),
    )


async def status_invalido_handler(request: Request, exc: StatusInvalidoError):
    # Valor fora do enum chegou até aqui: indica defeito em outra parte do sistema
    logger.error(f"[StatusPedido] Status inválido em {request.method} {request.url.path}: {exc.valor!r}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": str(exc),
            "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
        },
    )


async def transicao_nao_permitida_handler(request: Request, exc: TransicaoNaoPermitidaError):
    atual = label_for(exc.status_atual)
    novo = label_for(exc.status_novo) or "nenhum"
    logger.info(f"[StatusPedido] {request.method} {request.url.path}: transição {atual} → {novo} recusada")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": f"Transição não permitida: {atual} → {novo}",
            "status_atual": getattr(exc.status_atual, "value", exc.status_atual),
            "status_solicitado": getattr(exc.status_novo, "value", exc.status_novo),
            "status_code": status.HTTP_409_CONFLICT,
        },
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"[Erro] {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Erro interno do servidor",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        },
    )
