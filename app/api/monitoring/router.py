"""
Router para monitoramento (métricas Prometheus e health check).
"""
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.database.db_connection import get_db
from app.utils.prometheus_metrics import get_metrics, CONTENT_TYPE_LATEST
from app.utils.logger import logger

router = APIRouter(
    prefix="/api/monitoring",
    tags=["Monitoring - Monitoramento"]
)


@router.get("/metrics")
async def metrics():
    """
    Endpoint de métricas Prometheus (público, sem autenticação).
    Acesse em: /api/monitoring/metrics
    """
    return StreamingResponse(
        iter([get_metrics()]),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/health")
def health(db: Session = Depends(get_db)):
    """Verifica se a API responde e se o banco aceita consultas."""
    try:
        db.execute(text("SELECT 1"))
        banco = "ok"
    except Exception as e:
        logger.error(f"[Monitoring] Banco indisponível no health check: {e}")
        banco = "indisponivel"
    return {"status": "ok", "banco": banco}
