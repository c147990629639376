from fastapi import Depends
from sqlalchemy.orm import Session

from app.database.db_connection import get_db
from app.api.pedidos.repositories.repo_pedidos import PedidoRepository
from app.api.pedidos.services.service_pedidos import PedidoService
from app.api.pedidos.services.service_pedido_status import PedidoStatusService
from app.api.pedidos.services.service_pedido_kanban import KanbanService
from app.api.pedidos.utils.pedido_notification_helper import PedidoEventPublisher, publisher


def get_pedido_repository(db: Session = Depends(get_db)) -> PedidoRepository:
    return PedidoRepository(db)


def get_event_publisher() -> PedidoEventPublisher:
    return publisher


def get_pedido_service(
    db: Session = Depends(get_db),
    repo: PedidoRepository = Depends(get_pedido_repository),
    publicador: PedidoEventPublisher = Depends(get_event_publisher),
) -> PedidoService:
    return PedidoService(db, repo=repo, publicador=publicador)


def get_pedido_status_service(
    db: Session = Depends(get_db),
    repo: PedidoRepository = Depends(get_pedido_repository),
    publicador: PedidoEventPublisher = Depends(get_event_publisher),
) -> PedidoStatusService:
    return PedidoStatusService(db, repo=repo, publicador=publicador)


def get_kanban_service(
    db: Session = Depends(get_db),
    repo: PedidoRepository = Depends(get_pedido_repository),
    status_service: PedidoStatusService = Depends(get_pedido_status_service),
) -> KanbanService:
    return KanbanService(db, repo=repo, status_service=status_service)
