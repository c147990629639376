"""
Router principal do bounded context de Pedidos.
"""
from fastapi import APIRouter

from app.api.pedidos.router.admin.router_pedidos_admin import router as router_pedidos_admin

api_pedidos = APIRouter(
    tags=["API - Pedidos"]
)

api_pedidos.include_router(router_pedidos_admin)
