from fastapi import APIRouter

from .endpoints import custom_metrics, external_metrics, health

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(external_metrics.router)
api_router.include_router(custom_metrics.router)
