"""Health check route"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_store
from api.responses import HealthResponse
from api.store import SandboxStore
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("nidus.sandbox.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check(store: SandboxStore = Depends(get_store)):
    """Basic health check endpoint"""
    logger.debug("Health check: %d shops, %d orders", len(store.coffee_shops), len(store.orders))
    return HealthResponse(status="ok", service=settings.app_name, version=settings.app_version)
