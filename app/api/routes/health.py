from __future__ import annotations

from fastapi import APIRouter, Depends

from app.adapters.kv.base import AbstractKVClient, KVKeys
from app.api.dependencies import get_kv_client
from app.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check used by load balancers and monitoring.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(kv: AbstractKVClient = Depends(get_kv_client)) -> dict:
    """Readiness check: the key-value store answers a read.

    A failing store surfaces as a 503 through the StorageAppError handler.
    """

    await kv.set_members(KVKeys.FABRIC_INDEX)
    return {"status": "ok", "kv_backend": settings.kv.backend}
