from fastapi import APIRouter

from app.api.endpoints import health
from app.api.endpoints import gate
from app.api.endpoints import blacklist

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["_meta"])
router.include_router(gate.router, prefix="/auth", tags=["auth"])
router.include_router(blacklist.router, prefix="/blacklist", tags=["blacklist"])
