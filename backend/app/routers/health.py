from fastapi import APIRouter

from ..core.config import settings

router = APIRouter(tags=["health"])

@router.get("", summary="Liveness probe")
def health():
    return {"status": "ok", "service": settings.project_name}
