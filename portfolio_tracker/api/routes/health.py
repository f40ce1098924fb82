from datetime import datetime, timezone

from fastapi import APIRouter, Request

from portfolio_tracker.config import settings as default_settings

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    settings = getattr(request.app.state, "settings", default_settings)
    return {
        "status": "ok",
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
    }
