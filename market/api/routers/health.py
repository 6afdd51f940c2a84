from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/")
def health():
    return {
        "message": "Ebook Market API v1.0",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
