"""
Health check router with database and Redis connectivity verification.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
import redis

from tablebook.core.config import get_settings
from tablebook.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check - always returns OK."""
    return {"status": "ok"}


@router.get("/api/health")
def api_health_check(db: Session = Depends(get_db)):
    """
    Check database connectivity, and Redis when ``REDIS_URL`` is set.

    Returns 503 if the database is down. Redis is optional and never
    fails the check.
    """
    health_status = {
        "status": "ok",
        "services": {}
    }
    is_healthy = True

    try:
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = {"status": "ok"}
    except Exception as e:
        health_status["services"]["database"] = {"status": "error", "message": str(e)}
        is_healthy = False

    redis_url = get_settings().REDIS_URL
    if not redis_url:
        health_status["services"]["redis"] = {"status": "not_configured"}
    else:
        try:
            redis_client = redis.Redis.from_url(redis_url, socket_connect_timeout=2)
            redis_client.ping()
            health_status["services"]["redis"] = {"status": "ok"}
        except redis.ConnectionError:
            health_status["services"]["redis"] = {"status": "unavailable", "message": "Redis not connected"}
        except Exception as e:
            health_status["services"]["redis"] = {"status": "error", "message": str(e)}

    if not is_healthy:
        health_status["status"] = "unhealthy"
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=health_status
        )

    return health_status
