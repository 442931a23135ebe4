"""
Health check endpoint.

This is the first thing you hit to verify the system is running.
It checks both the queue database and Redis connectivity.

No whitelist check here: load balancers and container orchestrators
probe it from addresses that are not API clients.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from redis import Redis

from api.dependencies import get_db_session_factory, get_redis

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(
    db_session_factory=Depends(get_db_session_factory),
    redis: Redis = Depends(get_redis),
) -> dict:
    """Check that the database and Redis are reachable."""
    with db_session_factory() as session:
        session.execute(text("SELECT 1"))

    redis.ping()

    return {"status": "healthy", "database": "ok", "redis": "ok"}
