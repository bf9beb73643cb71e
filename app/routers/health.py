"""
Health Check Router
Simple health check endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.db.store import TransactionStore, get_store

router = APIRouter()


@router.get("/health")
async def health_check(store: TransactionStore = Depends(get_store)):
    """
    Health check endpoint.
    Returns API status and the size of the current snapshot.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "transactions": len(store.engine.transactions),
        "currency": store.currency,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
