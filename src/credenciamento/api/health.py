"""
credenciamento/api/health.py — Health check эндпоинт.

GET /api/v1/health — проверяет доступность PostgreSQL (хранилища документов).
"""

from fastapi import APIRouter

from credenciamento.database import check_connection

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check сервиса")
async def health():
    """Проверяет доступность БД; без неё сервис работает на memory store."""
    db_ok = await check_connection()
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "service": "credenciamento",
    }
