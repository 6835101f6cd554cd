"""
═══════════════════════════════════════════════════════════════════════════════
Credenciamento — Главная точка входа сервиса (Application Entry Point)
═══════════════════════════════════════════════════════════════════════════════

Фабрика приложения (Application Factory Pattern) для back-office сети
аккредитации: компании, сотрудники, credenciados, планы, панель управления.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from credenciamento import __version__
from credenciamento.config import get_settings
from credenciamento.database import close_pool, get_pool
from credenciamento.exceptions import CredenciamentoError

# ── API роутеры ──────────────────────────────────────────────────────────
from credenciamento.api.credenciados import router as credenciados_router
from credenciamento.api.empresas import router as empresas_router
from credenciamento.api.funcionarios import router as funcionarios_router
from credenciamento.api.health import router as health_router
from credenciamento.api.masks import router as masks_router
from credenciamento.api.overview import router as overview_router
from credenciamento.api.planos import router as planos_router
from credenciamento.api.validate import router as validate_router

# ═══════════════════════════════════════════════════════════════════════════════
# Настройка логирования
# ═══════════════════════════════════════════════════════════════════════════════
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Код доменной ошибки → HTTP-статус
STATUS_MAP = {
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "VALIDATION_ERROR": 422,
    "AUTH_ERROR": 401,
    "AUTHZ_ERROR": 403,
    "UPLOAD_ERROR": 502,
    "STORE_ERROR": 503,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Автоматическое применение SQL-миграций
# ═══════════════════════════════════════════════════════════════════════════════

async def _apply_migrations(pool) -> None:
    """Применяет SQL-миграции из ``credenciamento/db/migrations/``."""
    from pathlib import Path

    migrations_dir = Path(__file__).parent / "db" / "migrations"
    if not migrations_dir.is_dir():
        logger.info("No migrations directory found — skipping")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))
    if not sql_files:
        logger.info("No SQL migration files found — skipping")
        return

    async with pool.acquire() as conn:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS _applied_migrations (
                filename TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ DEFAULT NOW()
            )
        """)

        rows = await conn.fetch("SELECT filename FROM _applied_migrations")
        applied = {row["filename"] for row in rows}

        for sql_file in sql_files:
            if sql_file.name in applied:
                continue

            logger.info(f"📄 Applying migration: {sql_file.name}")
            sql_text = sql_file.read_text(encoding="utf-8")
            async with conn.transaction():
                await conn.execute(sql_text)
                await conn.execute(
                    "INSERT INTO _applied_migrations (filename) VALUES ($1)",
                    sql_file.name,
                )
            logger.info(f"✅ Migration applied: {sql_file.name}")

    logger.info(f"✅ All migrations up to date ({len(sql_files)} files checked)")


# ═══════════════════════════════════════════════════════════════════════════════
# Lifespan — управление жизненным циклом
# ═══════════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan сервиса.

    Startup:
        1. Создаём пул соединений к PostgreSQL.
        2. Применяем миграции.
        3. При недоступности БД — graceful degradation (memory store).
        4. Подключаем NATS publisher (необязательно).

    Shutdown:
        1. Закрываем NATS и пул БД.
    """
    settings = get_settings()
    logger.info(f"🚀 Credenciamento v{__version__} starting...")
    logger.info(f"   Log level: {settings.log_level}")

    pool = None
    try:
        pool = await get_pool()
        logger.info("✅ Database pool initialized")
    except Exception as e:
        logger.warning(f"⚠️  Database not available — activating memory store: {e}")
        from credenciamento.memory_store import activate_memory_store
        activate_memory_store()

    if pool is not None:
        try:
            await _apply_migrations(pool)
        except Exception as e:
            logger.warning(f"⚠️  Migration apply failed (non-fatal): {e}")

    try:
        from credenciamento.events import connect as nats_connect
        await nats_connect()
    except Exception as e:
        logger.warning(f"⚠️  NATS publisher not available (events will be skipped): {e}")

    yield

    # Shutdown: NATS → DB
    try:
        from credenciamento.events import disconnect as nats_disconnect
        await nats_disconnect()
    except Exception as e:
        logger.warning(f"NATS disconnect failed: {e}")
    try:
        await close_pool()
    except Exception as e:
        logger.warning(f"Database pool close failed: {e}")
    logger.info("🛑 Credenciamento stopped")


# ═══════════════════════════════════════════════════════════════════════════════
# Фабрика приложения
# ═══════════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Создаёт и конфигурирует FastAPI-приложение."""
    settings = get_settings()

    _is_production = settings.app_env == "production"

    app = FastAPI(
        redirect_slashes=False,
        title="Credenciamento",
        description=(
            "Back-office for a benefits and accreditation network: companies, "
            "employees, accredited providers, plans and a management overview."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url=None if _is_production else "/docs",
        redoc_url=None if _is_production else "/redoc",
        openapi_url=None if _is_production else "/api/v1/openapi.json",
    )

    # ── CORS middleware ──────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    )

    # ── Подключение API-роутеров ─────────────────────────────────────────
    v1_router = APIRouter(prefix="/api/v1")
    v1_router.include_router(empresas_router)
    v1_router.include_router(funcionarios_router)
    v1_router.include_router(credenciados_router)
    v1_router.include_router(planos_router)
    v1_router.include_router(overview_router)
    v1_router.include_router(masks_router)
    v1_router.include_router(validate_router)
    v1_router.include_router(health_router)

    app.include_router(v1_router)

    # ── Глобальный обработчик CredenciamentoError ───────────────────────
    @app.exception_handler(CredenciamentoError)
    async def domain_error_handler(request: Request, exc: CredenciamentoError) -> JSONResponse:
        """Маппинг кодов доменных ошибок на HTTP-статусы."""
        status_code = STATUS_MAP.get(exc.code, 500)
        return JSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            },
        )

    # ── Корневой эндпоинт ────────────────────────────────────────────────
    @app.get("/")
    async def root():
        return {
            "name": "Credenciamento",
            "version": __version__,
            "description": "Accreditation network back-office",
            "docs": "/docs",
            "api": {
                "v1": {
                    "health": "/api/v1/health",
                    "empresas": "/api/v1/empresas",
                    "funcionarios": "/api/v1/funcionarios",
                    "credenciados": "/api/v1/credenciados",
                    "planos": "/api/v1/planos",
                    "overview": "/api/v1/overview",
                },
            },
        }

    return app


# ═══════════════════════════════════════════════════════════════════════════════
# Module-level singleton
# ═══════════════════════════════════════════════════════════════════════════════
app = create_app()


def main() -> None:
    """Запускает сервис через Uvicorn."""
    settings = get_settings()
    logger.info(f"Starting Credenciamento server on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        "credenciamento.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
