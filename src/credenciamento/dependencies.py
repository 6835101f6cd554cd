"""
═══════════════════════════════════════════════════════════════════════════════
Credenciamento — Зависимости FastAPI (Dependency Injection)
═══════════════════════════════════════════════════════════════════════════════

``get_current_user()`` — извлекает действующего пользователя из JWT.
Дальше пользователь передаётся в сервисы явным параметром.
"""

from __future__ import annotations

from fastapi import Header, HTTPException, status

from credenciamento.db.repositories import identity_repo
from credenciamento.models.user import CurrentUser
from credenciamento.services.identity_service import decode_token


async def get_current_user(authorization: str | None = Header(None)) -> CurrentUser:
    """
    Извлекает и валидирует JWT-токен из заголовка ``Authorization``.

    Алгоритм:
        1. Проверяет наличие и формат заголовка Authorization.
        2. Декодирует JWT (подпись + срок действия).
        3. Загружает учётную запись по uid (claim ``sub``).
        4. Возвращает CurrentUser (роль — из токена, иначе из учётной записи).

    Raises:
        HTTPException(401): токен отсутствует, невалиден, учётная запись не найдена.
    """
    # ── Шаг 1: наличие и формат заголовка ──
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header must be 'Bearer <token>'",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]
    try:
        # ── Шаг 2: декодирование JWT ──
        payload = decode_token(token)
        uid = payload.get("sub")
        if not uid:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token payload missing 'sub'",
            )

        # ── Шаг 3: учётная запись ──
        identity = await identity_repo.get_identity_by_id(uid)
        if not identity:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found",
            )

        # ── Шаг 4: CurrentUser ──
        return CurrentUser(
            uid=identity["uid"],
            role=payload.get("role") or identity["role"],
            display_name=identity.get("display_name"),
            email=identity.get("email"),
        )

    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
