"""
credenciamento/services/identity_service.py — Учётные записи входа и JWT.

Provisioning учётной записи (``create_identity``) для компаний,
credenciados и сотрудников: email + роль + временный пароль (bcrypt).
Сам вход (логин, смена пароля) в этот сервис не входит; здесь только
выпуск и проверка JWT, которыми подписаны запросы к API.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import jwt

from credenciamento.config import get_settings
from credenciamento.db.repositories import document_repo, identity_repo
from credenciamento.exceptions import AuthenticationError, ConflictError
from credenciamento.models.enums import UserRole
from credenciamento.models.user import UserProfile

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


# ═══════════════════════════════════════════════════════════════════════════
# РАБОТА С ПАРОЛЯМИ
# ═══════════════════════════════════════════════════════════════════════════


def hash_password(password: str) -> str:
    """Хеширует пароль с помощью bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


# ═══════════════════════════════════════════════════════════════════════════
# JWT-ТОКЕНЫ
# ═══════════════════════════════════════════════════════════════════════════


def create_access_token(
    uid: str,
    role: UserRole | str,
    expires_delta: timedelta | None = None,
) -> str:
    """Создаёт подписанный JWT access-токен."""
    settings = get_settings()
    exp = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    role_value = role.value if isinstance(role, UserRole) else role
    payload = {"sub": uid, "exp": exp, "type": "access", "role": role_value}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Декодирует и проверяет JWT-токен."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except Exception as exc:
        raise AuthenticationError(f"Invalid token: {exc}") from exc


# ═══════════════════════════════════════════════════════════════════════════
# PROVISIONING
# ═══════════════════════════════════════════════════════════════════════════


async def create_identity(
    email: str, role: UserRole, display_name: str | None = None,
) -> str:
    """
    Создаёт учётную запись входа и возвращает её uid.

    Raises:
        ConflictError: email уже зарегистрирован.
    """
    existing = await identity_repo.get_identity_by_email(email)
    if existing:
        raise ConflictError(
            f"Identity with email '{email}' already exists",
            details={"field": "email"},
        )

    temporary_password = secrets.token_urlsafe(12)
    row = await identity_repo.create_identity(
        email=email,
        role=role.value,
        display_name=display_name,
        password_hash=hash_password(temporary_password),
    )
    logger.info("Identity provisioned: %s <%s> role=%s", row["uid"], email, role.value)
    return row["uid"]


async def save_user_profile(
    uid: str, role: UserRole, name: str, email: str, avatar: str | None = None,
) -> str:
    """Пишет профиль пользователя в коллекцию ``users``."""
    profile = UserProfile(uid=uid, role=role, name=name, email=email, avatar=avatar)
    return await document_repo.create(USERS_COLLECTION, profile.to_document())
