"""
credenciamento/db/repositories/identity_repo.py — Репозиторий учётных записей входа.

Нарушение ``email UNIQUE`` → ``ConflictError``, прочие ошибки
PostgreSQL → ``StoreError``.
"""

from __future__ import annotations

from uuid import uuid4

import asyncpg

from credenciamento.database import get_connection
from credenciamento.exceptions import ConflictError, StoreError


async def create_identity(
    email: str,
    role: str,
    display_name: str | None,
    password_hash: str,
) -> dict:
    """Создать учётную запись входа."""
    try:
        async with get_connection() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO identities (uid, email, role, display_name, password_hash)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING uid, email, role, display_name, created_at
                """,
                uuid4().hex, email, role, display_name, password_hash,
            )
    except asyncpg.UniqueViolationError as exc:
        raise ConflictError(
            f"Identity with email '{email}' already exists",
            details={"field": "email"},
        ) from exc
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to create identity <{email}>: {exc}") from exc
    return dict(row) if row else {}


async def get_identity_by_id(uid: str) -> dict | None:
    """Найти учётную запись по uid."""
    try:
        async with get_connection() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM identities WHERE uid = $1", uid
            )
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to read identity {uid}: {exc}") from exc
    return dict(row) if row else None


async def get_identity_by_email(email: str) -> dict | None:
    """Найти учётную запись по email."""
    try:
        async with get_connection() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM identities WHERE email = $1", email
            )
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to read identity <{email}>: {exc}") from exc
    return dict(row) if row else None
