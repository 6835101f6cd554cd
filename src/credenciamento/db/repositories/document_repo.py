"""
credenciamento/db/repositories/document_repo.py — Репозиторий документов.

Коллекции («empresas», «funcionarios», «credenciados», «planos»,
«solicitacoes», «users», «credenciadoras») лежат в одной таблице
``documents``. Ссылки между документами (``empresaId``, ``accrediting_Id``)
не являются внешними ключами — только сравнение по значению.

Каждая функция возвращает документ как ``dict`` с ключом ``id``.
Ошибки PostgreSQL превращаются в ``StoreError``.
"""

from __future__ import annotations

from uuid import uuid4

import asyncpg

from credenciamento.database import get_connection
from credenciamento.exceptions import StoreError


def _with_id(doc_id: str, data: dict) -> dict:
    return {**data, "id": doc_id}


async def fetch_all(collection: str) -> list[dict]:
    """Все документы коллекции (снимок на момент запроса)."""
    try:
        async with get_connection() as conn:
            rows = await conn.fetch(
                "SELECT doc_id, data FROM documents WHERE collection = $1 ORDER BY created_at",
                collection,
            )
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to read {collection}: {exc}") from exc
    return [_with_id(r["doc_id"], r["data"]) for r in rows]


async def fetch_by_id(collection: str, doc_id: str) -> dict | None:
    """Документ по id или None."""
    try:
        async with get_connection() as conn:
            row = await conn.fetchrow(
                "SELECT doc_id, data FROM documents WHERE collection = $1 AND doc_id = $2",
                collection, doc_id,
            )
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to read {collection}/{doc_id}: {exc}") from exc
    return _with_id(row["doc_id"], row["data"]) if row else None


async def create(collection: str, data: dict, doc_id: str | None = None) -> str:
    """Создаёт документ; ``doc_id`` задаёт id явно (e.g. uid учётной записи)."""
    doc_id = doc_id or uuid4().hex
    payload = {k: v for k, v in data.items() if k != "id"}
    try:
        async with get_connection() as conn:
            await conn.execute(
                "INSERT INTO documents (collection, doc_id, data) VALUES ($1, $2, $3)",
                collection, doc_id, payload,
            )
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to create {collection}/{doc_id}: {exc}") from exc
    return doc_id


async def update(collection: str, doc_id: str, data: dict) -> None:
    """Полностью перезаписывает документ (без слияния полей)."""
    payload = {k: v for k, v in data.items() if k != "id"}
    try:
        async with get_connection() as conn:
            await conn.execute(
                """
                UPDATE documents SET data = $3, updated_at = NOW()
                WHERE collection = $1 AND doc_id = $2
                """,
                collection, doc_id, payload,
            )
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to update {collection}/{doc_id}: {exc}") from exc


async def delete(collection: str, doc_id: str) -> bool:
    """Физически удаляет документ. True — если документ существовал."""
    try:
        async with get_connection() as conn:
            result = await conn.execute(
                "DELETE FROM documents WHERE collection = $1 AND doc_id = $2",
                collection, doc_id,
            )
    except asyncpg.PostgresError as exc:
        raise StoreError(f"Failed to delete {collection}/{doc_id}: {exc}") from exc
    return result.endswith(" 1")
