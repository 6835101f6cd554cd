"""
═══════════════════════════════════════════════════════════════════════════════
Credenciamento — In-Memory хранилище (замена PostgreSQL для локальной разработки)
═══════════════════════════════════════════════════════════════════════════════

In-memory реализации document_repo, identity_repo и storage_client +
функция ``activate_memory_store()`` для monkey-patching.
Используется при недоступности БД на старте и в тестах.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from uuid import uuid4

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Хранилища данных
# ═══════════════════════════════════════════════════════════════════════════════
_documents: dict[str, dict[str, dict]] = {}
_identities: dict[str, dict] = {}
_blobs: dict[str, bytes] = {}

_now = lambda: datetime.now(timezone.utc)  # noqa: E731


def reset_memory_store() -> None:
    """Очищает все in-memory хранилища."""
    _documents.clear()
    _identities.clear()
    _blobs.clear()


# ═══════════════════════════════════════════════════════════════════════════════
# document_repo in-memory
# ═══════════════════════════════════════════════════════════════════════════════

async def fetch_all(collection: str) -> list[dict]:
    docs = _documents.get(collection, {})
    return [{**copy.deepcopy(d), "id": doc_id} for doc_id, d in docs.items()]


async def fetch_by_id(collection: str, doc_id: str) -> dict | None:
    doc = _documents.get(collection, {}).get(doc_id)
    return {**copy.deepcopy(doc), "id": doc_id} if doc is not None else None


async def create(collection: str, data: dict, doc_id: str | None = None) -> str:
    """Создаёт документ в памяти."""
    doc_id = doc_id or uuid4().hex
    payload = {k: v for k, v in data.items() if k != "id"}
    _documents.setdefault(collection, {})[doc_id] = copy.deepcopy(payload)
    logger.info("Memory store: created %s/%s", collection, doc_id)
    return doc_id


async def update(collection: str, doc_id: str, data: dict) -> None:
    docs = _documents.setdefault(collection, {})
    if doc_id in docs:
        docs[doc_id] = copy.deepcopy({k: v for k, v in data.items() if k != "id"})


async def delete(collection: str, doc_id: str) -> bool:
    return _documents.get(collection, {}).pop(doc_id, None) is not None


# ═══════════════════════════════════════════════════════════════════════════════
# identity_repo in-memory
# ═══════════════════════════════════════════════════════════════════════════════

async def create_identity(
    email: str, role: str, display_name: str | None, password_hash: str,
) -> dict:
    """Создаёт учётную запись входа в памяти."""
    uid = uuid4().hex
    identity = {
        "uid": uid, "email": email, "role": role,
        "display_name": display_name, "password_hash": password_hash,
        "created_at": _now(),
    }
    _identities[uid] = identity
    logger.info("Memory store: created identity %s <%s>", uid, email)
    return {k: v for k, v in identity.items() if k != "password_hash"}


async def get_identity_by_id(uid: str) -> dict | None:
    return _identities.get(uid)


async def get_identity_by_email(email: str) -> dict | None:
    for identity in _identities.values():
        if identity["email"] == email:
            return identity
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# storage_client in-memory
# ═══════════════════════════════════════════════════════════════════════════════

async def upload_binary(
    blob: bytes, folder: str, key: str, content_type: str = "application/octet-stream",
) -> str:
    path = f"{folder}/{key}"
    _blobs[path] = blob
    return f"memory://{path}"


# ═══════════════════════════════════════════════════════════════════════════════
# Активация in-memory хранилища (monkey-patching)
# ═══════════════════════════════════════════════════════════════════════════════

def activate_memory_store() -> None:
    """
    Подменяет функции репозиториев и storage-клиента на in-memory реализации.

    Вызывается из credenciamento.main → lifespan() при недоступности БД.
    """
    from credenciamento.adapters import storage_client
    from credenciamento.db.repositories import document_repo, identity_repo

    # ── document_repo ──
    document_repo.fetch_all = fetch_all
    document_repo.fetch_by_id = fetch_by_id
    document_repo.create = create
    document_repo.update = update
    document_repo.delete = delete

    # ── identity_repo ──
    identity_repo.create_identity = create_identity
    identity_repo.get_identity_by_id = get_identity_by_id
    identity_repo.get_identity_by_email = get_identity_by_email

    # ── storage_client ──
    storage_client.upload_binary = upload_binary

    logger.warning(
        "🧠 Memory store ACTIVATED — all data is in-memory (lost on restart)."
    )
