"""
credenciamento/services/credenciado_service.py — Сервис управления credenciados.

Регистрация credenciado:
    1. Валидация формы (поля + межполевые правила документов).
    2. Учётная запись входа с ролью ``accredited``.
    3. Логотип (если есть) → хранилище, папка ``credenciados``,
       ключ — цифры документа.
    4. Профиль в ``users`` (avatar = URL логотипа) и документ
       в ``credenciados`` под uid учётной записи.

Шаги не атомарны: если загрузка логотипа упала, учётная запись уже создана
и остаётся без профиля и документа (``UploadError`` уходит клиенту).
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from credenciamento.adapters import storage_client
from credenciamento.db.repositories import document_repo
from credenciamento.exceptions import NotFoundError
from credenciamento.models.credenciado import CREDENCIADO_ADAPTER, CredenciadoBase, CredenciadoForm
from credenciamento.models.enums import UserRole
from credenciamento.models.user import CurrentUser
from credenciamento.services import identity_service
from credenciamento.services.documents import only_digits
from credenciamento.services.record_schema import to_credenciado, validate_credenciado_form
from credenciamento.services.reporting import scope_credenciados

logger = logging.getLogger(__name__)

COLLECTION = "credenciados"
LOGO_FOLDER = "credenciados"


def _owned_fields(form: CredenciadoForm, actor: CurrentUser) -> CredenciadoForm:
    if actor.role is UserRole.ACCREDITING:
        return form.model_copy(update={
            "accrediting_id": actor.uid,
            "accrediting_name": actor.display_name,
        })
    return form


async def _upload_logo(form: CredenciadoForm) -> str | None:
    if form.imagem is None:
        return None
    return await storage_client.upload_binary(
        form.imagem.data,
        LOGO_FOLDER,
        only_digits(form.document_number()),
        form.imagem.content_type,
    )


async def load_credenciados() -> list[CredenciadoBase]:
    """Все credenciados (каждый — свой вариант объединения)."""
    docs = await document_repo.fetch_all(COLLECTION)
    return [CREDENCIADO_ADAPTER.validate_python(d) for d in docs]


async def list_credenciados(actor: CurrentUser) -> list[CredenciadoBase]:
    providers = await load_credenciados()
    return scope_credenciados(providers, actor.role, actor.uid)


async def get_credenciado(credenciado_id: str, actor: CurrentUser) -> CredenciadoBase:
    doc = await document_repo.fetch_by_id(COLLECTION, credenciado_id)
    if not doc:
        raise NotFoundError("Credenciado", credenciado_id)
    provider = CREDENCIADO_ADAPTER.validate_python(doc)
    if not scope_credenciados([provider], actor.role, actor.uid):
        raise NotFoundError("Credenciado", credenciado_id)
    return provider


async def create_credenciado(data: dict[str, Any], actor: CurrentUser) -> CredenciadoBase:
    """Регистрирует credenciado (см. порядок шагов в docstring модуля)."""
    form = _owned_fields(validate_credenciado_form(data), actor)

    uid = await identity_service.create_identity(
        form.email_acesso, UserRole.ACCREDITED, form.nome_fantasia,
    )
    imagem_url = await _upload_logo(form)
    provider = to_credenciado(
        form,
        imagemUrl=imagem_url,
        createdAt=datetime.now(timezone.utc).isoformat(),
    )
    await asyncio.gather(
        identity_service.save_user_profile(
            uid, UserRole.ACCREDITED, form.nome_fantasia, form.email_acesso, avatar=imagem_url,
        ),
        document_repo.create(COLLECTION, provider.to_document(), uid),
    )
    logger.info(
        "Credenciado %s (%s) created by %s", uid, form.tipo_pessoa.value, actor.uid,
    )

    try:
        from credenciamento.events import emit_credenciado_created
        await emit_credenciado_created(uid, form.tipo_pessoa.value, form.nome_fantasia)
    except Exception as exc:
        logger.warning("Failed to emit credenciado.created event: %s", exc)

    return provider.model_copy(update={"id": uid})


async def update_credenciado(
    credenciado_id: str, data: dict[str, Any], actor: CurrentUser,
) -> CredenciadoBase:
    """
    Полностью перезаписывает документ credenciado.

    Тип лица может смениться (PF → PJ и т.п.): документ пишется заново
    как новый вариант. Без нового логотипа сохраняется прежний URL.
    """
    current = await get_credenciado(credenciado_id, actor)
    form = _owned_fields(validate_credenciado_form(data), actor)
    imagem_url = await _upload_logo(form) or current.imagem_url
    extra: dict[str, Any] = {"imagemUrl": imagem_url}
    if current.created_at:
        extra["createdAt"] = current.created_at.isoformat()
    provider = to_credenciado(form, **extra)
    await document_repo.update(COLLECTION, credenciado_id, provider.to_document())
    logger.info("Credenciado %s updated by %s", credenciado_id, actor.uid)
    return provider.model_copy(update={"id": credenciado_id})


async def delete_credenciado(credenciado_id: str, actor: CurrentUser) -> None:
    await get_credenciado(credenciado_id, actor)
    deleted = await document_repo.delete(COLLECTION, credenciado_id)
    if not deleted:
        raise NotFoundError("Credenciado", credenciado_id)
    logger.info("Credenciado %s deleted by %s", credenciado_id, actor.uid)
