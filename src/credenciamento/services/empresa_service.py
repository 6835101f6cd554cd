"""
credenciamento/services/empresa_service.py — Сервис управления компаниями.

Создание компании = учётная запись входа (роль ``business``) + профиль
в ``users`` + документ компании под uid этой учётной записи. Профиль и
документ пишутся параллельно, без транзакции между ними.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from credenciamento.db.repositories import document_repo
from credenciamento.exceptions import NotFoundError
from credenciamento.models.empresa import Empresa, EmpresaCreate
from credenciamento.models.enums import UserRole
from credenciamento.models.user import CurrentUser
from credenciamento.services import identity_service
from credenciamento.services.record_schema import validate_empresa
from credenciamento.services.reporting import scope_companies

logger = logging.getLogger(__name__)

COLLECTION = "empresas"


def _owned_fields(data: EmpresaCreate, actor: CurrentUser) -> EmpresaCreate:
    """Credenciadora всегда становится владельцем создаваемой/изменяемой компании."""
    if actor.role is UserRole.ACCREDITING:
        return data.model_copy(update={
            "accrediting_id": actor.uid,
            "accrediting_name": actor.display_name,
        })
    return data


async def list_empresas(actor: CurrentUser) -> list[Empresa]:
    """Компании, видимые пользователю."""
    docs = await document_repo.fetch_all(COLLECTION)
    companies = [Empresa.model_validate(d) for d in docs]
    return scope_companies(companies, actor.role, actor.uid)


async def get_empresa(empresa_id: str, actor: CurrentUser | None = None) -> Empresa:
    """Компания по id (если видима пользователю)."""
    doc = await document_repo.fetch_by_id(COLLECTION, empresa_id)
    if not doc:
        raise NotFoundError("Empresa", empresa_id)
    company = Empresa.model_validate(doc)
    if actor is not None and not scope_companies([company], actor.role, actor.uid):
        raise NotFoundError("Empresa", empresa_id)
    return company


async def create_empresa(data: dict[str, Any], actor: CurrentUser) -> Empresa:
    """Создаёт компанию и её учётную запись входа."""
    record = _owned_fields(validate_empresa(data), actor)

    uid = await identity_service.create_identity(
        record.email_acesso, UserRole.BUSINESS, record.nome_fantasia,
    )
    document = {**record.to_document(), "createdAt": datetime.now(timezone.utc).isoformat()}
    await asyncio.gather(
        identity_service.save_user_profile(
            uid, UserRole.BUSINESS, record.nome_fantasia, record.email_acesso,
        ),
        document_repo.create(COLLECTION, document, uid),
    )
    logger.info("Empresa %s created by %s (%s)", uid, actor.uid, actor.role.value)

    try:
        from credenciamento.events import emit_empresa_created
        await emit_empresa_created(uid, record.cnpj_caepf, record.nome_fantasia)
    except Exception as exc:
        logger.warning("Failed to emit empresa.created event: %s", exc)

    return Empresa.model_validate({**document, "id": uid})


async def update_empresa(empresa_id: str, data: dict[str, Any], actor: CurrentUser) -> Empresa:
    """Полностью перезаписывает документ компании."""
    current = await get_empresa(empresa_id, actor)
    record = _owned_fields(validate_empresa(data), actor)
    document = record.to_document()
    if current.created_at:
        document["createdAt"] = current.created_at.isoformat()
    await document_repo.update(COLLECTION, empresa_id, document)
    logger.info("Empresa %s updated by %s", empresa_id, actor.uid)
    return Empresa.model_validate({**document, "id": empresa_id})


async def delete_empresa(empresa_id: str, actor: CurrentUser) -> None:
    """Физически удаляет компанию."""
    await get_empresa(empresa_id, actor)
    deleted = await document_repo.delete(COLLECTION, empresa_id)
    if not deleted:
        raise NotFoundError("Empresa", empresa_id)
    logger.info("Empresa %s deleted by %s", empresa_id, actor.uid)
