"""
credenciamento/services/funcionario_service.py — Сервис управления сотрудниками.

Сотрудник = учётная запись входа (роль ``employee``) + профиль в ``users``
+ документ в ``funcionarios`` под uid учётной записи.
Удаление мягкое: ``isDeleted=true`` + ``deletedAt``; такие записи
не попадают в список и в счётчики панели.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from credenciamento.db.repositories import document_repo
from credenciamento.exceptions import NotFoundError
from credenciamento.models.empresa import Empresa
from credenciamento.models.enums import UserRole
from credenciamento.models.funcionario import Funcionario, FuncionarioCreate, FuncionarioView
from credenciamento.models.user import CurrentUser
from credenciamento.services import empresa_service, identity_service
from credenciamento.services.record_schema import validate_funcionario
from credenciamento.services.reporting import join_company_name, scope_by_role

logger = logging.getLogger(__name__)

COLLECTION = "funcionarios"


async def load_companies() -> list[Empresa]:
    docs = await document_repo.fetch_all(empresa_service.COLLECTION)
    return [Empresa.model_validate(d) for d in docs]


def _owned_fields(data: FuncionarioCreate, actor: CurrentUser) -> FuncionarioCreate:
    """Компания может заводить сотрудников только себе."""
    if actor.role is UserRole.BUSINESS:
        return data.model_copy(update={"empresa_id": actor.uid})
    return data


async def active_funcionarios() -> list[Funcionario]:
    """Все сотрудники, не помеченные удалёнными."""
    docs = await document_repo.fetch_all(COLLECTION)
    employees = [Funcionario.model_validate(d) for d in docs]
    return [e for e in employees if not e.is_deleted]


async def list_funcionarios(actor: CurrentUser) -> list[FuncionarioView]:
    """Сотрудники, видимые пользователю, с названием компании."""
    employees, companies = await asyncio.gather(active_funcionarios(), load_companies())
    visible = scope_by_role(employees, companies, actor.role, actor.uid)
    return [join_company_name(e, companies) for e in visible]


async def get_funcionario(funcionario_id: str, actor: CurrentUser) -> FuncionarioView:
    doc = await document_repo.fetch_by_id(COLLECTION, funcionario_id)
    if not doc:
        raise NotFoundError("Funcionario", funcionario_id)
    employee = Funcionario.model_validate(doc)
    companies = await load_companies()
    if not scope_by_role([employee], companies, actor.role, actor.uid):
        raise NotFoundError("Funcionario", funcionario_id)
    return join_company_name(employee, companies)


async def store_funcionario(record: FuncionarioCreate) -> Funcionario:
    """
    Provisioning одного сотрудника: учётная запись → профиль + документ.

    Используется и формой, и CSV-импортом. Отката нет: если запись
    документа упала, учётная запись остаётся.
    """
    uid = await identity_service.create_identity(
        record.email, UserRole.EMPLOYEE, record.nome,
    )
    document = {
        **record.to_document(),
        "isDeleted": False,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    await asyncio.gather(
        identity_service.save_user_profile(uid, UserRole.EMPLOYEE, record.nome, record.email),
        document_repo.create(COLLECTION, document, uid),
    )

    try:
        from credenciamento.events import emit_funcionario_created
        await emit_funcionario_created(uid, record.empresa_id)
    except Exception as exc:
        logger.warning("Failed to emit funcionario.created event: %s", exc)

    return Funcionario.model_validate({**document, "id": uid})


async def create_funcionario(data: dict[str, Any], actor: CurrentUser) -> Funcionario:
    """Создаёт сотрудника из формы."""
    record = _owned_fields(validate_funcionario(data), actor)
    employee = await store_funcionario(record)
    logger.info("Funcionario %s created by %s (%s)", employee.id, actor.uid, actor.role.value)
    return employee


def _stored_document(
    record: FuncionarioCreate, current: Funcionario, **flags: Any,
) -> dict[str, Any]:
    """Документ для перезаписи: поля формы + служебные поля текущей записи."""
    document = {
        **record.to_document(),
        "isDeleted": current.is_deleted,
        "deletedAt": current.deleted_at.isoformat() if current.deleted_at else None,
        "createdAt": current.created_at.isoformat() if current.created_at else None,
    }
    document.update(flags)
    return document


async def _get_active(funcionario_id: str, actor: CurrentUser) -> Funcionario:
    """Сотрудник для изменения: удалённая запись доступна только на чтение."""
    current = await get_funcionario(funcionario_id, actor)
    if current.is_deleted:
        raise NotFoundError("Funcionario", funcionario_id)
    return current


async def update_funcionario(
    funcionario_id: str, data: dict[str, Any], actor: CurrentUser,
) -> Funcionario:
    """Полностью перезаписывает документ сотрудника."""
    current = await _get_active(funcionario_id, actor)
    record = _owned_fields(validate_funcionario(data), actor)
    document = _stored_document(record, current)
    await document_repo.update(COLLECTION, funcionario_id, document)
    logger.info("Funcionario %s updated by %s", funcionario_id, actor.uid)
    return Funcionario.model_validate({**document, "id": funcionario_id})


async def delete_funcionario(funcionario_id: str, actor: CurrentUser) -> Funcionario:
    """Мягкое удаление: isDeleted=true, deletedAt=сейчас (ISO)."""
    current = await _get_active(funcionario_id, actor)
    deleted_at = datetime.now(timezone.utc).isoformat()
    record = FuncionarioCreate.model_validate(current.model_dump())
    document = _stored_document(record, current, isDeleted=True, deletedAt=deleted_at)
    await document_repo.update(COLLECTION, funcionario_id, document)
    logger.info("Funcionario %s soft-deleted by %s", funcionario_id, actor.uid)

    try:
        from credenciamento.events import emit_funcionario_deleted
        await emit_funcionario_deleted(funcionario_id, deleted_at)
    except Exception as exc:
        logger.warning("Failed to emit funcionario.deleted event: %s", exc)

    return Funcionario.model_validate({**document, "id": funcionario_id})
