"""
credenciamento/services/record_schema.py — Валидация записей перед сохранением.

Каждая функция ``validate_*`` возвращает проверенную модель либо бросает
``ValidationError`` со списком ``FieldError(path, message)``. Путь — ключи
документа через точку (``contatoRH.email``, ``documentoTipo``).

Порядок как в форме UI: сначала правила отдельных полей (Pydantic),
затем — только если поля валидны — межполевые правила credenciado.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from credenciamento.exceptions import ValidationError
from credenciamento.models.credenciado import VARIANTS, CredenciadoBase, CredenciadoForm
from credenciamento.models.empresa import EmpresaCreate
from credenciamento.models.enums import DocumentType, PersonType
from credenciamento.models.funcionario import FuncionarioCreate

logger = logging.getLogger(__name__)

DOCUMENT_RULE_MESSAGE = (
    "Fill in the documents according to the person type "
    "(select the document type and provide the matching value)"
)
LEGAL_NAME_RULE_MESSAGE = "Legal name (razaoSocial) is required for PJ"


class FieldError(BaseModel):
    """Ошибка одного поля."""
    path: str
    message: str


def _field_errors(exc: PydanticValidationError) -> list[FieldError]:
    """Конвертирует ошибки Pydantic → список FieldError."""
    return [
        FieldError(
            path=".".join(str(part) for part in err["loc"]),
            message=err["msg"],
        )
        for err in exc.errors()
    ]


def _raise(entity: str, errors: list[FieldError]) -> None:
    logger.info("Validation failed for %s: %d error(s)", entity, len(errors))
    raise ValidationError(
        f"Invalid {entity} record",
        errors=[e.model_dump() for e in errors],
    )


def _parse(model: type[BaseModel], entity: str, data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        _raise(entity, _field_errors(exc))


# ═══════════════════════════════════════════════════════════════════════════
# МЕЖПОЛЕВЫЕ ПРАВИЛА CREDENCIADO
# ═══════════════════════════════════════════════════════════════════════════


def _individual_documents(form: CredenciadoForm) -> dict[DocumentType, str | None]:
    return {
        DocumentType.CPF: form.cpf,
        DocumentType.CEI: form.cei,
        DocumentType.CAEPF: form.caepf,
    }


def _document_rule(form: CredenciadoForm) -> FieldError | None:
    """PJ → только CNPJ; PF → ровно один документ, совпадающий с documentoTipo."""
    filled = [kind for kind, value in _individual_documents(form).items() if value]
    if form.tipo_pessoa is PersonType.PJ:
        ok = bool(form.cnpj) and not filled
    else:
        ok = (
            form.documento_tipo is not None
            and not form.cnpj
            and filled == [form.documento_tipo]
        )
    if ok:
        return None
    return FieldError(path="documentoTipo", message=DOCUMENT_RULE_MESSAGE)


def _legal_name_rule(form: CredenciadoForm) -> FieldError | None:
    if form.tipo_pessoa is PersonType.PJ and not form.razao_social:
        return FieldError(path="razaoSocial", message=LEGAL_NAME_RULE_MESSAGE)
    return None


CREDENCIADO_RULES: tuple[Callable[[CredenciadoForm], FieldError | None], ...] = (
    _document_rule,
    _legal_name_rule,
)


# ═══════════════════════════════════════════════════════════════════════════
# ПУБЛИЧНЫЕ ФУНКЦИИ
# ═══════════════════════════════════════════════════════════════════════════


def validate_empresa(data: dict[str, Any]) -> EmpresaCreate:
    """Проверяет запись компании."""
    return _parse(EmpresaCreate, "empresa", data)


def validate_funcionario(data: dict[str, Any]) -> FuncionarioCreate:
    """Проверяет запись сотрудника."""
    return _parse(FuncionarioCreate, "funcionario", data)


def validate_credenciado_form(data: dict[str, Any]) -> CredenciadoForm:
    """Проверяет форму credenciado: поля, затем межполевые правила."""
    form = _parse(CredenciadoForm, "credenciado", data)
    errors = []
    for rule in CREDENCIADO_RULES:
        err = rule(form)
        if err is not None:
            errors.append(err)
    if errors:
        _raise("credenciado", errors)
    return form


def to_credenciado(form: CredenciadoForm, **extra: Any) -> CredenciadoBase:
    """
    Превращает валидную форму в вариант размеченного объединения.

    ``extra`` — поля, которых нет в форме (imagemUrl, createdAt, id...).
    """
    key = (
        form.tipo_pessoa,
        None if form.tipo_pessoa is PersonType.PJ else form.documento_tipo,
    )
    variant = VARIANTS[key]
    payload = form.model_dump(mode="json", by_alias=True, exclude={"imagem"})
    if form.tipo_pessoa is PersonType.PJ:
        payload["documentoTipo"] = None
    payload.update(extra)
    return variant.model_validate(payload)


def validate_credenciado(data: dict[str, Any], **extra: Any) -> CredenciadoBase:
    """Проверяет форму и возвращает вариант ``Credenciado``."""
    return to_credenciado(validate_credenciado_form(data), **extra)


VALIDATORS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "empresas": validate_empresa,
    "funcionarios": validate_funcionario,
    "credenciados": validate_credenciado_form,
}


def validate_fields(entity: str, data: dict[str, Any]) -> list[FieldError]:
    """
    Проверка «на лету» (при каждом изменении поля): ничего не сохраняет,
    возвращает список ошибок (пустой — запись валидна).
    """
    try:
        VALIDATORS[entity](data)
    except ValidationError as exc:
        return [FieldError(**e) for e in exc.errors]
    return []


__all__ = [
    "FieldError",
    "validate_empresa",
    "validate_funcionario",
    "validate_credenciado_form",
    "validate_credenciado",
    "to_credenciado",
    "validate_fields",
]
