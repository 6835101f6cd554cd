"""
credenciamento/models/funcionario.py — Модели сотрудника (funcionário).

Сотрудники не удаляются физически: удаление — это ``isDeleted=true``
и отметка времени ``deletedAt``.
"""

from datetime import datetime

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from credenciamento.models.common import DocumentBase, Email, blank_to_none
from credenciamento.services.documents import is_valid_cpf
from credenciamento.services.masks import mask_cpf


class FuncionarioCreate(DocumentBase):
    """Схема для создания / полной перезаписи сотрудника."""
    nome: str = Field(..., min_length=2)
    data_nascimento: str = Field(..., pattern=r"^\d{2}/\d{2}/\d{4}$", examples=["31/12/1990"])
    endereco: str = Field(..., min_length=5)
    cpf: str | None = None
    email: Email
    telefone: str = Field(..., pattern=r"^\(\d{2}\)\s\d{4,5}-\d{4}$", examples=["(11) 98765-4321"])
    pessoas_na_casa: str | None = None
    empresa_id: str | None = None

    @field_validator("cpf", "pessoas_na_casa", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)

    @field_validator("cpf")
    @classmethod
    def _check_cpf(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not is_valid_cpf(v):
            raise PydanticCustomError("cpf", "Invalid or fictitious CPF")
        return mask_cpf(v)

    @field_validator("pessoas_na_casa")
    @classmethod
    def _check_household(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            float(v)
        except ValueError:
            raise PydanticCustomError(
                "pessoas_na_casa", "Household size must be a number"
            ) from None
        return v


class Funcionario(FuncionarioCreate):
    """Сотрудник, прочитанный из хранилища."""
    id: str
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime | None = None


class FuncionarioView(Funcionario):
    """Сотрудник для списка: с названием компании."""
    company_name: str
