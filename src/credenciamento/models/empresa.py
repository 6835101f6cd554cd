"""
credenciamento/models/empresa.py — Модели компании (empresa).

Идентификатор ``cnpjCaepf`` — CNPJ (с проверкой контрольных цифр)
либо CAEPF; хранится в маскированном виде.
"""

from datetime import datetime

from pydantic import Field, PositiveInt, field_validator
from pydantic_core import PydanticCustomError

from credenciamento.models.common import Cep, DocumentBase, Email
from credenciamento.services.documents import is_valid_caepf, is_valid_cnpj
from credenciamento.services.masks import mask_cnpj


class Contato(DocumentBase):
    """Контактное лицо (RH / financeiro)."""
    nome: str = Field(..., min_length=2)
    email: Email
    telefone: str = Field(..., min_length=10)


class EmpresaCreate(DocumentBase):
    """Схема для создания / полной перезаписи компании."""
    razao_social: str = Field(..., min_length=2, examples=["Alfa Serviços Ltda"])
    nome_fantasia: str = Field(..., min_length=2, examples=["Alfa"])
    email_acesso: Email = Field(..., alias="emailAcess")
    cnpj_caepf: str = Field(..., min_length=11, examples=["11.222.333/0001-81"])
    endereco: str = Field(..., min_length=5)
    cep: Cep
    numero_funcionarios: PositiveInt
    contato_rh: Contato = Field(..., alias="contatoRH")
    contato_financeiro: Contato
    accrediting_id: str | None = Field(default=None, alias="accrediting_Id")
    accrediting_name: str | None = Field(default=None, alias="accrediting_name")
    planos: str = Field(..., min_length=1)

    @field_validator("cnpj_caepf")
    @classmethod
    def _check_tax_id(cls, v: str) -> str:
        if is_valid_cnpj(v):
            return mask_cnpj(v)
        if is_valid_caepf(v):
            return v
        raise PydanticCustomError("cnpj_caepf", "Invalid CNPJ or CAEPF")


class Empresa(EmpresaCreate):
    """Компания, прочитанная из хранилища."""
    id: str
    created_at: datetime | None = None
