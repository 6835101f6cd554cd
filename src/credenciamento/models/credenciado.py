"""
credenciamento/models/credenciado.py — Модели аккредитованного поставщика (credenciado).

Форма (``CredenciadoForm``) — плоская, как её отправляет UI: все документы
необязательны, каждый проверяется своей схемой, если заполнен. Правила
«PJ ↔ CNPJ» и «PF ↔ ровно один документ нужного типа» проверяются
в ``services.record_schema``; валидная форма превращается в один из
вариантов размеченного объединения ``Credenciado``:

    CredenciadoPJ      tipoPessoa=PJ                     (razaoSocial + cnpj)
    CredenciadoCPF     tipoPessoa=PF, documentoTipo=CPF  (cpf)
    CredenciadoCEI     tipoPessoa=PF, documentoTipo=CEI  (cei)
    CredenciadoCAEPF   tipoPessoa=PF, documentoTipo=CAEPF (caepf)
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Base64Bytes, Field, TypeAdapter, field_validator
from pydantic_core import PydanticCustomError

from credenciamento.models.common import Cep, DocumentBase, Email, blank_to_none
from credenciamento.models.enums import DocumentType, PersonType
from credenciamento.services.documents import (
    is_valid_caepf,
    is_valid_cei,
    is_valid_cnpj,
    is_valid_cpf,
)
from credenciamento.services.masks import mask_cnpj, mask_cpf


class ContatoOpcional(DocumentBase):
    """Контакт RH credenciado: все поля необязательны."""
    nome: str | None = Field(default=None, min_length=2)
    email: Email | None = None
    telefone: str | None = Field(default=None, min_length=13)

    @field_validator("nome", "email", "telefone", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)


class Logo(DocumentBase):
    """Логотип, переданный в base64."""
    content_type: str = Field(..., pattern=r"^image/", examples=["image/png"])
    data: Base64Bytes


# ═══════════════════════════════════════════════════════════════════════════
# ФОРМА
# ═══════════════════════════════════════════════════════════════════════════


class CredenciadoForm(DocumentBase):
    """Плоская форма регистрации credenciado."""
    tipo_pessoa: PersonType
    razao_social: str | None = Field(default=None, min_length=2)
    nome_fantasia: str = Field(..., min_length=2)
    email_acesso: Email = Field(..., alias="emailAcess")
    cnpj: str | None = None
    cpf: str | None = None
    cei: str | None = None
    caepf: str | None = None
    documento_tipo: DocumentType | None = None
    endereco: str = Field(..., min_length=5)
    cep: Cep
    telefone: str = Field(..., min_length=13)
    contato_rh: ContatoOpcional | None = Field(default=None, alias="contatoRH")
    segmento: str = Field(..., min_length=3)
    imagem: Logo | None = None
    accrediting_id: str | None = Field(default=None, alias="accrediting_Id")
    accrediting_name: str | None = Field(default=None, alias="accrediting_name")
    planos: str = Field(..., min_length=1)

    @field_validator(
        "razao_social", "cnpj", "cpf", "cei", "caepf", "documento_tipo",
        "accrediting_id", "accrediting_name", mode="before",
    )
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)

    @field_validator("cnpj")
    @classmethod
    def _check_cnpj(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not is_valid_cnpj(v):
            raise PydanticCustomError("cnpj", "Invalid or fictitious CNPJ")
        return mask_cnpj(v)

    @field_validator("cpf")
    @classmethod
    def _check_cpf(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not is_valid_cpf(v):
            raise PydanticCustomError("cpf", "Invalid or fictitious CPF")
        return mask_cpf(v)

    @field_validator("cei")
    @classmethod
    def _check_cei(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_cei(v):
            raise PydanticCustomError("cei", "CEI must match XX.XXX.XXXXX/XX")
        return v

    @field_validator("caepf")
    @classmethod
    def _check_caepf(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_caepf(v):
            raise PydanticCustomError("caepf", "CAEPF must match XXX.XXX.XXX-XXX")
        return v

    def document_number(self) -> str | None:
        """Значение документа, соответствующего типу лица."""
        if self.tipo_pessoa is PersonType.PJ:
            return self.cnpj
        return {
            DocumentType.CPF: self.cpf,
            DocumentType.CEI: self.cei,
            DocumentType.CAEPF: self.caepf,
        }.get(self.documento_tipo)


# ═══════════════════════════════════════════════════════════════════════════
# РАЗМЕЧЕННОЕ ОБЪЕДИНЕНИЕ (то, что хранится)
# ═══════════════════════════════════════════════════════════════════════════


class CredenciadoBase(DocumentBase):
    """Общие поля всех вариантов credenciado."""
    id: str | None = None
    nome_fantasia: str
    email_acesso: str = Field(..., alias="emailAcess")
    endereco: str
    cep: str
    telefone: str
    contato_rh: ContatoOpcional | None = Field(default=None, alias="contatoRH")
    segmento: str
    imagem_url: str | None = None
    accrediting_id: str | None = Field(default=None, alias="accrediting_Id")
    accrediting_name: str | None = Field(default=None, alias="accrediting_name")
    planos: str
    created_at: datetime | None = None


class CredenciadoPJ(CredenciadoBase):
    tipo_pessoa: Literal["PJ"] = "PJ"
    documento_tipo: None = None
    razao_social: str
    cnpj: str


class CredenciadoCPF(CredenciadoBase):
    tipo_pessoa: Literal["PF"] = "PF"
    documento_tipo: Literal["CPF"] = "CPF"
    razao_social: str | None = None
    cpf: str


class CredenciadoCEI(CredenciadoBase):
    tipo_pessoa: Literal["PF"] = "PF"
    documento_tipo: Literal["CEI"] = "CEI"
    razao_social: str | None = None
    cei: str


class CredenciadoCAEPF(CredenciadoBase):
    tipo_pessoa: Literal["PF"] = "PF"
    documento_tipo: Literal["CAEPF"] = "CAEPF"
    razao_social: str | None = None
    caepf: str


CredenciadoPF = Annotated[
    Union[CredenciadoCPF, CredenciadoCEI, CredenciadoCAEPF],
    Field(discriminator="documento_tipo"),
]

Credenciado = Annotated[
    Union[CredenciadoPJ, CredenciadoPF],
    Field(discriminator="tipo_pessoa"),
]

CREDENCIADO_ADAPTER: TypeAdapter = TypeAdapter(Credenciado)

VARIANTS: dict[tuple[PersonType, DocumentType | None], type[CredenciadoBase]] = {
    (PersonType.PJ, None): CredenciadoPJ,
    (PersonType.PF, DocumentType.CPF): CredenciadoCPF,
    (PersonType.PF, DocumentType.CEI): CredenciadoCEI,
    (PersonType.PF, DocumentType.CAEPF): CredenciadoCAEPF,
}
