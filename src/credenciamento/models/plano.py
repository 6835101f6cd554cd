"""
credenciamento/models/plano.py — План и заявка на услугу (solicitação).
"""

from decimal import Decimal

from pydantic import Field, field_validator

from credenciamento.models.common import DocumentBase
from credenciamento.models.enums import LEGACY_CONFIRMED, RequestStatus


class Plano(DocumentBase):
    """План; принадлежит credenciadora (``accrediting_Id``)."""
    id: str
    nome: str | None = None
    accrediting_id: str | None = Field(default=None, alias="accrediting_Id")


class Solicitacao(DocumentBase):
    """Заявка на услугу credenciado."""
    id: str
    dono_id: str
    credenciado_id: str | None = Field(default=None, alias="credenciado_id")
    solicitante_id: str | None = None
    preco: Decimal = Decimal("0")
    status: RequestStatus = RequestStatus.PENDING

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, v):
        if v == LEGACY_CONFIRMED:
            return RequestStatus.CONFIRMED
        return v

    @property
    def is_confirmed(self) -> bool:
        return self.status is RequestStatus.CONFIRMED
