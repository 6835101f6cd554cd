"""
credenciamento/models/common.py — Базовые типы домена.

Поля моделей — snake_case, ключи документов в хранилище — camelCase
(``razaoSocial``, ``empresaId``); соответствие задаёт ``alias_generator``,
нестандартные ключи (``accrediting_Id``, ``emailAcess``) — явным alias.
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

Email = Annotated[str, Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]
Cep = Annotated[str, Field(pattern=r"^\d{5}-\d{3}$")]


def blank_to_none(value: Any) -> Any:
    """Пустая строка в необязательном поле означает «не заполнено»."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DocumentBase(BaseModel):
    """Базовая Pydantic-модель для документов хранилища."""

    model_config = {
        "str_strip_whitespace": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }

    def to_document(self) -> dict:
        """Сериализует модель в документ хранилища (ключи-алиасы, JSON-типы)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})
