"""
credenciamento/models/enums.py — Перечисления домена.

Содержит enum'ы:
    • UserRole — роль пользователя в back-office
    • PersonType — тип лица credenciado (PJ / PF)
    • DocumentType — документ физического лица (CPF / CEI / CAEPF)
    • RequestStatus — статус solicitação
"""

from enum import Enum


class UserRole(str, Enum):
    """Роль пользователя."""
    ADMIN = "admin"
    ACCREDITING = "accrediting"
    BUSINESS = "business"
    ACCREDITED = "accredited"
    EMPLOYEE = "employee"


class PersonType(str, Enum):
    """Тип лица credenciado."""
    PJ = "PJ"
    PF = "PF"


class DocumentType(str, Enum):
    """Документ credenciado-физлица."""
    CPF = "CPF"
    CEI = "CEI"
    CAEPF = "CAEPF"


class RequestStatus(str, Enum):
    """
    Статус solicitação.

    Каноническое «подтверждено» — ``confirmado``. Устаревшее написание
    ``confirmada`` приводится к нему в ``Solicitacao`` при чтении.
    """
    PENDING = "pendente"
    CONFIRMED = "confirmado"


LEGACY_CONFIRMED = "confirmada"
