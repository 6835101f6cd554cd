"""
credenciamento/services/rbac.py — RBAC back-office.

Роли не образуют иерархию: у каждого действия — свой набор ролей.
Фильтрация данных по роли (какие записи видны) — в ``services.reporting``.
"""

from __future__ import annotations

import logging

from fastapi import Depends

from credenciamento.exceptions import AuthorizationError
from credenciamento.models.enums import UserRole

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Permissions
# ═══════════════════════════════════════════════════════════════════════════════

_MANAGERS = frozenset({UserRole.ADMIN, UserRole.ACCREDITING})
_STAFF = frozenset({UserRole.ADMIN, UserRole.ACCREDITING, UserRole.BUSINESS})

PERMISSIONS: dict[str, frozenset[UserRole]] = {
    "empresa.read": _STAFF,
    "empresa.write": _MANAGERS,
    "funcionario.read": _STAFF,
    "funcionario.write": _STAFF,
    "funcionario.import": _STAFF,
    "credenciado.read": _MANAGERS | {UserRole.ACCREDITED},
    "credenciado.write": _MANAGERS,
    "plano.read": _MANAGERS,
    "overview.read": _MANAGERS,
    "overview.export": _MANAGERS,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Вспомогательные функции
# ═══════════════════════════════════════════════════════════════════════════════

def has_permission(user, permission: str) -> bool:
    """Проверяет, имеет ли пользователь указанное разрешение."""
    allowed = PERMISSIONS.get(permission)
    if allowed is None:
        logger.warning("Unknown permission requested: %s", permission)
        return False
    return getattr(user, "role", None) in allowed


def require_permission(permission: str):
    """FastAPI dependency: требует конкретное разрешение, возвращает пользователя."""
    from credenciamento.dependencies import get_current_user

    async def _check(user=Depends(get_current_user)):
        if not has_permission(user, permission):
            logger.warning(
                "RBAC: user %s (%s) denied permission '%s'",
                getattr(user, "uid", "?"), getattr(user, "role", "?"), permission,
            )
            raise AuthorizationError(f"Permission '{permission}' required")
        return user
    return _check
