"""
credenciamento/models/user.py — Пользователь back-office и его профиль.
"""

from pydantic import BaseModel

from credenciamento.models.common import DocumentBase
from credenciamento.models.enums import UserRole


class CurrentUser(BaseModel):
    """Действующий пользователь; передаётся во все сервисы явно."""
    uid: str
    role: UserRole
    display_name: str | None = None
    email: str | None = None


class UserProfile(DocumentBase):
    """Документ коллекции ``users`` (профиль для UI)."""
    uid: str
    role: UserRole
    name: str
    email: str
    avatar: str | None = None
