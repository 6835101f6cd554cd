"""
═══════════════════════════════════════════════════════════════════════════════
Credenciamento — Иерархия доменных ошибок (Custom Exception Hierarchy)
═══════════════════════════════════════════════════════════════════════════════

Базовый класс ``CredenciamentoError`` и его наследники.
HTTP-маппинг кодов выполняется в ``credenciamento.main:domain_error_handler``.

Ни одна ошибка не ретраится автоматически: сервисы пробрасывают их наверх,
состояние остаётся таким, каким его оставили уже выполненные шаги.
"""


class CredenciamentoError(Exception):
    """
    Базовое исключение для всех доменных ошибок.

    Атрибуты
    ────────
        message (str):  Описание ошибки. Передаётся клиенту в JSON.
        code (str):     Строковый код. Используется для маппинга на HTTP-статус.
        details (dict): Дополнительные данные (entity, id, errors и т.д.).
    """

    def __init__(
        self,
        message: str,
        code: str = "CREDENCIAMENTO_ERROR",
        details: dict | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(CredenciamentoError):
    """Ошибка аутентификации: 401 Unauthorized."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_ERROR")


class AuthorizationError(CredenciamentoError):
    """Ошибка авторизации: 403 Forbidden."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, code="AUTHZ_ERROR")


class NotFoundError(CredenciamentoError):
    """Документ не найден: 404 Not Found."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity} not found: {entity_id}",
            code="NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class ConflictError(CredenciamentoError):
    """Конфликт с текущим состоянием (e.g. email уже зарегистрирован): 409."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="CONFLICT", details=details)


class ValidationError(CredenciamentoError):
    """
    Ошибка валидации записи: 422 Unprocessable Entity.

    ``errors`` — список ``{"path": ..., "message": ...}``; дублируется
    в ``details["errors"]`` для JSON-ответа.
    """

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(
            message, code="VALIDATION_ERROR", details={"errors": self.errors}
        )


class UploadError(CredenciamentoError):
    """Ошибка загрузки бинарного файла в хранилище: 502 Bad Gateway."""

    def __init__(self, message: str = "Binary upload failed", details: dict | None = None):
        super().__init__(message, code="UPLOAD_ERROR", details=details)


class StoreError(CredenciamentoError):
    """Ошибка записи/чтения в хранилище документов: 503 Service Unavailable."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="STORE_ERROR", details=details)


__all__ = [
    "CredenciamentoError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "UploadError",
    "StoreError",
]
