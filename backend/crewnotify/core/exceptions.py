"""
Пользовательская иерархия исключений приложения.
"""


class AppException(Exception):
    def __init__(self, status_code: int, detail: str, error_code: str | None = None):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code


class NotFoundException(AppException):
    def __init__(self, resource: str, identifier):
        super().__init__(404, f"{resource} with id {identifier} not found", "NOT_FOUND")


class ValidationException(AppException):
    def __init__(self, detail: str):
        super().__init__(400, detail, "VALIDATION_ERROR")


class UnauthenticatedError(AppException):
    """Нет идентичности вызывающего: вызов не повторяется."""

    def __init__(self, detail: str = "User not authenticated"):
        super().__init__(401, detail, "UNAUTHENTICATED")


class UnknownCategoryError(AppException):
    """Нет шаблона для категории: ошибка программиста."""

    def __init__(self, category: str):
        super().__init__(500, f"No template registered for category {category!r}", "UNKNOWN_CATEGORY")
        self.category = category


class StoreFailureError(AppException):
    """Хранилище недоступно или отклонило операцию."""

    def __init__(self, operation: str, cause: Exception | None = None):
        detail = f"Store rejected operation: {operation}"
        if cause is not None:
            detail = f"{detail} ({cause.__class__.__name__})"
        super().__init__(503, detail, "STORE_FAILURE")
        self.operation = operation


class UserDirectoryError(AppException):
    """Справочник активных пользователей недоступен."""

    def __init__(self, detail: str):
        super().__init__(502, detail, "USER_DIRECTORY_UNAVAILABLE")
