"""
Исключения движка нормализации
"""
from typing import Any, Optional


class NormalizationError(Exception):
    """Базовое исключение движка нормализации"""


class InvalidSchema(NormalizationError):
    """Некорректный список атрибутов (пустые или повторяющиеся имена, неверный формат)"""


class InvalidDependency(NormalizationError):
    """ФЗ ссылается на атрибут вне отношения или имеет пустую часть"""

    def __init__(self, message: str, dependency: Optional[Any] = None):
        super().__init__(message)
        self.dependency = dependency


class TooManyAttributes(NormalizationError):
    """Перебор подмножеств запрошен для слишком большого числа атрибутов"""

    def __init__(self, count: int, limit: int):
        super().__init__(
            f"Слишком много атрибутов для перебора подмножеств: {count} (допустимо не более {limit})"
        )
        self.count = count
        self.limit = limit


class InternalInvariantViolation(NormalizationError):
    """Нарушен внутренний инвариант алгоритма (ошибка логики, а не входных данных)"""
