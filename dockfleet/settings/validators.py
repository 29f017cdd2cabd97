"""Проверки значений настроек.

Каждый валидатор отвечает на один вопрос: что не так со значением.
``check`` возвращает None, если значение подходит, иначе текст проблемы,
который попадёт в SettingsValidationError.
"""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Tuple


class Validator(ABC):
    @abstractmethod
    def check(self, value: Any) -> Optional[str]:
        """None для допустимого значения, иначе описание проблемы."""


class TypeValidator(Validator):
    """Значение одного из перечисленных типов.

    bool формально наследует int, поэтому для числовых настроек он
    отвергается, если bool не указан среди типов явно.
    """

    def __init__(self, *types: type) -> None:
        self.types: Tuple[type, ...] = types

    def check(self, value: Any) -> Optional[str]:
        names = " or ".join(kind.__name__ for kind in self.types)
        if isinstance(value, bool) and bool not in self.types:
            return f"expected {names}, got bool"
        if not isinstance(value, self.types):
            return f"expected {names}, got {type(value).__name__}"
        return None


class RangeValidator(Validator):
    def __init__(self, minimum: Optional[float] = None, maximum: Optional[float] = None) -> None:
        self.minimum = minimum
        self.maximum = maximum

    def check(self, value: Any) -> Optional[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"expected a number, got {type(value).__name__}"
        if self.minimum is not None and value < self.minimum:
            return f"must be at least {self.minimum}"
        if self.maximum is not None and value > self.maximum:
            return f"must be at most {self.maximum}"
        return None


class EnumValidator(Validator):
    def __init__(self, choices: Iterable[Any]) -> None:
        self.choices = tuple(choices)

    def check(self, value: Any) -> Optional[str]:
        if value in self.choices:
            return None
        return "must be one of " + ", ".join(str(choice) for choice in self.choices)


class CommandValidator(Validator):
    """Командная строка, которую можно разбить shlex и запустить."""

    def check(self, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return f"expected str, got {type(value).__name__}"
        try:
            parts = shlex.split(value)
        except ValueError as exc:
            return f"cannot be parsed as a command line ({exc})"
        if not parts:
            return "must name a program"
        return None


class CompositeValidator(Validator):
    """Применяет валидаторы по порядку и останавливается на первой проблеме."""

    def __init__(self, *validators: Validator) -> None:
        self.validators = validators

    def check(self, value: Any) -> Optional[str]:
        for validator in self.validators:
            problem = validator.check(value)
            if problem is not None:
                return problem
        return None
