"""Проверки валидаторов настроек."""

from __future__ import annotations

import pytest

from dockfleet.settings.validators import (
    CommandValidator,
    CompositeValidator,
    EnumValidator,
    RangeValidator,
    TypeValidator,
)


def test_type_validator_accepts_any_listed_type() -> None:
    validator = TypeValidator(int, float)
    assert validator.check(3) is None
    assert validator.check(0.5) is None
    assert validator.check("3") == "expected int or float, got str"


def test_type_validator_rejects_bool_unless_listed() -> None:
    assert TypeValidator(int).check(True) == "expected int, got bool"
    assert TypeValidator(bool).check(False) is None


@pytest.mark.parametrize(
    ("value", "problem"),
    [(0, "must be at least 1"), (11, "must be at most 10"), ("5", "expected a number, got str")],
)
def test_range_validator_problems(value: object, problem: str) -> None:
    assert RangeValidator(1, 10).check(value) == problem


def test_range_validator_open_bounds() -> None:
    assert RangeValidator(minimum=0).check(10**9) is None
    assert RangeValidator(maximum=0).check(-5) is None


def test_enum_validator_lists_choices() -> None:
    validator = EnumValidator(["DEBUG", "INFO"])
    assert validator.check("INFO") is None
    assert validator.check("TRACE") == "must be one of DEBUG, INFO"


def test_command_validator() -> None:
    validator = CommandValidator()
    assert validator.check("docker compose") is None
    assert validator.check("  docker-compose --ansi never") is None
    assert validator.check("") == "must name a program"
    assert "cannot be parsed" in validator.check("docker 'compose")
    assert validator.check(["docker", "compose"]) == "expected str, got list"


def test_composite_validator_reports_first_problem() -> None:
    validator = CompositeValidator(TypeValidator(int), RangeValidator(0, 10))
    assert validator.check("x") == "expected int, got str"
    assert validator.check(20) == "must be at most 10"
    assert validator.check(7) is None
