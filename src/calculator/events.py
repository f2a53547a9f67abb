"""Input events калькулятора.

Дискретные команды, которые слой отображения пересылает в state machine:
Digit(0-9), Operator, Equals, Clear, Delete, Decimal, Percent, Negate.
"""

from dataclasses import dataclass
from typing import Dict, Union

from src.core.domain.operation import Operation


@dataclass(frozen=True)
class DigitEvent:
    """Нажатие цифры 0-9."""

    digit: str

    def __post_init__(self):
        if len(self.digit) != 1 or self.digit not in "0123456789":
            raise ValueError(f"digit must be a single character 0-9, got {self.digit!r}")


@dataclass(frozen=True)
class OperatorEvent:
    """Нажатие операции (+, −, ×, ÷)."""

    operation: Operation


@dataclass(frozen=True)
class EqualsEvent:
    """Вычисление ожидающей операции (=)."""


@dataclass(frozen=True)
class ClearEvent:
    """Полный сброс калькулятора (AC)."""


@dataclass(frozen=True)
class DeleteEvent:
    """Удаление последнего символа ввода (⌫)."""


@dataclass(frozen=True)
class DecimalEvent:
    """Десятичная точка (.)."""


@dataclass(frozen=True)
class PercentEvent:
    """Процент от первого операнда (%)."""


@dataclass(frozen=True)
class NegateEvent:
    """Смена знака текущего числа (±)."""


CalculatorEvent = Union[
    DigitEvent,
    OperatorEvent,
    EqualsEvent,
    ClearEvent,
    DeleteEvent,
    DecimalEvent,
    PercentEvent,
    NegateEvent,
]


# Подписи клавиш (включая ASCII-варианты операций)
_KEY_EVENTS: Dict[str, CalculatorEvent] = {
    "=": EqualsEvent(),
    "AC": ClearEvent(),
    "C": ClearEvent(),
    "⌫": DeleteEvent(),
    ".": DecimalEvent(),
    "%": PercentEvent(),
    "±": NegateEvent(),
    "+": OperatorEvent(Operation.ADD),
    "−": OperatorEvent(Operation.SUBTRACT),
    "-": OperatorEvent(Operation.SUBTRACT),
    "×": OperatorEvent(Operation.MULTIPLY),
    "*": OperatorEvent(Operation.MULTIPLY),
    "÷": OperatorEvent(Operation.DIVIDE),
    "/": OperatorEvent(Operation.DIVIDE),
}


def event_for_key(label: str) -> CalculatorEvent:
    """Событие для подписи клавиши.

    Args:
        label: Подпись клавиши ("7", "÷", "AC", "±", "⌫", ...)

    Returns:
        Соответствующее событие

    Raises:
        ValueError: Если подпись неизвестна
    """
    if len(label) == 1 and label in "0123456789":
        return DigitEvent(label)

    try:
        return _KEY_EVENTS[label]
    except KeyError:
        raise ValueError(f"Unknown key label: {label!r}") from None
