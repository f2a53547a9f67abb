"""
CalculatorState — Модель состояния калькулятора

Immutable Pydantic модели:
- CalculatorState: операнды, ожидающая операция, буфер дисплея, флаги ввода
- UiState: производное состояние для слоя отображения (только чтение)

Каждый переход state machine создаёт новый экземпляр через evolve():
в отличие от model_copy, он проходит валидацию полей (pattern дисплея).
Полная совместимость с JSON Schema (contracts/schema/calculator_state.json,
contracts/schema/ui_state.json).
"""

from decimal import Decimal
from typing import Final, Optional

from pydantic import BaseModel, Field

from .operation import Operation


# Текст дисплея: числовой литерал или одиночный "-"
DISPLAY_TEXT_PATTERN: Final[str] = r"^(-|[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?)$"


# =============================================================================
# CALCULATOR STATE
# =============================================================================


class CalculatorState(BaseModel):
    """
    Состояние ввода калькулятора.

    Immutable модель (frozen=True). Начальное состояние — CalculatorState():
    дисплей "0", операции нет, следующая цифра начинает новый ввод.

    Инвариант: display_text всегда разбирается в операнд или равен "-".
    """

    # Операнды
    first_operand: Decimal = Field(
        default=Decimal(0), description="Первый операнд (левая часть операции)"
    )
    second_operand: Decimal = Field(
        default=Decimal(0), description="Второй операнд последнего вычисления"
    )
    operation: Optional[Operation] = Field(
        default=None, description="Ожидающая операция (None если не выбрана)"
    )

    # Буфер дисплея
    display_text: str = Field(
        default="0",
        pattern=DISPLAY_TEXT_PATTERN,
        description="Накапливаемый ввод (текущее число)",
    )

    # Флаги режима ввода
    is_new_input: bool = Field(
        default=True,
        description="Следующая цифра заменяет display_text вместо добавления",
    )
    has_decimal_point: bool = Field(
        default=False, description="В текущем числе уже есть десятичная точка"
    )
    is_error: bool = Field(
        default=False,
        description="Состояние ошибки (деление на ноль), ввод заблокирован до очистки",
    )

    model_config = {"frozen": True}

    @property
    def has_pending_operation(self) -> bool:
        """Выбрана ли операция, ожидающая второго операнда."""
        return self.operation is not None

    @property
    def is_engineering_display(self) -> bool:
        """Показан ли результат в инженерной нотации (например "1.23E+15")."""
        return "e" in self.display_text.lower()

    def evolve(self, **changes) -> "CalculatorState":
        """Новое состояние с изменёнными полями.

        Raises:
            ValidationError: если изменения нарушают ограничения модели
        """
        return CalculatorState.model_validate({**self.model_dump(), **changes})


# =============================================================================
# UI STATE
# =============================================================================


class UiState(BaseModel):
    """
    Состояние для слоя отображения.

    Производное от CalculatorState, потребители только читают его.
    """

    display_value: str = Field(default="0", description="Строка на дисплее")
    is_error: bool = Field(
        default=False, description="Флаг ошибки (например, деление на ноль)"
    )

    model_config = {"frozen": True}
