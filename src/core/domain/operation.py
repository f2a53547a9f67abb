"""
Operation — Арифметические операции калькулятора
"""

from enum import Enum


class Operation(str, Enum):
    """
    Бинарная операция калькулятора.

    Значение enum совпадает с символом на клавиатуре и на дисплее
    (вычитание — типографский минус U+2212).
    """

    ADD = "+"
    SUBTRACT = "−"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @property
    def symbol(self) -> str:
        """Символ операции для дисплея."""
        return self.value
