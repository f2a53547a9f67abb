"""
Domain models and value objects.

Contains the calculator's fundamental value objects: Operation,
CalculatorState and the derived UiState.
"""

from src.core.domain.calculator_state import (
    DISPLAY_TEXT_PATTERN,
    CalculatorState,
    UiState,
)
from src.core.domain.operation import Operation

__all__ = [
    # Operation
    "Operation",
    # State models
    "CalculatorState",
    "UiState",
    "DISPLAY_TEXT_PATTERN",
]
