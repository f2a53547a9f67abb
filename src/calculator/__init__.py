"""Calculator — Input State Machine и сессия калькулятора.

- Свёртка событий ввода (цифры, операции, =, AC, ⌫, ., %, ±) в состояние
- Проекция состояния на дисплей (UiState)
- Сессия с синхронным уведомлением подписчиков
"""

from .events import (
    CalculatorEvent,
    ClearEvent,
    DecimalEvent,
    DeleteEvent,
    DigitEvent,
    EqualsEvent,
    NegateEvent,
    OperatorEvent,
    PercentEvent,
    event_for_key,
)
from .session import CalculatorSession
from .state_machine import (
    CalculatorConfig,
    CalculatorStateMachine,
    CalculatorTransitionResult,
)

__all__ = [
    # Events
    "CalculatorEvent",
    "ClearEvent",
    "DecimalEvent",
    "DeleteEvent",
    "DigitEvent",
    "EqualsEvent",
    "NegateEvent",
    "OperatorEvent",
    "PercentEvent",
    "event_for_key",
    # State machine
    "CalculatorConfig",
    "CalculatorStateMachine",
    "CalculatorTransitionResult",
    # Session
    "CalculatorSession",
]
