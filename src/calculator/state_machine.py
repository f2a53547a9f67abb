"""Calculator State Machine — свёртка событий ввода в состояние калькулятора.

- Накопление операнда цифра за цифрой (не более 15 цифр)
- Цепочки операций: повторный оператор сначала вычисляет ожидающую операцию
- Процент относительно первого операнда для + и −
- Состояние ошибки после деления на ноль, выход только через очистку
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.calculator.events import (
    CalculatorEvent,
    ClearEvent,
    DecimalEvent,
    DeleteEvent,
    DigitEvent,
    EqualsEvent,
    NegateEvent,
    OperatorEvent,
    PercentEvent,
)
from src.core.domain.calculator_state import CalculatorState, UiState
from src.core.domain.operation import Operation
from src.core.math.decimal_arithmetic import (
    ZERO,
    DivisionByZeroError,
    calculate,
    calculate_percentage,
    format_result,
    parse_input,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculatorConfig:
    """Конфигурация state machine.

    - max_input_digits: лимит цифр в операнде (без знака и точки)
    - error_display: текст дисплея в состоянии ошибки
    """
    max_input_digits: int = 15
    error_display: str = "Error"


@dataclass(frozen=True)
class CalculatorTransitionResult:
    """Результат перехода state machine."""

    new_state: CalculatorState
    ui_state: UiState

    # Диагностика
    transition_occurred: bool
    transition_reason: str
    previous_state: CalculatorState


class CalculatorStateMachine:
    """Input State Machine калькулятора.

    Чистый reducer: reduce(state, event) не изменяет state и возвращает
    новый снапшот. Состояния неявные (поля CalculatorState):
    - ввод первого операнда: operation is None
    - ожидание второго операнда: operation задана, is_new_input
    - ввод второго операнда: operation задана, not is_new_input
    - ошибка: is_error (после деления на ноль)
    """

    def __init__(self, config: Optional[CalculatorConfig] = None):
        """
        Args:
            config: конфигурация (лимит цифр, текст ошибки)
        """
        self.config = config or CalculatorConfig()

    def initial_state(self) -> CalculatorState:
        return CalculatorState()

    def reduce(
        self, state: CalculatorState, event: CalculatorEvent
    ) -> CalculatorTransitionResult:
        """Обработка одного события.

        Args:
            state: текущее состояние
            event: событие ввода

        Returns:
            CalculatorTransitionResult с новым состоянием и UiState

        Raises:
            TypeError: если event не является событием калькулятора
        """
        # 1. Очистка всегда сбрасывает состояние
        if isinstance(event, ClearEvent):
            return self._create_result(state, CalculatorState(), "clear")

        # 2. Состояние ошибки: ввод заблокирован до очистки
        if state.is_error:
            if isinstance(event, DeleteEvent):
                return self._create_result(state, CalculatorState(), "error_cleared_by_delete")
            if isinstance(event, (OperatorEvent, EqualsEvent)):
                return self._create_result(state, state, "blocked_by_error")
            # Цифра, точка, смена знака и процент сначала сбрасывают ошибку
            cleared = self.reduce(CalculatorState(), event)
            return self._create_result(
                state, cleared.new_state, f"error_cleared_{cleared.transition_reason}"
            )

        # 3. Обработка события
        if isinstance(event, DigitEvent):
            return self._on_digit(state, event.digit)
        elif isinstance(event, OperatorEvent):
            return self._on_operator(state, event.operation)
        elif isinstance(event, EqualsEvent):
            return self._on_equals(state)
        elif isinstance(event, DeleteEvent):
            return self._on_delete(state)
        elif isinstance(event, DecimalEvent):
            return self._on_decimal(state)
        elif isinstance(event, PercentEvent):
            return self._on_percent(state)
        elif isinstance(event, NegateEvent):
            return self._on_negate(state)

        raise TypeError(f"Unsupported calculator event: {event!r}")

    def project(self, state: CalculatorState) -> UiState:
        """Проекция состояния на дисплей.

        - ошибка: "Error"
        - операция ждёт второго операнда: "5 +"
        - ввод второго операнда: "5 + 3"
        - нет операции: текущий ввод или результат
        """
        if state.is_error:
            return UiState(display_value=self.config.error_display, is_error=True)

        if state.has_pending_operation:
            first = format_result(state.first_operand)
            symbol = state.operation.symbol

            if state.is_new_input:
                display_value = f"{first} {symbol}"
            else:
                display_value = f"{first} {symbol} {state.display_text}"
        else:
            display_value = state.display_text

        return UiState(display_value=display_value, is_error=False)

    def _on_digit(self, state: CalculatorState, digit: str) -> CalculatorTransitionResult:
        current = state.display_text

        if state.is_new_input or state.is_engineering_display:
            # Результат в инженерной нотации не дописывается, ввод начинается заново
            new_display = digit
        elif current == "0":
            # "0" + "0" остаётся "0", "0" + "7" → "7"
            new_display = digit
        elif self._count_digits(current) >= self.config.max_input_digits:
            return self._create_result(state, state, "digit_limit_reached")
        else:
            new_display = current + digit

        new_state = state.evolve(
            display_text=new_display,
            is_new_input=False,
            has_decimal_point="." in new_display,
        )
        return self._create_result(state, new_state, "digit")

    def _on_operator(
        self, state: CalculatorState, operation: Operation
    ) -> CalculatorTransitionResult:
        previous_state = state
        reason = "operator_latched"

        # Уже есть операция и введён второй операнд: сначала вычисляем
        if state.has_pending_operation and not state.is_new_input:
            state = self._resolve(state)
            if state.is_error:
                return self._create_result(previous_state, state, "division_by_zero")
            reason = "operator_chained"

        new_state = state.evolve(
            first_operand=parse_input(state.display_text),
            operation=operation,
            is_new_input=True,
        )
        return self._create_result(previous_state, new_state, reason)

    def _on_equals(self, state: CalculatorState) -> CalculatorTransitionResult:
        if not state.has_pending_operation:
            return self._create_result(state, state, "no_pending_operation")

        new_state = self._resolve(state)
        reason = "division_by_zero" if new_state.is_error else "equals"
        return self._create_result(state, new_state, reason)

    def _on_delete(self, state: CalculatorState) -> CalculatorTransitionResult:
        current = state.display_text

        if state.is_engineering_display:
            # Мантисса без экспоненты означала бы другое число
            new_display = "0"
        elif len(current) == 1 or (len(current) == 2 and current.startswith("-")):
            new_display = "0"
        else:
            new_display = current[:-1]

        new_state = state.evolve(
            display_text=new_display,
            has_decimal_point="." in new_display,
        )
        return self._create_result(state, new_state, "delete")

    def _on_decimal(self, state: CalculatorState) -> CalculatorTransitionResult:
        if state.is_engineering_display:
            # Точка в мантиссе результата не продолжает ввод
            new_display = "0."
        elif "." in state.display_text:
            return self._create_result(state, state, "decimal_point_present")
        else:
            new_display = "0." if state.is_new_input else state.display_text + "."

        new_state = state.evolve(
            display_text=new_display,
            is_new_input=False,
            has_decimal_point=True,
        )
        return self._create_result(state, new_state, "decimal_point")

    def _on_percent(self, state: CalculatorState) -> CalculatorTransitionResult:
        percent = parse_input(state.display_text)

        if state.has_pending_operation:
            # Процент от первого операнда с семантикой ожидающей операции
            result = calculate_percentage(state.first_operand, percent, state.operation)
        else:
            result = calculate_percentage(ZERO, percent, None)

        new_display = format_result(result)
        new_state = state.evolve(
            display_text=new_display,
            is_new_input=False,
            has_decimal_point="." in new_display,
        )
        return self._create_result(state, new_state, "percent")

    def _on_negate(self, state: CalculatorState) -> CalculatorTransitionResult:
        current = state.display_text

        if current == "0":
            new_display = current
        elif current.startswith("-"):
            new_display = current[1:]
        else:
            new_display = "-" + current

        new_state = state.evolve(display_text=new_display, is_new_input=False)
        return self._create_result(state, new_state, "negate")

    def _resolve(self, state: CalculatorState) -> CalculatorState:
        """Вычисление ожидающей операции (как по "=").

        Returns:
            Новое состояние с результатом, либо состояние ошибки при делении на ноль
        """
        second = parse_input(state.display_text)

        try:
            result = calculate(state.first_operand, second, state.operation)
        except DivisionByZeroError as e:
            logger.warning("Calculation failed, entering error state: %s", e)
            return state.evolve(second_operand=second, is_error=True)

        display_text = format_result(result)
        return CalculatorState(
            first_operand=result,
            second_operand=second,
            display_text=display_text,
            is_new_input=True,
            has_decimal_point="." in display_text,
        )

    @staticmethod
    def _count_digits(display_text: str) -> int:
        return sum(1 for ch in display_text if ch in "0123456789")

    def _create_result(
        self,
        previous_state: CalculatorState,
        new_state: CalculatorState,
        transition_reason: str,
    ) -> CalculatorTransitionResult:
        """Создание результата перехода."""
        transition_occurred = new_state != previous_state
        logger.debug(
            "Calculator transition: reason=%s, display=%r, occurred=%s",
            transition_reason,
            new_state.display_text,
            transition_occurred,
        )
        return CalculatorTransitionResult(
            new_state=new_state,
            ui_state=self.project(new_state),
            transition_occurred=transition_occurred,
            transition_reason=transition_reason,
            previous_state=previous_state,
        )
