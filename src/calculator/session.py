"""Calculator Session — владелец текущего состояния калькулятора.

Единственный writer CalculatorState: события обрабатываются синхронно,
по одному, до конца. Подписчики получают UiState после каждого
завершённого перехода. С SnapshotValidator каждый переход перед
фиксацией проверяется по JSON Schema контрактам.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from src.calculator.events import CalculatorEvent, ClearEvent, event_for_key
from src.calculator.state_machine import CalculatorStateMachine
from src.core.contracts.validators import ContractViolation, SnapshotValidator
from src.core.domain.calculator_state import CalculatorState, UiState

logger = logging.getLogger(__name__)

UiStateListener = Callable[[UiState], None]


class CalculatorSession:
    """Сессия калькулятора: state machine + текущий снапшот + подписчики."""

    def __init__(
        self,
        state_machine: Optional[CalculatorStateMachine] = None,
        snapshot_validator: Optional[SnapshotValidator] = None,
    ):
        """
        Args:
            state_machine: state machine (по умолчанию с конфигурацией по умолчанию)
            snapshot_validator: проверка каждого перехода до фиксации (None — без проверки)
        """
        self.state_machine = state_machine or CalculatorStateMachine()
        self.snapshot_validator = snapshot_validator
        self._state = self.state_machine.initial_state()
        self._ui_state = self.state_machine.project(self._state)
        self._listeners: List[UiStateListener] = []

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def ui_state(self) -> UiState:
        return self._ui_state

    def dispatch(self, event: CalculatorEvent) -> UiState:
        """Обработка события и уведомление подписчиков.

        Состояние фиксируется до уведомления: исключение подписчика
        пробрасывается вызывающему, но переход уже завершён. Переход,
        нарушающий контракты, не фиксируется.

        Returns:
            UiState после перехода

        Raises:
            ContractViolation: если snapshot_validator отверг новый снапшот
        """
        result = self.state_machine.reduce(self._state, event)

        if self.snapshot_validator is not None:
            try:
                self.snapshot_validator.check(result.new_state, result.ui_state)
            except ContractViolation:
                logger.error(
                    "Transition %s rejected by snapshot contracts",
                    result.transition_reason,
                    exc_info=True,
                )
                raise

        self._state = result.new_state
        self._ui_state = result.ui_state

        for listener in list(self._listeners):
            try:
                listener(self._ui_state)
            except Exception:
                logger.error("UiState listener %r failed", listener, exc_info=True)
                raise

        return self._ui_state

    def press(self, label: str) -> UiState:
        """Нажатие клавиши по подписи ("7", "+", "=", "AC", ...)."""
        return self.dispatch(event_for_key(label))

    def reset(self) -> UiState:
        return self.dispatch(ClearEvent())

    def subscribe(self, listener: UiStateListener) -> Callable[[], None]:
        """Подписка на UiState.

        Returns:
            Функция отписки
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """JSON-снапшот текущего состояния, проверенный по контрактам.

        Raises:
            ContractViolation: если снапшот нарушает контракты
        """
        validator = self.snapshot_validator or SnapshotValidator(
            error_display=self.state_machine.config.error_display
        )
        return validator.dump(self._state, self._ui_state)
