"""
Tests for JSON Schema Snapshot Contracts

Комплексное тестирование контрактов снапшота:
- Валидность самих схем и кэширование
- Валидация правильных данных
- Детекция нарушений required полей, типов, enum и pattern
- SnapshotValidator: согласованность CalculatorState и UiState
- Интеграция с CalculatorSession (проверка переходов, snapshot())
"""

import logging

import pytest

from src.calculator import CalculatorSession, CalculatorStateMachine
from src.calculator.state_machine import CalculatorConfig
from src.core.contracts import (
    CALCULATOR_STATE_CONTRACT,
    UI_STATE_CONTRACT,
    ContractViolation,
    SnapshotValidator,
    contract_errors,
    load_schema,
    validate_calculator_state,
    validate_snapshot,
    validate_ui_state,
)
from src.core.domain import CalculatorState, Operation, UiState


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def valid_ui_state():
    """Валидный ui_state."""
    return {"display_value": "5 + 3", "is_error": False}


@pytest.fixture
def valid_calculator_state():
    """Валидный calculator_state."""
    return {
        "first_operand": "5",
        "second_operand": "0",
        "operation": "+",
        "display_text": "3",
        "is_new_input": False,
        "has_decimal_point": False,
        "is_error": False,
    }


@pytest.fixture
def validating_session():
    return CalculatorSession(snapshot_validator=SnapshotValidator())


# =============================================================================
# SCHEMAS
# =============================================================================


class TestLoadSchema:
    """Тесты загрузки схем."""

    @pytest.mark.parametrize("contract", [UI_STATE_CONTRACT, CALCULATOR_STATE_CONTRACT])
    def test_load_schema(self, contract):
        schema = load_schema(contract)
        assert schema["title"] == contract

    def test_schema_cached(self):
        assert load_schema(UI_STATE_CONTRACT) is load_schema(UI_STATE_CONTRACT)

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            load_schema("does_not_exist")


# =============================================================================
# UI STATE CONTRACT
# =============================================================================


class TestUiStateContract:
    """Тесты ui_state контракта."""

    def test_valid(self, valid_ui_state):
        validate_ui_state(valid_ui_state)

    def test_error_state_valid(self):
        validate_ui_state({"display_value": "Error", "is_error": True})

    def test_missing_required_field(self, valid_ui_state):
        del valid_ui_state["is_error"]
        with pytest.raises(ContractViolation) as exc_info:
            validate_ui_state(valid_ui_state)

        assert exc_info.value.contract == UI_STATE_CONTRACT

    def test_wrong_type(self, valid_ui_state):
        valid_ui_state["is_error"] = "no"
        assert contract_errors(UI_STATE_CONTRACT, valid_ui_state) == [
            "$.is_error: 'no' is not of type 'boolean'"
        ]

    def test_empty_display_rejected(self, valid_ui_state):
        valid_ui_state["display_value"] = ""
        with pytest.raises(ContractViolation):
            validate_ui_state(valid_ui_state)

    def test_additional_property_rejected(self, valid_ui_state):
        valid_ui_state["expression"] = ""
        with pytest.raises(ContractViolation):
            validate_ui_state(valid_ui_state)

    def test_pydantic_model_dump_valid(self):
        validate_ui_state(UiState().model_dump(mode="json"))


# =============================================================================
# CALCULATOR STATE CONTRACT
# =============================================================================


class TestCalculatorStateContract:
    """Тесты calculator_state контракта."""

    def test_valid(self, valid_calculator_state):
        validate_calculator_state(valid_calculator_state)

    def test_initial_state_valid(self):
        validate_calculator_state(CalculatorState().model_dump(mode="json"))

    def test_null_operation_valid(self, valid_calculator_state):
        valid_calculator_state["operation"] = None
        validate_calculator_state(valid_calculator_state)

    def test_unknown_operation_rejected(self, valid_calculator_state):
        valid_calculator_state["operation"] = "^"
        with pytest.raises(ContractViolation):
            validate_calculator_state(valid_calculator_state)

    @pytest.mark.parametrize("display_text", ["Error", "123.456789E+", "1E+30.", ""])
    def test_display_text_pattern(self, valid_calculator_state, display_text):
        valid_calculator_state["display_text"] = display_text
        with pytest.raises(ContractViolation):
            validate_calculator_state(valid_calculator_state)

    def test_operand_must_be_decimal_string(self, valid_calculator_state):
        valid_calculator_state["first_operand"] = 5
        errors = contract_errors(CALCULATOR_STATE_CONTRACT, valid_calculator_state)

        assert len(errors) == 1
        assert errors[0].startswith("$.first_operand:")

    def test_errors_sorted_by_path(self, valid_calculator_state):
        valid_calculator_state["second_operand"] = 0
        valid_calculator_state["first_operand"] = 5
        errors = contract_errors(CALCULATOR_STATE_CONTRACT, valid_calculator_state)

        assert [e.split(":")[0] for e in errors] == ["$.first_operand", "$.second_operand"]


# =============================================================================
# SNAPSHOT VALIDATOR
# =============================================================================


class TestSnapshotValidator:
    """Тесты согласованности CalculatorState и UiState."""

    def test_initial_snapshot_valid(self):
        validate_snapshot(CalculatorState(), UiState())

    def test_pending_operation_snapshot_valid(self):
        state = CalculatorState(
            first_operand=5, operation=Operation.ADD, display_text="3", is_new_input=False
        )
        validate_snapshot(state, UiState(display_value="5 + 3"))

    def test_error_flag_mismatch(self):
        with pytest.raises(ContractViolation) as exc_info:
            validate_snapshot(CalculatorState(), UiState(display_value="Error", is_error=True))

        assert exc_info.value.contract == "snapshot"
        assert "is_error mismatch" in exc_info.value.errors[0]

    def test_error_display_text(self):
        state = CalculatorState(is_error=True)
        validator = SnapshotValidator(error_display="Ошибка")

        assert validator.errors(state, UiState(display_value="Ошибка", is_error=True)) == []
        assert len(validator.errors(state, UiState(display_value="Error", is_error=True))) == 1

    def test_display_value_must_mirror_display_text(self):
        state = CalculatorState(display_text="42", is_new_input=False)
        errors = SnapshotValidator().errors(state, UiState(display_value="24"))

        assert errors == ["display_value '24' != display_text '42'"]

    def test_dump(self):
        dumped = SnapshotValidator().dump(CalculatorState(), UiState())

        assert dumped[UI_STATE_CONTRACT] == {"display_value": "0", "is_error": False}
        assert dumped[CALCULATOR_STATE_CONTRACT]["first_operand"] == "0"
        assert dumped[CALCULATOR_STATE_CONTRACT]["operation"] is None


# =============================================================================
# SESSION INTEGRATION
# =============================================================================


class TestSessionContracts:
    """Снапшоты после реальных переходов соответствуют контрактам."""

    @pytest.mark.parametrize(
        "keys",
        [
            ["5", "+", "3"],
            ["1", "÷", "3", "="],
            ["7", "−"],
            ["1", "÷", "0", "="],
            ["1", "2", "3", "4", "5", "6", "7", "8", "9", "×", "9", "8", "7", "6", "5", "4", "3", "2", "1", "="],
            ["1", "2", "3", "4", "5", "6", "7", "8", "9", "×", "1", "0", "0", "0", "0", "0", "0", "0", "0", "0", "0", "0", "0", "=", "⌫", "⌫"],
            ["9"] * 15 + ["+"] + ["9"] * 15 + ["%", "7", "."],
        ],
    )
    def test_every_transition_validated(self, validating_session, keys):
        for key in keys:
            validating_session.press(key)

        snapshot = validating_session.snapshot()
        validate_calculator_state(snapshot[CALCULATOR_STATE_CONTRACT])
        validate_ui_state(snapshot[UI_STATE_CONTRACT])

    def test_snapshot_without_validator(self):
        session = CalculatorSession()
        session.press("8")

        assert session.snapshot()[UI_STATE_CONTRACT] == {"display_value": "8", "is_error": False}

    def test_rejected_transition_not_committed(self, caplog):
        """Переход, нарушающий контракт, не фиксируется и логируется."""
        session = CalculatorSession(snapshot_validator=SnapshotValidator(error_display="Ошибка"))
        for key in ["1", "÷", "0"]:
            session.press(key)
        before = session.state

        with caplog.at_level(logging.ERROR, logger="src.calculator.session"):
            with pytest.raises(ContractViolation):
                session.press("=")

        assert session.state is before
        assert not session.state.is_error
        assert "rejected by snapshot contracts" in caplog.text

    def test_custom_error_display_accepted(self):
        machine = CalculatorStateMachine(CalculatorConfig(error_display="Ошибка"))
        session = CalculatorSession(machine, SnapshotValidator(error_display="Ошибка"))
        for key in ["1", "÷", "0", "="]:
            session.press(key)

        assert session.snapshot()[UI_STATE_CONTRACT] == {
            "display_value": "Ошибка",
            "is_error": True,
        }
