"""
Snapshot Contracts — проверка снапшотов калькулятора по JSON Schema

Снапшот сессии состоит из двух частей, которые сериализуются через
model_dump(mode="json") и проверяются по контрактам из contracts/schema/:
- calculator_state.json — состояние state machine (операнды как строки)
- ui_state.json — то, что рендерит слой отображения

Кроме схем, SnapshotValidator проверяет согласованность частей:
UiState должен быть проекцией CalculatorState.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Final, List

import jsonschema
from jsonschema import Draft202012Validator

from src.core.domain.calculator_state import CalculatorState, UiState


# Корень проекта: src/core/contracts/validators.py → ../../../
SCHEMA_DIR: Final[Path] = Path(__file__).resolve().parents[3] / "contracts" / "schema"

UI_STATE_CONTRACT: Final[str] = "ui_state"
CALCULATOR_STATE_CONTRACT: Final[str] = "calculator_state"


class ContractViolation(ValueError):
    """Снапшот не соответствует контракту.

    Attributes:
        contract: имя нарушенного контракта ("ui_state", "calculator_state", "snapshot")
        errors: сообщения об ошибках в виде "$.path: message"
    """

    def __init__(self, contract: str, errors: List[str]):
        self.contract = contract
        self.errors = errors
        super().__init__(f"{contract} contract violated: " + "; ".join(errors))


# =============================================================================
# SCHEMAS
# =============================================================================


@lru_cache(maxsize=None)
def load_schema(contract: str) -> Dict[str, Any]:
    """
    Загрузка и meta-валидация схемы контракта.

    Args:
        contract: имя контракта без расширения (например, 'ui_state')

    Raises:
        FileNotFoundError: если файл схемы не найден
        ValueError: если файл не является валидной JSON Schema
    """
    schema_path = SCHEMA_DIR / f"{contract}.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise ValueError(f"Invalid JSON Schema in {contract}.json: {e.message}") from e

    return schema


@lru_cache(maxsize=None)
def _schema_validator(contract: str) -> Draft202012Validator:
    return Draft202012Validator(load_schema(contract))


def contract_errors(contract: str, data: Dict[str, Any]) -> List[str]:
    """Все нарушения контракта, отсортированные по пути в документе."""
    errors = sorted(_schema_validator(contract).iter_errors(data), key=lambda e: e.json_path)
    return [f"{e.json_path}: {e.message}" for e in errors]


def _check(contract: str, data: Dict[str, Any]) -> None:
    errors = contract_errors(contract, data)
    if errors:
        raise ContractViolation(contract, errors)


def validate_ui_state(data: Dict[str, Any]) -> None:
    """
    Валидация сериализованного UiState.

    Raises:
        ContractViolation: если данные не соответствуют ui_state.json
    """
    _check(UI_STATE_CONTRACT, data)


def validate_calculator_state(data: Dict[str, Any]) -> None:
    """
    Валидация сериализованного CalculatorState.

    Raises:
        ContractViolation: если данные не соответствуют calculator_state.json
    """
    _check(CALCULATOR_STATE_CONTRACT, data)


# =============================================================================
# SNAPSHOT VALIDATOR
# =============================================================================


class SnapshotValidator:
    """
    Проверка пары (CalculatorState, UiState) после перехода.

    1. Каждая часть проходит свою JSON Schema
    2. is_error совпадает в обеих частях
    3. В ошибке показан текст ошибки, вне ошибки без операции — display_text
    """

    def __init__(self, error_display: str = "Error"):
        """
        Args:
            error_display: ожидаемый текст дисплея в состоянии ошибки
        """
        self.error_display = error_display

    def errors(self, state: CalculatorState, ui_state: UiState) -> List[str]:
        errors = [
            f"{CALCULATOR_STATE_CONTRACT} {message}"
            for message in contract_errors(
                CALCULATOR_STATE_CONTRACT, state.model_dump(mode="json")
            )
        ]
        errors += [
            f"{UI_STATE_CONTRACT} {message}"
            for message in contract_errors(UI_STATE_CONTRACT, ui_state.model_dump(mode="json"))
        ]

        if state.is_error != ui_state.is_error:
            errors.append(
                f"is_error mismatch: state={state.is_error}, ui_state={ui_state.is_error}"
            )
        elif ui_state.is_error and ui_state.display_value != self.error_display:
            errors.append(f"error display {ui_state.display_value!r} != {self.error_display!r}")
        elif (
            not state.is_error
            and not state.has_pending_operation
            and ui_state.display_value != state.display_text
        ):
            errors.append(
                f"display_value {ui_state.display_value!r} != display_text {state.display_text!r}"
            )

        return errors

    def check(self, state: CalculatorState, ui_state: UiState) -> None:
        """
        Raises:
            ContractViolation: если снапшот нарушает контракты
        """
        errors = self.errors(state, ui_state)
        if errors:
            raise ContractViolation("snapshot", errors)

    def dump(self, state: CalculatorState, ui_state: UiState) -> Dict[str, Dict[str, Any]]:
        """Проверенный JSON-снапшот {"calculator_state": ..., "ui_state": ...}."""
        self.check(state, ui_state)
        return {
            CALCULATOR_STATE_CONTRACT: state.model_dump(mode="json"),
            UI_STATE_CONTRACT: ui_state.model_dump(mode="json"),
        }


def validate_snapshot(state: CalculatorState, ui_state: UiState) -> None:
    """
    Валидация снапшота с текстом ошибки по умолчанию.

    Raises:
        ContractViolation: если снапшот нарушает контракты
    """
    SnapshotValidator().check(state, ui_state)
