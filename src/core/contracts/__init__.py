"""
Contract Validation Module

Модуль для валидации JSON снапшотов калькулятора.
"""

from .validators import (
    CALCULATOR_STATE_CONTRACT,
    SCHEMA_DIR,
    UI_STATE_CONTRACT,
    ContractViolation,
    SnapshotValidator,
    contract_errors,
    load_schema,
    validate_calculator_state,
    validate_snapshot,
    validate_ui_state,
)

__all__ = [
    # Constants
    "SCHEMA_DIR",
    "UI_STATE_CONTRACT",
    "CALCULATOR_STATE_CONTRACT",
    # Classes
    "ContractViolation",
    "SnapshotValidator",
    # Functions
    "load_schema",
    "contract_errors",
    "validate_ui_state",
    "validate_calculator_state",
    "validate_snapshot",
]
