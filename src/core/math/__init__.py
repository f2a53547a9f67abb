"""
Core math modules для калькулятора

Arithmetic Engine: точная десятичная арифметика без изменяемого состояния.
"""

from src.core.math.decimal_arithmetic import (
    # Constants
    DECIMAL128_CONTEXT,
    DECIMAL128_PRECISION,
    DISPLAY_SIGNIFICANT_DIGITS,
    DIVISION_SCALE,
    MAX_DISPLAY_LENGTH,
    PERCENT_DIVISOR,
    # Exceptions
    ArithmeticEngineError,
    DivisionByZeroError,
    ParseError,
    # Functions
    calculate,
    calculate_percentage,
    divide,
    format_result,
    parse_input,
    parse_operand,
    strip_trailing_zeros,
)

__all__ = [
    # Constants
    "DECIMAL128_CONTEXT",
    "DECIMAL128_PRECISION",
    "DISPLAY_SIGNIFICANT_DIGITS",
    "DIVISION_SCALE",
    "MAX_DISPLAY_LENGTH",
    "PERCENT_DIVISOR",
    # Exceptions
    "ArithmeticEngineError",
    "DivisionByZeroError",
    "ParseError",
    # Functions
    "calculate",
    "calculate_percentage",
    "divide",
    "format_result",
    "parse_input",
    "parse_operand",
    "strip_trailing_zeros",
]
