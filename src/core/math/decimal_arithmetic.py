"""
Decimal Arithmetic — Arithmetic Engine калькулятора

Чистые функции без состояния:
- calculate: бинарные операции (+, −, ×, ÷) в десятичной арифметике
- calculate_percentage: семантика процента как в стандартном калькуляторе
- format_result: представление результата для дисплея
- parse_operand / parse_input: разбор текста дисплея в операнд

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Никакой двоичной плавающей точки: только decimal.Decimal
2. Единственная ошибка вычислений — DivisionByZeroError
3. parse_input никогда не выбрасывает исключений (невалидный текст → 0)
4. format_result идемпотентна: format(parse(format(x))) == format(x)
"""

import re
from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    Context,
    Decimal,
)
from typing import Final, Optional

from src.core.domain.operation import Operation

# =============================================================================
# КОНСТАНТЫ ТОЧНОСТИ
# =============================================================================

# Значащие цифры для +, −, × (эквивалент IEEE 754 decimal128)
DECIMAL128_PRECISION: Final[int] = 34

# Количество дробных цифр результата деления
DIVISION_SCALE: Final[int] = 10

# Максимальная длина plain-строки на дисплее до перехода в инженерную нотацию
MAX_DISPLAY_LENGTH: Final[int] = 15

# Значащие цифры в инженерной нотации
DISPLAY_SIGNIFICANT_DIGITS: Final[int] = 10

PERCENT_DIVISOR: Final[Decimal] = Decimal(100)

ZERO: Final[Decimal] = Decimal(0)

# Контекст для сложения, вычитания и умножения.
# Широкий диапазон экспонент: Decimal не должен переполняться там, где
# точная десятичная арифметика даёт конечный результат.
DECIMAL128_CONTEXT: Final[Context] = Context(
    prec=DECIMAL128_PRECISION,
    rounding=ROUND_HALF_EVEN,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
)

# Формат числового литерала на дисплее: [+-]digits[.digits][E[+-]digits]
_NUMERIC_LITERAL = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ArithmeticEngineError(Exception):
    """Базовая ошибка Arithmetic Engine."""

    pass


class DivisionByZeroError(ArithmeticEngineError):
    """
    Деление на операнд, равный нулю.

    Единственная ошибка, которую calculate может выбросить. State machine
    переводит её в состояние ошибки дисплея ("Error").
    """

    pass


class ParseError(ArithmeticEngineError, ValueError):
    """Текст дисплея не является числовым литералом."""

    pass


# =============================================================================
# ВЫЧИСЛЕНИЯ
# =============================================================================


def calculate(first: Decimal, second: Decimal, operation: Operation) -> Decimal:
    """
    Применение бинарной операции к двум операндам.

    +, −, × выполняются в контексте decimal128 (34 значащие цифры) без
    принудительного округления до фиксированного scale. Деление округляется
    до DIVISION_SCALE дробных цифр (ROUND_HALF_UP).

    Args:
        first: Первый операнд
        second: Второй операнд
        operation: Операция

    Returns:
        Результат операции

    Raises:
        DivisionByZeroError: Если operation == DIVIDE и second == 0
            (для любого first, включая 0)

    Examples:
        >>> calculate(Decimal("5"), Decimal("3"), Operation.ADD)
        Decimal('8')
        >>> calculate(Decimal("1"), Decimal("3"), Operation.DIVIDE)
        Decimal('0.3333333333')
    """
    if operation == Operation.ADD:
        return DECIMAL128_CONTEXT.add(first, second)
    elif operation == Operation.SUBTRACT:
        return DECIMAL128_CONTEXT.subtract(first, second)
    elif operation == Operation.MULTIPLY:
        return DECIMAL128_CONTEXT.multiply(first, second)
    elif operation == Operation.DIVIDE:
        return divide(first, second)
    else:
        raise ValueError(f"Unknown operation: {operation!r}")


def divide(
    numerator: Decimal,
    denominator: Decimal,
    scale: int = DIVISION_SCALE,
) -> Decimal:
    """
    Деление с округлением до фиксированного числа дробных цифр.

    Промежуточное частное считается с отбрасыванием (ROUND_DOWN) и запасом
    цифр, после чего квантуется с ROUND_HALF_UP. Отбрасывание сохраняет
    положение частного относительно границы округления, поэтому двойного
    округления не возникает.

    Если одна только целая часть частного длиннее DECIMAL128_PRECISION,
    фиксированный scale не несёт информации: частное округляется до
    DECIMAL128_PRECISION значащих цифр (ROUND_HALF_UP).

    Raises:
        DivisionByZeroError: Если denominator == 0
    """
    if denominator.is_zero():
        raise DivisionByZeroError(f"Division by zero: {numerator} / {denominator}")

    if numerator.is_zero():
        return ZERO.quantize(Decimal(1).scaleb(-scale))

    integer_digits = numerator.adjusted() - denominator.adjusted() + 2

    if integer_digits > DECIMAL128_PRECISION:
        wide = Context(
            prec=DECIMAL128_PRECISION,
            rounding=ROUND_HALF_UP,
            Emax=MAX_EMAX,
            Emin=MIN_EMIN,
        )
        return wide.divide(numerator, denominator)

    working = Context(
        prec=max(DECIMAL128_PRECISION, integer_digits + scale + 2),
        rounding=ROUND_DOWN,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
    )
    truncated = working.divide(numerator, denominator)
    return truncated.quantize(
        Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP, context=working
    )


def calculate_percentage(
    base: Decimal,
    percent: Decimal,
    operation: Optional[Operation],
) -> Decimal:
    """
    Вычисление процента как в стандартном калькуляторе.

    - 100 + 10% = 100 + (100 × 0.10) = 110
    - 100 − 10% = 100 − (100 × 0.10) = 90
    - 100 × 10% = 100 × 0.10 = 10
    - 100 ÷ 10% = 100 ÷ 0.10 = 1000
    - 50% (без операции) = 0.50

    Args:
        base: База процента (первый операнд)
        percent: Значение процента (например, 10 для 10%)
        operation: Ожидающая операция или None

    Returns:
        base × percent/100 для + и −; иначе просто percent/100
    """
    fraction = DECIMAL128_CONTEXT.divide(percent, PERCENT_DIVISOR)

    if operation in (Operation.ADD, Operation.SUBTRACT):
        # Для + и − процент вычисляется от базы
        return DECIMAL128_CONTEXT.multiply(base, fraction)

    # Для ×, ÷ и без операции — просто десятичная дробь
    return fraction


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def strip_trailing_zeros(value: Decimal) -> Decimal:
    """
    Удаление незначащих нулей без потери точности.

    Decimal.normalize округляет до точности контекста, поэтому контекст
    подбирается по длине коэффициента. Отрицательный ноль становится нулём.

    Examples:
        >>> strip_trailing_zeros(Decimal("1.500"))
        Decimal('1.5')
        >>> strip_trailing_zeros(Decimal("-0.00"))
        Decimal('0')
    """
    if value.is_zero():
        return ZERO

    exact = Context(
        prec=max(len(value.as_tuple().digits), 1),
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
    )
    return value.normalize(exact)


def _plain(value: Decimal) -> str:
    return format(value, "f")


def format_result(
    value: Decimal,
    max_length: int = MAX_DISPLAY_LENGTH,
    significant_digits: int = DISPLAY_SIGNIFICANT_DIGITS,
) -> str:
    """
    Форматирование результата для дисплея.

    1. Удаляются незначащие дробные нули
    2. Если plain-строка длиннее max_length — округление до significant_digits
       значащих цифр и инженерная нотация (экспонента кратна 3)
    3. Если после округления plain-строка помещается на дисплей, выводится она
       (иначе повторное форматирование дало бы другой текст)
    4. Целые числа выводятся без десятичной точки

    Examples:
        >>> format_result(Decimal("8.000"))
        '8'
        >>> format_result(Decimal("0.5"))
        '0.5'
        >>> format_result(Decimal("123456789012345678"))
        '123.456789E+15'
    """
    stripped = strip_trailing_zeros(value)

    if len(_plain(stripped)) > max_length:
        rounding = Context(
            prec=significant_digits,
            rounding=ROUND_HALF_UP,
            Emax=MAX_EMAX,
            Emin=MIN_EMIN,
        )
        stripped = strip_trailing_zeros(rounding.plus(stripped))

        if len(_plain(stripped)) > max_length:
            return stripped.to_eng_string()

    if stripped == stripped.to_integral_value():
        return str(int(stripped))

    return _plain(stripped)


# =============================================================================
# РАЗБОР ВВОДА
# =============================================================================


def parse_operand(text: str) -> Decimal:
    """
    Строгий разбор текста дисплея в операнд.

    Пустая строка и одиночный "-" означают ноль (ввод ещё не начат).

    Raises:
        ParseError: Если text не числовой литерал (включая NaN, Infinity,
            пробелы и разделители "_", которые принимает Decimal())
    """
    if text == "" or text == "-":
        return ZERO

    if not _NUMERIC_LITERAL.match(text):
        raise ParseError(f"Not a numeric literal: {text!r}")

    return Decimal(text)


def parse_input(text: str) -> Decimal:
    """
    Разбор текста дисплея; невалидный текст даёт ноль.

    Никогда не выбрасывает исключений.

    Examples:
        >>> parse_input("12.5")
        Decimal('12.5')
        >>> parse_input("-")
        Decimal('0')
        >>> parse_input("abc")
        Decimal('0')
    """
    try:
        return parse_operand(text)
    except ParseError:
        return ZERO
