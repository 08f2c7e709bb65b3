"""Parsing of operator-entered amounts and quantities."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal('0.01')


def quantize_money(value) -> Decimal:
    """Round a monetary amount to cents (half up)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value, field='amount') -> Decimal:
    """
    Parse a non-negative monetary amount.

    Accepts Decimal, int, float or a plain string such as "1500" or
    "1500.50". Empty values parse as zero.

    Raises:
        ValueError: if the value is not a number or is negative.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal('0.00')

    if isinstance(value, bool):
        raise ValueError(f'Invalid {field}: {value!r}')

    try:
        # str() first so floats keep their printed value
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f'Invalid {field}: {value!r}')

    if not amount.is_finite():
        raise ValueError(f'Invalid {field}: {value!r}')
    if amount < 0:
        raise ValueError(f'The {field} cannot be negative')

    return quantize_money(amount)


def parse_quantity(value, field='quantity') -> int:
    """
    Parse a whole, non-negative unit count.

    Raises:
        ValueError: if the value is not a whole number or is negative.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f'Invalid {field}: {value!r}')

    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f'Invalid {field}: {value!r}')

    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f'The {field} must be a whole number')
    if number < 0:
        raise ValueError(f'The {field} cannot be negative')

    return int(number)
