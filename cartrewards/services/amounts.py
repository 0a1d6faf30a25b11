"""
Currency amount parsing - amounts are always Decimal, never float
"""
from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError

# Currency columns are Numeric(10, 2)
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")


def parse_amount(value, field_name: str = "amount") -> Decimal:
    """
    Parse a currency amount to a 2-place Decimal.

    Floats go through str() so 2999.99 stays 2999.99. Sub-cent digits are
    rejected rather than rounded, so the stored value is exactly the value
    thresholds were compared against.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a decimal amount")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a decimal amount, got {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite amount")
    if amount < 0:
        raise ValidationError(f"{field_name} must be >= 0, got {amount}")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field_name} must be <= {MAX_AMOUNT}, got {amount}")

    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise ValidationError(f"{field_name} must have at most 2 decimal places, got {amount}")
    return quantized
