# app/utils/priority.py

from decimal import Decimal

HIGH = "high"
MEDIUM = "medium"
LOW = "low"


def to_base_amount(amount, currency, exchange_rate, base_currency: str = "PHP") -> Decimal:
    """Convert a document amount into the base currency.

    Documents already in the base currency are taken as-is; foreign
    amounts are multiplied by the exchange rate stored on the document.
    """
    value = Decimal(str(amount or 0))
    if not currency or currency.upper() == base_currency.upper():
        return value
    rate = Decimal(str(exchange_rate or 1))
    return value * rate


def calculate_priority(
    amount,
    currency,
    exchange_rate,
    base_currency: str = "PHP",
    high_threshold=Decimal("1000000"),
    medium_threshold=Decimal("100000"),
) -> str:
    base_amount = to_base_amount(amount, currency, exchange_rate, base_currency)
    if base_amount >= Decimal(str(high_threshold)):
        return HIGH
    if base_amount >= Decimal(str(medium_threshold)):
        return MEDIUM
    return LOW
