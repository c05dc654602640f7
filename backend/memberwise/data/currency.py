"""Currency utilities - cent rounding, display formatting and savings percentages."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
WHOLE_DOLLAR = Decimal("1")
ZERO = Decimal("0")

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
}

# Keeps display strings sane if a bad catalog produces a huge number.
MAX_DISPLAY_AMOUNT = Decimal("999999")


def to_cents(amount: Decimal) -> Decimal:
    """Round to the cent, half-up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def to_whole_dollars(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(WHOLE_DOLLAR, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal | int | float | None, currency: str = "USD") -> str:
    """Format an amount for display.

    Whole amounts drop the cents ("$1,000"), fractional ones keep two
    places ("$1,234.56"). Negative and missing amounts display as zero.
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    if amount is None:
        value = ZERO
    else:
        value = Decimal(str(amount))
    value = min(max(ZERO, value), MAX_DISPLAY_AMOUNT)
    value = to_cents(value)
    if value == value.to_integral_value():
        return f"{symbol}{int(value):,}"
    return f"{symbol}{value:,.2f}"


def format_rate(rate: Decimal) -> str:
    """0.25 -> "25%"."""
    return f"{int(to_whole_dollars(rate * 100))}%"


def savings_percentage(savings: Decimal, baseline: Decimal, max_percent: int = 90) -> int:
    """Whole-number savings percentage, capped at ``max_percent``.

    A zero or negative baseline yields 0 rather than dividing by zero.
    """
    max_percent = max(0, min(100, max_percent))
    if baseline <= 0 or savings <= 0:
        return 0
    raw = (Decimal(savings) / Decimal(baseline)) * 100
    percent = int(raw.quantize(WHOLE_DOLLAR, rounding=ROUND_HALF_UP))
    return min(percent, max_percent)
