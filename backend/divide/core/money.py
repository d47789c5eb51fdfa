"""
Money helpers: decimal conversion, cent rounding and currency formatting.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

CENT = Decimal("0.01")

# Balances and transfers at or below one cent count as settled
SETTLED_THRESHOLD = Decimal("0.01")

CURRENCIES: Dict[str, Dict[str, Any]] = {
    "COP": {
        "code": "COP",
        "name": "Colombian peso",
        "symbol": "$",
        "decimals": 0,
        "thousands_sep": ".",
        "decimal_sep": ",",
    },
    "USD": {
        "code": "USD",
        "name": "US dollar",
        "symbol": "US$",
        "decimals": 2,
        "thousands_sep": ",",
        "decimal_sep": ".",
    },
    "EUR": {
        "code": "EUR",
        "name": "Euro",
        "symbol": "€",
        "decimals": 2,
        "thousands_sep": ".",
        "decimal_sep": ",",
    },
}

FALLBACK_CURRENCY = "COP"


def to_decimal(value: Any) -> Decimal:
    """Convert a number to Decimal going through str so floats keep their printed value."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Any) -> Decimal:
    """Round to the cent, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def get_currency_info(code: str) -> Dict[str, Any]:
    return CURRENCIES.get((code or "").upper(), CURRENCIES[FALLBACK_CURRENCY])


def format_amount(value: Any, currency_code: str, include_symbol: bool = True) -> str:
    """
    Format an amount the way the currency's locale writes it.

    COP puts the symbol first ("$ 12.500"); USD and EUR put it last
    ("12.50 US$", "1.234,50 €").
    """
    curr = get_currency_info(currency_code)
    quantum = Decimal(1).scaleb(-curr["decimals"])
    amount = to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    
    sign = "-" if amount < 0 else ""
    integer_part, _, fraction_part = f"{abs(amount):.{curr['decimals']}f}".partition(".")
    grouped = f"{int(integer_part):,}".replace(",", curr["thousands_sep"])
    formatted = sign + grouped
    if fraction_part:
        formatted += curr["decimal_sep"] + fraction_part
    
    if not include_symbol:
        return formatted
    if curr["code"] == "COP":
        return f"{curr['symbol']} {formatted}"
    return f"{formatted} {curr['symbol']}"
