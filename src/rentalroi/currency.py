from dataclasses import dataclass
from typing import Dict

# Figures are computed in IDR; other currencies are a display conversion only.
BASE_CURRENCY = "IDR"


class UnknownCurrencyError(KeyError):
    pass


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    rate: float  # 1 unit of this currency = rate IDR


CURRENCIES: Dict[str, Currency] = {
    "IDR": Currency("IDR", "Rp", 1),
    "USD": Currency("USD", "$", 16000),
    "EUR": Currency("EUR", "€", 17500),
    "AUD": Currency("AUD", "A$", 10500),
    "INR": Currency("INR", "₹", 190),
    "CNY": Currency("CNY", "¥", 2200),
    "AED": Currency("AED", "د.إ", 4350),
    "GBP": Currency("GBP", "£", 20500),
    "RUB": Currency("RUB", "₽", 175),
}


def get_currency(code: str) -> Currency:
    try:
        return CURRENCIES[code.upper()]
    except KeyError:
        raise UnknownCurrencyError(code) from None


def convert(value: float, code: str) -> float:
    return value / get_currency(code).rate


def format_currency(value: float, code: str = BASE_CURRENCY) -> str:
    cur = get_currency(code)
    converted = value / cur.rate
    sign = "-" if converted < 0 else ""
    digits = 0 if abs(converted) > 1000 else 2
    return f"{sign}{cur.symbol}{abs(converted):,.{digits}f}"


def format_currency_abbrev(value: float, code: str = BASE_CURRENCY) -> str:
    """Short form for cards and charts: B/M for rupiah, M/K for everything else."""
    cur = get_currency(code)
    converted = value / cur.rate
    n = abs(converted)
    sign = "-" if converted < 0 else ""

    if cur.code == "IDR":
        if n >= 1_000_000_000:
            return f"{sign}{cur.symbol} {n / 1_000_000_000:.2f}B"
        if n >= 1_000_000:
            return f"{sign}{cur.symbol} {round(n / 1_000_000)}M"
        return f"{sign}{cur.symbol} {n:,.0f}"

    if n >= 1_000_000:
        return f"{sign}{cur.symbol}{n / 1_000_000:.2f}M"
    if n >= 1000:
        return f"{sign}{cur.symbol}{round(n / 1000)}K"
    return f"{sign}{cur.symbol}{n:,.0f}"
