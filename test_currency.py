import pytest

from rentalroi.currency import (
    UnknownCurrencyError,
    convert,
    format_currency,
    format_currency_abbrev,
)


def test_format_currency_idr():
    assert format_currency(1_600_000) == "Rp1,600,000"


def test_format_currency_converts_for_display():
    assert format_currency(16_000 * 2_500, "USD") == "$2,500"
    assert format_currency(16_000 * 12.5, "usd") == "$12.50"
    assert format_currency(-16_000 * 2_500, "USD") == "-$2,500"


def test_convert():
    assert convert(175_000, "EUR") == pytest.approx(10)


@pytest.mark.parametrize("value, code, expected", [
    (2_400_000_000, "IDR", "Rp 2.40B"),
    (12_000_000, "IDR", "Rp 12M"),
    (950_000, "IDR", "Rp 950,000"),
    (16_000 * 2_500_000, "USD", "$2.50M"),
    (16_000 * 45_000, "USD", "$45K"),
    (-16_000 * 45_000, "USD", "-$45K"),
    (16_000 * 300, "USD", "$300"),
])
def test_format_currency_abbrev(value, code, expected):
    assert format_currency_abbrev(value, code) == expected


def test_unknown_currency():
    with pytest.raises(UnknownCurrencyError):
        format_currency(1, "XYZ")
    with pytest.raises(KeyError):
        convert(1, "XYZ")
