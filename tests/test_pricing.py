from decimal import Decimal

import pytest

from app.models.user import GuideProfile
from app.utils.pricing import (
    calculate_tour_price,
    hourly_subtotal,
    platform_commission,
    quote_reservation,
    round_half_up,
)


def _guide(base_rate_hour=None, prices=None):
    return GuideProfile(base_rate_hour=base_rate_hour, prices=prices or {})


def test_round_half_up_rounds_halves_away_from_even():
    assert round_half_up(Decimal("198.5")) == 199
    assert round_half_up(2.5) == 3
    assert round_half_up(Decimal("4.49")) == 4


@pytest.mark.parametrize("duration, expected", [(4, 140), (6, 200), (8, 252)])
def test_hourly_subtotal_applies_duration_discount(duration, expected):
    assert hourly_subtotal(35, duration) == expected


def test_hourly_subtotal_rejects_unknown_duration():
    with pytest.raises(ValueError):
        hourly_subtotal(35, 5)


def test_calculate_tour_price_breakdown():
    price = calculate_tour_price(40, 8)
    assert price.subtotal == 320
    assert price.discount_percentage == 10
    assert price.discount == 32
    assert price.total == 288
    assert price.currency == "USD"

    four = calculate_tour_price(40, 4)
    assert four.discount == 0
    assert four.total == 160


def test_platform_commission_has_a_floor():
    assert platform_commission(50, 25, 25) == 25
    assert platform_commission(102, 25, 25) == 26
    assert platform_commission(200, 25, 25) == 50


def test_quote_with_hourly_rate():
    quote = quote_reservation(_guide(base_rate_hour=35), [4], 10, 25, 25)
    assert quote.currency == "USD"
    assert quote.subtotal == 140
    assert quote.traveler_fee == 14
    assert quote.total == 154
    assert quote.platform_commission == 35


def test_quote_with_hourly_rate_uses_first_session_only():
    quote = quote_reservation(_guide(base_rate_hour=35), [6, 6, 6], 10, 25, 25)
    assert quote.subtotal == 200
    assert quote.traveler_fee == 20
    assert quote.total == 220


def test_quote_falls_back_to_tier_prices_per_session():
    guide = _guide(prices={"h4": 100, "h6": 140, "h8": 180, "currency": "EUR"})
    quote = quote_reservation(guide, [6, 6], 10, 25, 25)
    assert quote.currency == "EUR"
    assert quote.subtotal == 280
    assert quote.traveler_fee == 28
    assert quote.total == 308
    assert quote.platform_commission == 70


def test_traveler_fee_rounds_half_up():
    guide = _guide(prices={"h4": 45, "h6": 60, "h8": 80, "currency": "USD"})
    quote = quote_reservation(guide, [4], 10, 25, 25)
    assert quote.traveler_fee == 5
    assert quote.total == 50
    assert quote.platform_commission == 25


def test_quote_uses_configured_percentages_by_default():
    quote = quote_reservation(_guide(base_rate_hour=35), [8])
    assert quote.traveler_fee_pct == 10
    assert quote.platform_commission_pct == 25
    assert quote.platform_commission_min_usd == 25
    assert quote.total == 252 + 25


def test_quote_errors():
    with pytest.raises(ValueError):
        quote_reservation(_guide(base_rate_hour=35), [])
    with pytest.raises(ValueError):
        quote_reservation(_guide(prices={"h4": 100, "currency": "USD"}), [8])
    with pytest.raises(ValueError):
        quote_reservation(_guide(prices={"h4": 100, "currency": "USD"}), [3])
