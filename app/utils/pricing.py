from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence, Union

from app.core.config import settings
from app.models.user import GuideProfile

# Per-duration multiplier applied to base_rate_hour * hours
DURATION_DISCOUNTS = {
    4: Decimal("1.00"),
    6: Decimal("0.95"),
    8: Decimal("0.90"),
}

DURATION_LABELS = {
    4: "4 hours (Standard rate)",
    6: "6 hours (5% discount)",
    8: "8 hours (10% discount)",
}

Number = Union[int, float, Decimal]


def round_half_up(value: Number) -> int:
    """Round to the nearest whole unit, .5 going up (not banker's rounding)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _check_duration(duration_hours: int) -> None:
    if duration_hours not in DURATION_DISCOUNTS:
        raise ValueError(f"Unsupported duration: {duration_hours}h (expected 4, 6 or 8)")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: int
    discount: int
    discount_percentage: int
    total: int
    currency: str


@dataclass(frozen=True)
class ReservationQuote:
    currency: str
    subtotal: int
    traveler_fee_pct: int
    traveler_fee: int
    total: int
    platform_commission_pct: int
    platform_commission_min_usd: int
    platform_commission: int


def calculate_tour_price(base_rate_hour: Number, duration_hours: int, currency: str = "USD") -> PriceBreakdown:
    """
    Price a single tour from an hourly rate, as shown on a guide profile.

    - 4h = rate * 4
    - 6h = rate * 6, minus 5%
    - 8h = rate * 8, minus 10%
    """
    _check_duration(duration_hours)
    raw = Decimal(str(base_rate_hour)) * duration_hours
    discount_pct = int((Decimal("1") - DURATION_DISCOUNTS[duration_hours]) * 100)
    discount = round_half_up(raw * discount_pct / 100)
    raw_subtotal = round_half_up(raw)
    return PriceBreakdown(
        subtotal=raw_subtotal,
        discount=discount,
        discount_percentage=discount_pct,
        total=raw_subtotal - discount,
        currency=currency,
    )


def hourly_subtotal(base_rate_hour: Number, duration_hours: int) -> int:
    """round(rate * hours * discount_factor)"""
    _check_duration(duration_hours)
    return round_half_up(
        Decimal(str(base_rate_hour)) * duration_hours * DURATION_DISCOUNTS[duration_hours]
    )


def platform_commission(subtotal: int, pct: int, minimum: int) -> int:
    return max(round_half_up(Decimal(subtotal) * pct / 100), minimum)


def quote_reservation(
    guide: GuideProfile,
    durations: Sequence[int],
    traveler_fee_pct: Optional[int] = None,
    commission_pct: Optional[int] = None,
    commission_min: Optional[int] = None,
) -> ReservationQuote:
    """
    Price a reservation for `guide` given the duration of each requested session.

    Guides with an hourly rate are priced from the first session's duration.
    Guides without one fall back to their flat tiered price times the number
    of sessions, in the currency stored alongside those prices.
    """
    if not durations:
        raise ValueError("At least one session is required")

    traveler_fee_pct = settings.TRAVELER_FEE_PCT if traveler_fee_pct is None else traveler_fee_pct
    commission_pct = settings.PLATFORM_COMMISSION_PCT if commission_pct is None else commission_pct
    commission_min = settings.PLATFORM_COMMISSION_MIN_USD if commission_min is None else commission_min

    duration_hours = durations[0]
    if guide.base_rate_hour:
        subtotal = hourly_subtotal(guide.base_rate_hour, duration_hours)
        currency = "USD"
    else:
        _check_duration(duration_hours)
        prices = guide.prices or {}
        tier_price = prices.get(f"h{duration_hours}")
        if tier_price is None:
            raise ValueError(f"Guide has no price for {duration_hours}h tours")
        subtotal = round_half_up(tier_price) * len(durations)
        currency = prices.get("currency") or "USD"

    traveler_fee = round_half_up(Decimal(subtotal) * traveler_fee_pct / 100)
    return ReservationQuote(
        currency=currency,
        subtotal=subtotal,
        traveler_fee_pct=traveler_fee_pct,
        traveler_fee=traveler_fee,
        total=subtotal + traveler_fee,
        platform_commission_pct=commission_pct,
        platform_commission_min_usd=commission_min,
        platform_commission=platform_commission(subtotal, commission_pct, commission_min),
    )
