"""
Promotion & Gift-Card Ledger Module

Holds promo codes and gift cards and records every use of them. It includes:

- Ordered promo eligibility checks with specific failure messages
- Discount quoting and one-step apply with usage counting
- Promo administration (create, deactivate, usage statistics)
- Gift card issue, validation, partial application and refunds

Key Components:
- ledger.py: PromotionLedger state and operations
- router.py: FastAPI endpoints for promo codes and gift cards
- schemas.py: Pydantic models for promos, gift cards and requests
"""

from .ledger import PromotionLedger, DEFAULT_PROMO_CODES, round_currency
from .schemas import (
    DiscountType, PromoCode, PromoSummary, PromoUsage, PromoApplication,
    DiscountQuote, GiftCard, GiftCardUsage, GiftCardApplication, GiftCardSummary
)

__all__ = [
    "PromotionLedger",
    "DEFAULT_PROMO_CODES",
    "round_currency",
    "DiscountType",
    "PromoCode",
    "PromoSummary",
    "PromoUsage",
    "PromoApplication",
    "DiscountQuote",
    "GiftCard",
    "GiftCardUsage",
    "GiftCardApplication",
    "GiftCardSummary",
]
