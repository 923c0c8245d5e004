from fastapi import APIRouter, Depends, Path
from decimal import Decimal
from typing import List

from skylux.dependencies import get_ledger
from skylux.promotions.ledger import PromotionLedger
from skylux.promotions.schemas import (
    ActivePromo, DiscountQuote, GiftCard, GiftCardApplication, GiftCardApplyRequest,
    GiftCardCodeRequest, GiftCardCreateRequest, GiftCardSummary, PromoApplication,
    PromoApplyRequest, PromoCode, PromoCreateRequest, PromoSummary, PromoUsageStats,
    PromoValidationRequest
)

router = APIRouter()
gift_card_router = APIRouter()

# Promo Code Endpoints
@router.post("/validate", response_model=PromoSummary)
def validate_promo_code(
    request: PromoValidationRequest,
    ledger: PromotionLedger = Depends(get_ledger)
):
    """Check a promo code against an amount, cabin and route"""
    return ledger.validate_promo_code(request.code, request.amount, request.cabin, request.route)

@router.post("/apply", response_model=PromoApplication)
def apply_promo_code(
    request: PromoApplyRequest,
    ledger: PromotionLedger = Depends(get_ledger)
):
    """Consume one use of a promo code for a booking"""
    return ledger.apply_promo_code(
        request.code, request.booking_id, request.amount, request.cabin, request.route
    )

@router.get("/discount/{code}/{amount}", response_model=DiscountQuote)
def get_discount_amount(
    code: str,
    amount: Decimal = Path(..., ge=0, description="Amount to discount"),
    ledger: PromotionLedger = Depends(get_ledger)
):
    return ledger.get_discount_amount(code, amount)

@router.get("/active", response_model=List[ActivePromo])
def get_active_promo_codes(ledger: PromotionLedger = Depends(get_ledger)):
    """Promo codes currently usable"""
    return ledger.get_active_promo_codes()

@router.post("", response_model=PromoCode, status_code=201)
def create_promo_code(
    request: PromoCreateRequest,
    ledger: PromotionLedger = Depends(get_ledger)
):
    return ledger.create_promo_code(request)

@router.post("/{code}/deactivate", response_model=PromoCode)
def deactivate_promo_code(
    code: str,
    ledger: PromotionLedger = Depends(get_ledger)
):
    return ledger.deactivate_promo_code(code)

@router.get("/{code}/stats", response_model=PromoUsageStats)
def get_promo_usage_stats(
    code: str,
    ledger: PromotionLedger = Depends(get_ledger)
):
    return ledger.get_promo_usage_stats(code)

# Gift Card Endpoints
@gift_card_router.post("", response_model=GiftCard, status_code=201)
def purchase_gift_card(
    request: GiftCardCreateRequest,
    ledger: PromotionLedger = Depends(get_ledger)
):
    """Issue a new gift card"""
    return ledger.generate_gift_card(
        request.amount, request.purchaser_email, request.recipient_email, request.message
    )

@gift_card_router.post("/validate", response_model=GiftCardSummary)
def validate_gift_card(
    request: GiftCardCodeRequest,
    ledger: PromotionLedger = Depends(get_ledger)
):
    return ledger.validate_gift_card(request.code)

@gift_card_router.get("/{code}/balance", response_model=GiftCardSummary)
def get_gift_card_balance(
    code: str,
    ledger: PromotionLedger = Depends(get_ledger)
):
    return ledger.get_gift_card_balance(code)

@gift_card_router.post("/apply", response_model=GiftCardApplication)
def apply_gift_card(
    request: GiftCardApplyRequest,
    ledger: PromotionLedger = Depends(get_ledger)
):
    """Deduct up to the requested amount from a gift card"""
    return ledger.apply_gift_card(request.code, request.booking_id, request.amount)
