import logging
import math
import secrets
import string
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, List, Optional

from skylux.exceptions import GiftCardInvalid, NotFound, PromoInvalid, ValidationError
from skylux.locks import KeyedLocks
from skylux.promotions.schemas import (
    ActivePromo, DiscountQuote, DiscountType, GiftCard, GiftCardApplication, GiftCardSummary,
    GiftCardUsage, PromoApplication, PromoCode, PromoCreateRequest, PromoDetails, PromoExpiry,
    PromoSummary, PromoUsage, PromoUsageStats
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
CODE_ALPHABET = string.ascii_uppercase + string.digits
GIFT_CARD_VALIDITY_DAYS = 365
GIFT_CARD_CODE_ATTEMPTS = 20

DEFAULT_PROMO_CODES = [
    {
        "code": "WELCOME10",
        "type": DiscountType.PERCENTAGE,
        "value": Decimal("10"),
        "min_amount": Decimal("100"),
        "max_discount": Decimal("200"),
        "description": "Welcome 10% off",
        "usage_limit": 1000,
        "applicable_classes": ["economy", "premium", "business", "first"],
    },
    {
        "code": "SAVE50",
        "type": DiscountType.FIXED,
        "value": Decimal("50"),
        "min_amount": Decimal("200"),
        "max_discount": Decimal("50"),
        "description": "Save $50",
        "usage_limit": 500,
        "applicable_classes": ["economy", "premium"],
    },
    {
        "code": "LUXURY20",
        "type": DiscountType.PERCENTAGE,
        "value": Decimal("20"),
        "min_amount": Decimal("1000"),
        "max_discount": Decimal("500"),
        "description": "Luxury 20% off",
        "usage_limit": 100,
        "applicable_classes": ["business", "first"],
    },
    {
        "code": "FIRSTCLASS",
        "type": DiscountType.PERCENTAGE,
        "value": Decimal("15"),
        "min_amount": Decimal("2000"),
        "max_discount": Decimal("1000"),
        "description": "First Class 15% off",
        "usage_limit": 50,
        "applicable_classes": ["first"],
    },
]

def round_currency(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)

class PromotionLedger:
    """
    Promo codes and gift cards with their consumption history.

    Codes are stored upper-cased and looked up case-insensitively. Usage counts
    and balances change only under the lock of the code concerned.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        seed_defaults: bool = True,
        locks: Optional[KeyedLocks] = None
    ):
        self.clock = clock
        self.locks = locks or KeyedLocks()
        self._promo_codes: Dict[str, PromoCode] = {}
        self._gift_cards: Dict[str, GiftCard] = {}
        self._usage_history: Dict[str, List[PromoUsage]] = {}

        if seed_defaults:
            self._seed_promo_codes()

    def _seed_promo_codes(self):
        now = self.clock()
        for data in DEFAULT_PROMO_CODES:
            promo = PromoCode(
                valid_from=datetime(2024, 1, 1),
                valid_until=now + timedelta(days=365),
                applicable_routes=["all"],
                **data
            )
            self._promo_codes[promo.code] = promo

    # ================================
    # Promo codes
    # ================================

    def get_promo_code(self, code: str) -> PromoCode:
        promo = self._promo_codes.get((code or "").upper())
        if not promo:
            raise NotFound("Promo code not found")
        return promo

    def validate_promo_code(
        self,
        code: str,
        amount: Optional[Decimal] = None,
        cabin: Optional[str] = None,
        route: Optional[str] = None
    ) -> PromoSummary:
        """Run the eligibility checks in order; the first failure raises PromoInvalid"""
        promo = self._promo_codes.get((code or "").upper())
        if not promo:
            raise PromoInvalid("Invalid promo code")

        if not promo.is_active:
            raise PromoInvalid("Promo code is not active")

        now = self.clock()
        if now < promo.valid_from or now > promo.valid_until:
            raise PromoInvalid("Promo code has expired or is not yet valid")

        if promo.used_count >= promo.usage_limit:
            raise PromoInvalid("Promo code usage limit exceeded")

        if amount is not None and Decimal(amount) < promo.min_amount:
            raise PromoInvalid(f"Minimum amount of ${promo.min_amount} required for this promo code")

        cabin_key = getattr(cabin, "value", cabin)
        if cabin_key and "all" not in promo.applicable_classes and cabin_key not in promo.applicable_classes:
            raise PromoInvalid(f"Promo code not applicable for {cabin_key} class")

        if route and "all" not in promo.applicable_routes and route not in promo.applicable_routes:
            raise PromoInvalid("Promo code not applicable for this route")

        return PromoSummary(
            code=promo.code,
            type=promo.type,
            value=promo.value,
            description=promo.description,
            min_amount=promo.min_amount,
            max_discount=promo.max_discount
        )

    @staticmethod
    def compute_discount(promo: PromoSummary, amount: Decimal) -> Decimal:
        """Discount capped by ``max_discount`` and by the amount itself, rounded to cents"""
        amount = Decimal(amount)
        if promo.type == DiscountType.PERCENTAGE:
            discount = min(amount * promo.value / Decimal("100"), promo.max_discount)
        else:
            discount = min(promo.value, promo.max_discount)

        discount = max(Decimal("0"), min(discount, amount))
        return round_currency(discount)

    def get_discount_amount(
        self,
        code: str,
        amount: Decimal,
        cabin: Optional[str] = None,
        route: Optional[str] = None
    ) -> DiscountQuote:
        """Quote a discount without consuming a use"""
        promo = self.validate_promo_code(code, amount, cabin, route)
        return DiscountQuote(discount=self.compute_discount(promo, amount), promo_details=promo)

    def apply_promo_code(
        self,
        code: str,
        booking_id: str,
        amount: Decimal,
        cabin: Optional[str] = None,
        route: Optional[str] = None
    ) -> PromoApplication:
        """Validate, compute the discount and record one use as a single step"""
        code_key = (code or "").upper()
        amount = Decimal(amount)

        with self.locks(code_key):
            promo_summary = self.validate_promo_code(code_key, amount, cabin, route)
            discount = self.compute_discount(promo_summary, amount)

            usage = PromoUsage(
                code=promo_summary.code,
                booking_id=booking_id,
                discount=discount,
                applied_at=self.clock(),
                original_amount=amount,
                final_amount=amount - discount
            )
            self._usage_history.setdefault(booking_id, []).append(usage)
            self._promo_codes[code_key].used_count += 1

        logger.info("Promo %s applied to booking %s: -%s", code_key, booking_id, discount)

        return PromoApplication(
            discount=discount,
            promo_details=PromoDetails(
                code=promo_summary.code,
                description=promo_summary.description,
                type=promo_summary.type,
                value=promo_summary.value,
                applied_discount=discount
            ),
            usage=usage
        )

    def revoke_promo_usage(self, code: str, booking_id: str) -> bool:
        """Undo the latest use of ``code`` by a booking"""
        code_key = (code or "").upper()

        with self.locks(code_key):
            history = self._usage_history.get(booking_id, [])
            for index in range(len(history) - 1, -1, -1):
                if history[index].code == code_key:
                    history.pop(index)
                    promo = self._promo_codes.get(code_key)
                    if promo and promo.used_count > 0:
                        promo.used_count -= 1
                    logger.warning("Promo %s use revoked for booking %s", code_key, booking_id)
                    return True
        return False

    def check_promo_expiry(self, code: str) -> PromoExpiry:
        promo = self.get_promo_code(code)
        now = self.clock()
        is_expired = now > promo.valid_until
        days_left = 0 if is_expired else math.ceil((promo.valid_until - now).total_seconds() / 86400)

        return PromoExpiry(
            code=promo.code,
            is_expired=is_expired,
            is_not_yet_valid=now < promo.valid_from,
            valid_from=promo.valid_from,
            valid_until=promo.valid_until,
            days_until_expiry=days_left
        )

    def create_promo_code(self, request: PromoCreateRequest) -> PromoCode:
        errors = []
        if not request.code or not request.code.strip():
            errors.append("Promo code is required")
        if request.value <= 0:
            errors.append("Discount value must be positive")
        if not request.description:
            errors.append("Description is required")
        if request.valid_until <= request.valid_from:
            errors.append("Valid until must be after valid from")
        if request.usage_limit < 1:
            errors.append("Usage limit must be at least 1")
        if errors:
            raise ValidationError(errors)

        code_key = request.code.strip().upper()
        with self.locks(code_key):
            if code_key in self._promo_codes:
                raise ValidationError(["Promo code already exists"])

            max_discount = request.max_discount
            if max_discount is None:
                max_discount = request.value if request.type == DiscountType.FIXED else request.value * 10

            promo = PromoCode(
                code=code_key,
                type=request.type,
                value=request.value,
                min_amount=request.min_amount,
                max_discount=max_discount,
                description=request.description,
                valid_from=request.valid_from,
                valid_until=request.valid_until,
                usage_limit=request.usage_limit,
                applicable_classes=request.applicable_classes,
                applicable_routes=request.applicable_routes,
                created_at=self.clock()
            )
            self._promo_codes[code_key] = promo

        logger.info("Promo code %s created", code_key)
        return promo

    def deactivate_promo_code(self, code: str) -> PromoCode:
        """One-way switch; codes are never deleted"""
        promo = self.get_promo_code(code)
        with self.locks(promo.code):
            promo.is_active = False
            promo.deactivated_at = self.clock()
        logger.info("Promo code %s deactivated", promo.code)
        return promo

    def get_promo_usage_stats(self, code: str) -> PromoUsageStats:
        promo = self.get_promo_code(code)
        return PromoUsageStats(
            code=promo.code,
            description=promo.description,
            used_count=promo.used_count,
            usage_limit=promo.usage_limit,
            remaining_uses=promo.usage_limit - promo.used_count,
            usage_percentage=(promo.used_count / promo.usage_limit) * 100,
            is_active=promo.is_active,
            valid_from=promo.valid_from,
            valid_until=promo.valid_until
        )

    def get_active_promo_codes(self) -> List[ActivePromo]:
        now = self.clock()
        return [
            ActivePromo(
                code=promo.code,
                description=promo.description,
                type=promo.type,
                value=promo.value,
                min_amount=promo.min_amount,
                max_discount=promo.max_discount,
                valid_until=promo.valid_until,
                remaining_uses=promo.usage_limit - promo.used_count
            )
            for promo in self._promo_codes.values()
            if promo.is_active
            and promo.valid_from <= now <= promo.valid_until
            and promo.used_count < promo.usage_limit
        ]

    def get_usage_history(self, booking_id: str) -> List[PromoUsage]:
        return list(self._usage_history.get(booking_id, []))

    # ================================
    # Gift cards
    # ================================

    def _generate_gift_card_code(self) -> str:
        for _ in range(GIFT_CARD_CODE_ATTEMPTS):
            code = "GC" + "".join(secrets.choice(CODE_ALPHABET) for _ in range(12))
            if code not in self._gift_cards:
                return code
        raise ValidationError(["Could not generate a unique gift card code"])

    def generate_gift_card(
        self,
        amount: Decimal,
        purchaser_email: str,
        recipient_email: Optional[str] = None,
        message: str = ""
    ) -> GiftCard:
        amount = Decimal(amount)
        if amount <= 0:
            raise ValidationError(["Gift card amount must be positive"])

        now = self.clock()
        gift_card = GiftCard(
            code=self._generate_gift_card_code(),
            original_amount=amount,
            current_balance=amount,
            purchaser_email=purchaser_email,
            recipient_email=recipient_email or purchaser_email,
            message=message,
            purchase_date=now,
            expiry_date=now + timedelta(days=GIFT_CARD_VALIDITY_DAYS)
        )
        self._gift_cards[gift_card.code] = gift_card

        logger.info("Gift card %s issued for %s", gift_card.code, amount)
        return gift_card

    def validate_gift_card(self, code: str) -> GiftCardSummary:
        gift_card = self._gift_cards.get((code or "").upper())
        if not gift_card:
            raise NotFound("Invalid gift card code")

        if not gift_card.is_active:
            raise GiftCardInvalid("Gift card is not active")

        if self.clock() > gift_card.expiry_date:
            raise GiftCardInvalid("Gift card has expired")

        if gift_card.current_balance <= 0:
            raise GiftCardInvalid("Gift card has no remaining balance")

        return GiftCardSummary(
            code=gift_card.code,
            current_balance=gift_card.current_balance,
            original_amount=gift_card.original_amount,
            expiry_date=gift_card.expiry_date,
            recipient_email=gift_card.recipient_email
        )

    def apply_gift_card(self, code: str, booking_id: str, amount: Decimal) -> GiftCardApplication:
        """
        Deduct up to ``amount`` from the card.

        The applied amount is ``min(amount, balance)``; the caller pays any
        remainder another way.
        """
        code_key = (code or "").upper()
        amount = Decimal(amount)
        if amount <= 0:
            raise ValidationError(["Gift card amount must be positive"])

        with self.locks(code_key):
            self.validate_gift_card(code_key)
            gift_card = self._gift_cards[code_key]

            amount_to_use = min(amount, gift_card.current_balance)
            gift_card.current_balance -= amount_to_use

            usage = GiftCardUsage(
                booking_id=booking_id,
                amount_used=amount_to_use,
                used_at=self.clock(),
                remaining_balance=gift_card.current_balance
            )
            gift_card.usage_history.append(usage)

        logger.info("Gift card %s charged %s for booking %s", code_key, amount_to_use, booking_id)

        return GiftCardApplication(
            code=code_key,
            amount_applied=amount_to_use,
            remaining_balance=gift_card.current_balance,
            usage=usage
        )

    def refund_gift_card(self, code: str, booking_id: str, amount: Decimal) -> GiftCard:
        """Put an amount back on a card, never above its original value"""
        if Decimal(amount) <= 0:
            raise ValidationError(["Refund amount must be positive"])

        code_key = (code or "").upper()
        gift_card = self._gift_cards.get(code_key)
        if not gift_card:
            raise NotFound("Invalid gift card code")

        with self.locks(code_key):
            gift_card.current_balance = min(
                gift_card.original_amount, gift_card.current_balance + Decimal(amount)
            )
            gift_card.usage_history.append(GiftCardUsage(
                booking_id=booking_id,
                amount_used=Decimal(amount),
                used_at=self.clock(),
                remaining_balance=gift_card.current_balance,
                refund=True
            ))

        logger.warning("Gift card %s refunded %s for booking %s", code_key, amount, booking_id)
        return gift_card

    def get_gift_card_balance(self, code: str) -> GiftCardSummary:
        return self.validate_gift_card(code)

    def get_gift_card(self, code: str) -> GiftCard:
        gift_card = self._gift_cards.get((code or "").upper())
        if not gift_card:
            raise NotFound("Invalid gift card code")
        return gift_card
