from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Literal
from datetime import datetime
from decimal import Decimal
from enum import Enum

class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

class PromoCode(BaseModel):
    """Discount rule with eligibility and usage limits"""
    code: str
    type: DiscountType
    value: Decimal
    min_amount: Decimal = Decimal("0")
    max_discount: Decimal
    description: str
    valid_from: datetime
    valid_until: datetime
    usage_limit: int = 1000
    used_count: int = 0
    is_active: bool = True
    applicable_classes: List[str] = Field(default_factory=lambda: ["all"])
    applicable_routes: List[str] = Field(default_factory=lambda: ["all"])
    created_at: datetime = Field(default_factory=datetime.now)
    deactivated_at: Optional[datetime] = None

class PromoSummary(BaseModel):
    """Public view of a valid promo code"""
    code: str
    type: DiscountType
    value: Decimal
    description: str
    min_amount: Decimal
    max_discount: Decimal

class PromoUsage(BaseModel):
    code: str
    booking_id: str
    discount: Decimal
    applied_at: datetime
    original_amount: Decimal
    final_amount: Decimal

class PromoDetails(BaseModel):
    code: str
    description: str
    type: DiscountType
    value: Decimal
    applied_discount: Decimal

class PromoApplication(BaseModel):
    """Outcome of consuming a promo code for a booking"""
    discount: Decimal
    promo_details: PromoDetails
    usage: PromoUsage

class DiscountQuote(BaseModel):
    discount: Decimal
    promo_details: PromoSummary

class PromoExpiry(BaseModel):
    code: str
    is_expired: bool
    is_not_yet_valid: bool
    valid_from: datetime
    valid_until: datetime
    days_until_expiry: int

class PromoUsageStats(BaseModel):
    code: str
    description: str
    used_count: int
    usage_limit: int
    remaining_uses: int
    usage_percentage: float
    is_active: bool
    valid_from: datetime
    valid_until: datetime

class ActivePromo(BaseModel):
    code: str
    description: str
    type: DiscountType
    value: Decimal
    min_amount: Decimal
    max_discount: Decimal
    valid_until: datetime
    remaining_uses: int

class GiftCardUsage(BaseModel):
    booking_id: str
    amount_used: Decimal
    used_at: datetime
    remaining_balance: Decimal
    refund: bool = False

class GiftCard(BaseModel):
    """Prepaid balance; ``current_balance`` only goes down except on compensation"""
    code: str
    original_amount: Decimal
    current_balance: Decimal
    purchaser_email: str
    recipient_email: str
    message: str = ""
    is_active: bool = True
    purchase_date: datetime
    expiry_date: datetime
    usage_history: List[GiftCardUsage] = Field(default_factory=list)

class GiftCardSummary(BaseModel):
    code: str
    current_balance: Decimal
    original_amount: Decimal
    expiry_date: datetime
    recipient_email: Optional[str] = None

class GiftCardApplication(BaseModel):
    code: str
    amount_applied: Decimal
    remaining_balance: Decimal
    usage: GiftCardUsage

# Request Models
class PromoValidationRequest(BaseModel):
    code: str
    amount: Optional[Decimal] = None
    cabin: Optional[str] = None
    route: Optional[str] = None

class PromoApplyRequest(BaseModel):
    code: str
    booking_id: str
    amount: Decimal
    cabin: Optional[str] = None
    route: Optional[str] = None

class PromoCreateRequest(BaseModel):
    """Request to create a promo code"""
    code: str
    type: DiscountType
    value: Decimal
    description: str
    valid_from: datetime
    valid_until: datetime
    min_amount: Decimal = Decimal("0")
    max_discount: Optional[Decimal] = None
    usage_limit: int = 1000
    applicable_classes: List[str] = Field(default_factory=lambda: ["all"])
    applicable_routes: List[str] = Field(default_factory=lambda: ["all"])

class GiftCardCreateRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    purchaser_email: str
    recipient_email: Optional[str] = None
    message: str = ""

class GiftCardCodeRequest(BaseModel):
    code: str

class GiftCardApplyRequest(BaseModel):
    code: str
    booking_id: str
    amount: Decimal = Field(..., gt=0)
