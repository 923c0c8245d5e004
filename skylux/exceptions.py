"""
Error kinds raised by the booking core.

Every service raises one of these instead of returning ad-hoc failure values.
The HTTP layer turns them into ``{"success": false, "error": ...}`` bodies.
"""

from typing import Any, Dict, List, Optional


class SkyluxError(Exception):
    """Base class for all booking-core failures"""

    error_type = "error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "error_type": self.error_type,
        }


class ValidationError(SkyluxError):
    """One or more input rules failed; ``errors`` holds every failing rule"""

    error_type = "validation_error"
    status_code = 400

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or ", ".join(self.errors))

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = self.errors
        return payload


class NotFound(SkyluxError):
    error_type = "not_found"
    status_code = 404


class SeatUnavailable(SkyluxError):
    error_type = "seat_unavailable"
    status_code = 409


class PromoInvalid(SkyluxError):
    error_type = "promo_invalid"
    status_code = 400


class GiftCardInvalid(SkyluxError):
    error_type = "gift_card_invalid"
    status_code = 400


class AlreadyCancelled(SkyluxError):
    error_type = "already_cancelled"
    status_code = 409


class InvalidStateTransition(SkyluxError):
    error_type = "invalid_state_transition"
    status_code = 409


class PNRGenerationError(SkyluxError):
    error_type = "pnr_generation_failed"
    status_code = 500


class DuplicatePNR(SkyluxError):
    error_type = "duplicate_pnr"
    status_code = 409
