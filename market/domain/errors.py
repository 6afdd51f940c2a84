# market/domain/errors.py
"""
Application error taxonomy.

Services raise these; the API layer renders them as the standard error
envelope ``{error, message, details, code, timestamp}``.
"""
from typing import Any


class AppError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"


class AuthorizationError(AppError):
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class UnavailableError(AppError):
    """Catalog item cannot be purchased. Callers pick 400 or 404."""

    status_code = 400
    code = "ITEM_UNAVAILABLE"


class PaymentFailedError(AppError):
    status_code = 402
    code = "PAYMENT_FAILED"


class InternalError(AppError):
    status_code = 500
    code = "INTERNAL_ERROR"


# cart / checkout specific

class AlreadyOwnedError(ConflictError):
    code = "ALREADY_OWNED"


class AlreadyInCartError(ConflictError):
    code = "ALREADY_IN_CART"


class EmptyCartError(ValidationError):
    code = "EMPTY_CART"


class ItemUnavailableError(UnavailableError):
    pass


class CheckoutInProgressError(ConflictError):
    code = "CHECKOUT_IN_PROGRESS"
