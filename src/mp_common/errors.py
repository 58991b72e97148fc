"""Unified error codes and custom exceptions.

Every rejected precondition surfaces as a distinct AppError subclass.
Categories:
  1xxx: Authorization (caller identity, seller approval)
  2xxx: Configuration (application not eligible, bad rates)
  3xxx: Listing validation / lookup
  4xxx: Settlement validation
  5xxx: External transfer (custody, value transfer)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class AuthorizationError(AppError):
    """Caller is not allowed to perform the operation."""


class ConfigError(AppError):
    """Application configuration forbids the operation."""


class InputValidationError(AppError):
    """Supplied amounts or payloads are invalid."""


class NotFoundError(AppError):
    """Referenced entity does not exist."""


class ExternalTransferError(AppError):
    """Custody or value-transfer collaborator rejected a transfer."""


# --- 1xxx: Authorization ---

class InvalidCredentialsError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


class SellerNotApprovedError(AuthorizationError):
    def __init__(self, application: str, seller: str) -> None:
        super().__init__(
            1002, f"Seller {seller} is not approved by application {application}", 403
        )


class InvalidSellerError(AuthorizationError):
    def __init__(self, seller: str) -> None:
        super().__init__(
            1003, f"Seller {seller} is neither the depositing operator nor the source", 403
        )


class NotListingSellerError(AuthorizationError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(1004, f"Caller is not the seller of listing {listing_id}", 403)


class NotApplicationError(AuthorizationError):
    def __init__(self, application: str) -> None:
        super().__init__(1005, f"Caller is not application {application}", 403)


class NotPlatformOperatorError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__(1006, "Platform operator required", 403)


# --- 2xxx: Configuration ---

class AppNotEligibleError(ConfigError):
    def __init__(self, application: str) -> None:
        super().__init__(2001, f"Application is not enabled or not active: {application}", 422)


class InvalidRateError(InputValidationError):
    def __init__(self, rate: int) -> None:
        super().__init__(2002, f"Rate must be between 0 and 255, got {rate}", 422)


# --- 3xxx: Listing ---

class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3001, f"Listing not found: {listing_id}", 404)


class AmountMustBePositiveError(InputValidationError):
    def __init__(self) -> None:
        super().__init__(3002, "Amount must be positive", 422)


class InsufficientStockError(InputValidationError):
    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            3003, f"Insufficient stock: requested {requested}, available {available}", 422
        )


class InvalidListingConfigError(InputValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(3004, f"Invalid listing config: {detail}", 422)


class InvalidAddressError(InputValidationError):
    def __init__(self, value: str) -> None:
        super().__init__(3005, f"Invalid address: {value}", 422)


class Uint256OutOfRangeError(InputValidationError):
    def __init__(self, value: int) -> None:
        super().__init__(3006, f"Value out of uint256 range: {value}", 422)


# --- 4xxx: Settlement ---

class InvalidValueError(InputValidationError):
    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            4001, f"Invalid payment value: expected {expected}, received {received}", 422
        )


class RoyaltyExceedsProceedsError(InputValidationError):
    def __init__(self, royalty: int, proceeds: int) -> None:
        super().__init__(
            4002, f"Royalty {royalty} exceeds sale proceeds {proceeds}", 422
        )


# --- 5xxx: External transfer ---

class CustodyTransferError(ExternalTransferError):
    def __init__(self, detail: str) -> None:
        super().__init__(5001, f"Custody transfer failed: {detail}", 502)


class PaymentTransferError(ExternalTransferError):
    def __init__(self, detail: str) -> None:
        super().__init__(5002, f"Value transfer failed: {detail}", 502)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
