class DomainError(Exception):
    """Base exception for business rule violations.

    ``kind`` is the machine-checkable code sent to API clients and
    ``status_code`` the HTTP status the error maps to.
    """

    kind = "domain_error"
    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class SchemaError(ValidationError):
    """Raised when tabular input lacks the required columns."""

    kind = "schema_error"


class NoPendingOTPError(ValidationError):
    kind = "no_pending_otp"


class OTPExpiredError(ValidationError):
    kind = "otp_expired"


class OTPMismatchError(ValidationError):
    kind = "otp_mismatch"


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    kind = "not_found"
    status_code = 404


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be violated."""

    kind = "conflict"
    status_code = 409


class DuplicateRegistrationError(ConflictError):
    kind = "duplicate_registration"


class RoleConflictError(ConflictError):
    """Raised when an email already belongs to an account with another role."""

    kind = "role_conflict"


class AuthenticationError(DomainError):
    """Raised when no valid session is presented."""

    kind = "unauthorized"
    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "forbidden"
    status_code = 403


class DeliveryFailedError(DomainError):
    """Raised when the OTP email could not be dispatched."""

    kind = "delivery_failed"
    status_code = 500


class InternalError(DomainError):
    kind = "internal_error"
    status_code = 500


class StoreUnavailableError(InternalError):
    """Raised when the database cannot be reached."""


class ConfigurationError(Exception):
    """Raised at startup when the selected settings cannot run the app."""
