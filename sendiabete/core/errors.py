"""
Service errors.

Business-rule failures are raised from the services layer and rendered by the
exception handlers in ``sendiabete.main`` as ``{"error": code, "message": ...}``.
Messages are safe to show to the caller.
"""


class ServiceError(Exception):
    code = "SERVICE_ERROR"
    status_code = 400
    message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


# --- authentication / authorization ---

class AuthRequired(ServiceError):
    code = "AUTH_REQUIRED"
    status_code = 401
    message = "Not authenticated"


class AuthFailure(ServiceError):
    # same message whether the identifier is unknown or the secret is wrong
    code = "AUTH_FAILED"
    status_code = 401
    message = "Invalid identifier or password"


class Forbidden(ServiceError):
    code = "FORBIDDEN"
    status_code = 403
    message = "Access denied"


# --- lookups / creation ---

class NotFound(ServiceError):
    code = "NOT_FOUND"
    status_code = 404
    message = "Not found"


class AccountMissing(NotFound):
    code = "ACCOUNT_MISSING"
    message = "Account not found"


class DuplicateId(ServiceError):
    code = "DUPLICATE_ID"
    status_code = 400
    message = "Account id already in use"


class InvalidPlan(ServiceError):
    code = "INVALID_PLAN"
    status_code = 400
    message = "Unknown license plan"


# --- upload workflow ---

class LicenseInactive(ServiceError):
    code = "LICENSE_INACTIVE"
    status_code = 402
    message = "License inactive"


class QuotaExhausted(ServiceError):
    code = "QUOTA_EXHAUSTED"
    status_code = 402
    message = "Photo quota exhausted"


class MissingImage(ServiceError):
    code = "MISSING_IMAGE"
    status_code = 400
    message = "Photo required"


class InvalidReading(ServiceError):
    code = "INVALID_READING"
    status_code = 400
    message = "Reading is not a valid number"


# --- unexpected ---

class InternalFailure(ServiceError):
    code = "INTERNAL_ERROR"
    status_code = 500
    message = "Internal server error"


class AnalysisUnavailable(InternalFailure):
    code = "ANALYSIS_UNAVAILABLE"
    status_code = 502
    message = "Image analysis unavailable"
