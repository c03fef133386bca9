"""Domain errors raised by services and translated to HTTP responses by routers"""


class ServiceError(ValueError):
    """Base class for expected, caller-facing failures"""
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """Duplicate slug/name, or an operation not allowed in the current state"""
    status_code = 409


class ConfigurationError(ServiceError):
    """Email or payment integration is missing or disabled"""
    status_code = 400


class IntegrationError(ServiceError):
    """A downstream provider (email, payment gateway) rejected or failed the call"""
    status_code = 502
