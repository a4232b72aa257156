"""Service layer — business logic orchestration."""


class ServiceError(Exception):
    """Base service exception."""


class NotFoundError(ServiceError):
    """Resource not found."""


class AuthenticationError(ServiceError):
    """Authentication failure."""


class MissingCredentialError(AuthenticationError):
    """No GitHub credential was supplied; the caller must authenticate and retry."""
