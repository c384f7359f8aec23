"""
Domain-level exceptions for the talent search engine.

These exceptions represent business rule violations and classified
collaborator failures. They are mapped to HTTP responses in the API layer.
"""


class DomainException(Exception):
    """Base exception for all domain-level errors."""
    pass


class ValidationError(DomainException):
    """Raised when domain validation rules are violated."""
    pass


class InvalidInputError(ValidationError):
    """Raised for malformed filters or unusable provider input. Never retried."""
    pass


class NotFoundError(DomainException):
    """Base exception for entities not found."""
    pass


class PlayerNotFoundError(NotFoundError):
    """Raised when a player profile does not exist."""

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player not found: {player_id}")


class AuthorizationError(DomainException):
    """Base exception for identity and entitlement errors."""
    pass


class UnauthorizedError(AuthorizationError):
    """Raised when no authenticated principal is present."""
    pass


class ForbiddenError(AuthorizationError):
    """Raised when the principal's role does not allow the operation."""
    pass


class ProcessingError(DomainException):
    """Base exception for processing errors."""
    pass


class CollaboratorUnavailableError(ProcessingError):
    """Transient failure of an external collaborator; safe to retry or degrade."""

    retryable = True


class ProviderUnavailableError(CollaboratorUnavailableError):
    """Raised when the embedding or generation provider cannot be reached."""
    pass


class ProviderTimeoutError(CollaboratorUnavailableError):
    """Raised when a provider call exceeds its deadline."""
    pass


class IndexUnavailableError(CollaboratorUnavailableError):
    """Raised when the vector index cannot answer a similarity query."""
    pass


class EntitlementUnavailableError(CollaboratorUnavailableError):
    """Raised when the entitlement check cannot be completed."""
    pass


class AnalysisUnavailableError(ProcessingError):
    """Raised when a player analysis could not be generated. Nothing is cached."""
    pass


class SearchFailedError(ProcessingError):
    """Raised when a mandatory search stage fails. No partial results are returned."""
    pass


class PersistenceError(ProcessingError):
    """Raised when the relational store rejects or fails an operation."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration is invalid or missing."""
    pass


__all__ = [
    "DomainException",
    "ValidationError",
    "InvalidInputError",
    "NotFoundError",
    "PlayerNotFoundError",
    "AuthorizationError",
    "UnauthorizedError",
    "ForbiddenError",
    "ProcessingError",
    "CollaboratorUnavailableError",
    "ProviderUnavailableError",
    "ProviderTimeoutError",
    "IndexUnavailableError",
    "EntitlementUnavailableError",
    "AnalysisUnavailableError",
    "SearchFailedError",
    "PersistenceError",
    "ConfigurationError",
]
