"""Domain-level exceptions.

Every failure the engine can report is a subclass of DomainException so the
CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidQuantityError(ValidationError):
    """A quantity invariant would be violated (negative, reserved > on hand)."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """The requested quantity exceeds what is available."""


class InvalidOperationError(DomainException):
    """A state transition was attempted from a state that disallows it."""


class ConflictError(DomainException):
    """A concurrent write invalidated the operation between read and commit."""
