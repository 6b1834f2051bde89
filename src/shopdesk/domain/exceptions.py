"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Tax-rate rule violations additionally carry a stable ``code``.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    code = "invalid"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class EmptyCountryError(ValidationError):
    code = "empty-country"

    def __init__(self) -> None:
        super().__init__("Please select a country")


class NegativeAmountError(ValidationError):
    code = "negative-amount"

    def __init__(self) -> None:
        super().__init__("Please enter a tax rate greater than 0")


class DuplicateRateError(ValidationError):
    """An active rate already covers the same scope."""

    code = "duplicate-rate"

    def __init__(self, scope: str) -> None:
        super().__init__(f'Duplicate tax rates are not allowed for "{scope}"')
        self.scope = scope


class ConfirmationRequired(DomainException):
    """The operation is legal but needs the caller to confirm it first."""

    code = "zero-amount-rate"


class SyncError(DomainException):
    """The remote collaborator failed; local state was left untouched."""
