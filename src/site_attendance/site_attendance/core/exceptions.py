class DomainError(Exception):
    """Base class for attendance rule violations surfaced to the caller."""


class ValidationError(DomainError):
    """Bad input or a rule breach: unknown site QR, second WFH session, reviewed request."""


class InvalidInput(ValidationError):
    """Malformed date, timestamp or month handed to the classifier or parsers."""


class AuthenticationError(DomainError):
    """Wrong username/password or inactive account."""


class AuthorizationError(DomainError):
    """The signed-in role may not perform the action."""


class DataFetchError(DomainError):
    """Records could not be read from MySQL, even after retries."""
