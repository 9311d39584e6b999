"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BankAPIError(DomainException):
    """Bank API returned an error or is unavailable"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AccountNotFoundError(BankAPIError):
    """Bank API has no such account or customer"""

    pass


class InvalidEventDataError(DomainException):
    """Provider record cannot be mapped onto a cash-flow event"""

    pass
