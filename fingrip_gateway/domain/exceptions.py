"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Requested entity does not exist for this user"""

    pass


class InvalidPreferenceError(DomainException):
    """Unsupported language or currency code"""

    pass


class TinkError(DomainException):
    """Base error for Tink API interactions"""

    message = "Tink request failed"

    def __str__(self) -> str:
        detail = super().__str__()
        return f"{self.message}: {detail}" if detail else self.message


class TinkConfigurationError(TinkError):
    """Client id, secret or redirect URI missing"""

    message = "Invalid Tink configuration"


class TinkAuthenticationError(TinkError):
    """Authorization was denied or the access token is missing/expired"""

    message = "Failed to authenticate with Tink"


class TinkResponseError(TinkError):
    """Tink returned a payload we could not parse"""

    message = "Invalid response from Tink API"


class TinkNetworkError(TinkError):
    """Timeout or connection failure talking to Tink"""

    message = "Network error"


class TinkServerError(TinkError):
    """Tink returned a non-auth HTTP error status"""

    message = "Server error"


class AlreadyImplementedError(DomainException):
    """Saving opportunity was already implemented"""

    pass
