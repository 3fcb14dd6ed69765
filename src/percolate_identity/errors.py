"""Errors raised by identity providers.

Only transport and decoding failures are errors. A field missing from a
provider payload is never raised; it degrades to an empty value instead.
"""


class IdentityProviderError(Exception):
    """Base error for a failed authentication attempt."""

    error_code = "identity_provider_error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.error_code)
        self.detail = detail


class TokenExchangeError(IdentityProviderError):
    """Authorization code could not be exchanged for a token."""

    error_code = "token_exchange_failed"


class UserFetchError(IdentityProviderError):
    """User info endpoint was unreachable or answered with a non-2xx status."""

    error_code = "userinfo_fetch_failed"

    def __init__(self, detail: str = "", status_code: int | None = None):
        super().__init__(detail)
        self.status_code = status_code


class MalformedResponseError(IdentityProviderError):
    """User info payload is not a JSON object."""

    error_code = "malformed_response"


class UnknownProviderError(ValueError):
    """No provider is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Unsupported identity provider: {name}")
        self.name = name


class PathQueryError(ValueError):
    """Path query could not be parsed."""

    def __init__(self, query: str, reason: str):
        super().__init__(f"Invalid path query {query!r}: {reason}")
        self.query = query
        self.reason = reason
