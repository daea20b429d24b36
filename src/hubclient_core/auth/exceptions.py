"""Custom exceptions for credentials and bearer tokens.

Example:
    ```python
    from hubclient_core.auth.exceptions import TokenError, TokenErrorKind

    try:
        token = provider.ensure_token()
    except TokenError as e:
        if e.kind is TokenErrorKind.SOURCE_UNAVAILABLE:
            ...  # the credential store may come back; the caller may retry
    ```
"""

from enum import Enum

from hubclient_core.errors.exceptions import HubClientError


class CredentialError(HubClientError):
    """Base exception for credential-related errors.

    Raised for missing or empty usernames and secrets. These are fatal to
    the calling operation and never retried.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass


class TokenErrorKind(Enum):
    """Why a token provider could not produce a token."""

    NO_EXPIRY = "no_expiry"
    SOURCE_UNAVAILABLE = "source_unavailable"


class TokenError(HubClientError):
    """Raised when a token provider cannot produce a usable bearer token.

    ``NO_EXPIRY`` means the server handed out a token whose lifetime cannot
    be read, so it cannot be cached. ``SOURCE_UNAVAILABLE`` means the
    credential source could not produce a token right now.

    Attributes:
        kind: The TokenErrorKind of the failure.
    """

    def __init__(self, message: str, kind: TokenErrorKind):
        super().__init__(message)
        self.kind = kind
