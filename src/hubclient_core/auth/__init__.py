"""Authentication components for hub clients.

This package provides:
- Credentials and credential sources (env/.env, token file, in-memory)
- Unverified JWT claim decoding for token expiry
- Token providers: password login with caching, and access tokens read
  fresh from a source

Example:
    ```python
    from hubclient_core.auth import CredentialResolver, LoginTokenProvider

    creds = CredentialResolver().resolve_credentials()
    provider = LoginTokenProvider(creds, base_url="https://hub.docker.com/v2")
    ```
"""

from hubclient_core.auth.claims import TokenClaims, decode_claims, is_jwt_acceptable, token_expiry
from hubclient_core.auth.credentials import (
    CredentialResolver,
    Credentials,
    CredentialSource,
    EnvCredentialSource,
    StaticCredentialSource,
    TokenFileCredentialSource,
)
from hubclient_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    TokenError,
    TokenErrorKind,
)
from hubclient_core.auth.providers import (
    AccessTokenProvider,
    CachedToken,
    LoginTokenProvider,
    TokenProvider,
    access_token_provider_from_source,
    login_provider_from_source,
)

__all__ = [
    "AccessTokenProvider",
    "CachedToken",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "CredentialSource",
    "Credentials",
    "EnvCredentialSource",
    "LoginTokenProvider",
    "StaticCredentialSource",
    "TokenClaims",
    "TokenError",
    "TokenErrorKind",
    "TokenFileCredentialSource",
    "TokenProvider",
    "access_token_provider_from_source",
    "decode_claims",
    "is_jwt_acceptable",
    "login_provider_from_source",
    "token_expiry",
]
