"""Client configuration.

``HubClientConfig`` holds everything a ``HubClient`` needs. Values can be
given directly or read from the environment with ``HubClientConfig.from_env``:

| Variable | Meaning | Default |
|----------|---------|---------|
| ``DOCKER_HUB_HOST`` | API host | ``hub.docker.com`` |
| ``DOCKER_USERNAME`` | Login username | (required without a provider) |
| ``DOCKER_PASSWORD`` | Password or access token | (required without a provider) |
| ``DOCKER_HUB_MAX_PAGE_RESULTS`` | Page budget, 0 = unlimited | ``50`` |
"""

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from hubclient_core.auth.credentials import SECRET_ENV_VAR, USERNAME_ENV_VAR, CredentialResolver
from hubclient_core.auth.exceptions import CredentialError
from hubclient_core.errors.exceptions import ConfigurationError
from hubclient_core.transport.retry import DEFAULT_RETRY_STATUS_CODES

if TYPE_CHECKING:
    from hubclient_core.auth.providers import TokenProvider

logger = logging.getLogger(__name__)

HOST_ENV_VAR = "DOCKER_HUB_HOST"
MAX_PAGE_RESULTS_ENV_VAR = "DOCKER_HUB_MAX_PAGE_RESULTS"

DEFAULT_HOST = "hub.docker.com"
DEFAULT_MAX_PAGE_RESULTS = 50
DEFAULT_TIMEOUT = 60.0

HOST_PATTERN = re.compile(r"^[a-zA-Z0-9:.-]+$")


def base_url_for_host(host: str) -> str:
    """Return the API base URL for a hub host.

    Raises:
        ConfigurationError: If the host is empty or not a bare host name.
    """
    if not host:
        raise ConfigurationError(f"Missing hub API host; set {HOST_ENV_VAR} or pass host=")
    if not HOST_PATTERN.match(host):
        raise ConfigurationError(f"{HOST_ENV_VAR} must be a valid host (of the form 'hub.docker.com'), got {host!r}")
    return f"https://{host}/v2"


@dataclass
class HubClientConfig:
    """Configuration for one ``HubClient``.

    Attributes:
        base_url: API base URL, e.g. ``https://hub.docker.com/v2``.
        token_provider: Source of bearer tokens.
        max_page_results: Page budget for paginated calls; 0 means unlimited.
        user_agent_product: Product part of the ``User-Agent`` header.
        user_agent_version: Version part of the ``User-Agent`` header.
        timeout: Overall deadline for one request attempt in seconds, covering
            connect, headers and the full body. Also the httpx socket timeout.
        max_retries: Retry attempts for transient failures.
        backoff_factor: Exponential backoff multiplier in seconds.
        max_backoff: Cap on a single backoff delay in seconds.
        retry_status_codes: 5xx codes treated as transient.
        transport: Innermost transport; None means real network I/O.
    """

    base_url: str
    token_provider: "TokenProvider"
    max_page_results: int = DEFAULT_MAX_PAGE_RESULTS
    user_agent_product: str = "hubclient-core"
    user_agent_version: str = "dev"
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = 4
    backoff_factor: float = 1.0
    max_backoff: float = 30.0
    retry_status_codes: frozenset[int] = field(default_factory=lambda: DEFAULT_RETRY_STATUS_CODES)
    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        self.base_url = self.base_url.rstrip("/")
        if self.max_page_results < 0:
            raise ConfigurationError(f"max_page_results must be >= 0, got {self.max_page_results}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout}")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        if not self.user_agent_version:
            self.user_agent_version = "dev"

    @property
    def user_agent(self) -> str:
        return f"{self.user_agent_product}/{self.user_agent_version}"

    @classmethod
    def from_env(
        cls,
        *,
        host: str | None = None,
        username: str | None = None,
        password: str | None = None,
        max_page_results: int | None = None,
        token_provider: "TokenProvider | None" = None,
        resolver: CredentialResolver | None = None,
        **overrides,
    ) -> "HubClientConfig":
        """Build a configuration from explicit values, the environment and .env.

        Explicit arguments win over environment variables. Without a
        ``token_provider`` a ``LoginTokenProvider`` is built from the
        resolved username and password.

        Raises:
            ConfigurationError: On an invalid host or page budget, or when
                credentials are missing and no provider was given.
        """
        from hubclient_core.auth.providers import LoginTokenProvider

        resolver = resolver or CredentialResolver()

        resolved_host = resolver.resolve(
            value=host, env_var_name=HOST_ENV_VAR, default=DEFAULT_HOST, mask_in_logs=False
        )
        base_url = base_url_for_host(resolved_host)

        if max_page_results is None:
            raw = resolver.resolve(
                env_var_name=MAX_PAGE_RESULTS_ENV_VAR,
                default=str(DEFAULT_MAX_PAGE_RESULTS),
                mask_in_logs=False,
            )
            try:
                max_page_results = int(raw)
            except ValueError:
                raise ConfigurationError(f"{MAX_PAGE_RESULTS_ENV_VAR} must be an integer, got {raw!r}") from None

        if token_provider is None:
            try:
                credentials = resolver.resolve_credentials(
                    username=username,
                    secret=password,
                    username_env=USERNAME_ENV_VAR,
                    secret_env=SECRET_ENV_VAR,
                )
            except CredentialError as e:
                raise ConfigurationError(f"Missing valid login credentials: {e}") from e
            token_provider = LoginTokenProvider(credentials, base_url)

        logger.debug(f"Creating hub client configuration for {base_url} (max_page_results={max_page_results})")
        return cls(
            base_url=base_url,
            token_provider=token_provider,
            max_page_results=max_page_results,
            **overrides,
        )
