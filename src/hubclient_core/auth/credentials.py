"""Credentials and credential sources for hub clients.

A credential source hands out a ``Credentials(username, secret)`` pair for a
registry key (for example ``"hub.docker.com"``). The secret is a password,
an identity token, or an access token. Parsing real credential stores is left
to callers; this module provides the sources most deployments need:

- ``EnvCredentialSource``: username/secret from environment variables or a
  .env file (python-dotenv), resolved through ``CredentialResolver``
- ``TokenFileCredentialSource``: an access token re-read from a file on every
  call, so external rotation is picked up immediately
- ``StaticCredentialSource``: an in-memory mapping of registry key to
  credentials

Resolution order for ``CredentialResolver.resolve`` (highest to lowest):
1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv)
4. Default value

Example:
    ```python
    from hubclient_core.auth import EnvCredentialSource

    source = EnvCredentialSource()
    creds = source.get_credentials("hub.docker.com")
    ```

Security Considerations:
    - Secrets are never logged (masked with ***) and never shown in repr()
    - Only source information is logged (env var name, file path, etc.)
    - File-based secrets have whitespace stripped
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Protocol

from dotenv import load_dotenv

from hubclient_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)

logger = logging.getLogger(__name__)

USERNAME_ENV_VAR = "DOCKER_USERNAME"
SECRET_ENV_VAR = "DOCKER_PASSWORD"


@dataclass(frozen=True)
class Credentials:
    """A username and its secret (password, identity token or access token).

    Raises:
        CredentialError: If either field is empty.
    """

    username: str
    secret: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.username:
            raise CredentialError("empty username found in store")
        if not self.secret:
            raise CredentialError("empty password found in store")


class CredentialSource(Protocol):
    """Anything that can produce credentials for a registry key."""

    def get_credentials(self, registry_key: str) -> Credentials:
        """Return credentials for ``registry_key``.

        Raises:
            CredentialError: If no usable credentials exist for the key.
        """
        ...


class CredentialResolver:
    """Resolve single credential values from multiple sources.

    Explicit values take precedence over environment variables, which take
    precedence over .env file values, which take precedence over defaults.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize credential resolver.

        Args:
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories.
            load_dotenv: Whether to load the .env file at all.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                # A missing or unreadable .env is not fatal; env vars still work
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def _mask_credential(self, value: str | None) -> str:
        """Mask a credential value for safe logging."""
        if value is None:
            return "None"
        return "***"

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a credential from multiple sources.

        Empty strings in the environment count as unset, so an exported but
        blank ``DOCKER_PASSWORD`` falls through to the default.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable name to check.
            default: Default value if not found elsewhere.
            required: Raise CredentialNotFoundError when nothing resolves.
            mask_in_logs: Mask the value in log messages.

        Returns:
            Resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required=True and nothing resolves.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and os.environ.get(env_var_name):
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = self._mask_credential(result) if mask_in_logs else result
            logger.debug(f"Resolved credential from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file.

        Supports ``~`` and ``$VAR`` expansion; the path may also come from
        an environment variable. Contents are stripped of whitespace.

        Raises:
            CredentialFileError: If required=True and the file cannot be read.
        """
        path_to_use = None

        if file_path is not None:
            path_to_use = str(file_path)
        elif env_var_name:
            path_to_use = self.resolve(env_var_name=env_var_name, mask_in_logs=False)

        if path_to_use is None:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
            logger.debug(f"Resolved credential from file: {path_obj} (***)")
            return content

        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None

        except PermissionError:
            error_msg = f"Permission denied reading credential file: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.warning(error_msg)
            return None

        except OSError as e:
            error_msg = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(error_msg) from e
            logger.warning(error_msg)
            return None

    def resolve_credentials(
        self,
        *,
        username: str | None = None,
        secret: str | None = None,
        username_env: str = USERNAME_ENV_VAR,
        secret_env: str = SECRET_ENV_VAR,
    ) -> Credentials:
        """Resolve a full username/secret pair.

        Raises:
            CredentialNotFoundError: If either half cannot be resolved.
        """
        resolved_username = self.resolve(
            value=username, env_var_name=username_env, required=True, mask_in_logs=False
        )
        resolved_secret = self.resolve(value=secret, env_var_name=secret_env, required=True)
        return Credentials(username=resolved_username, secret=resolved_secret)


class EnvCredentialSource:
    """Credentials from environment variables (or a .env file).

    The same variables are used for every registry key.
    """

    def __init__(
        self,
        resolver: CredentialResolver | None = None,
        *,
        username_env: str = USERNAME_ENV_VAR,
        secret_env: str = SECRET_ENV_VAR,
    ):
        self._resolver = resolver or CredentialResolver()
        self._username_env = username_env
        self._secret_env = secret_env

    def get_credentials(self, registry_key: str) -> Credentials:
        logger.debug(f"Reading credentials for {registry_key} from environment")
        return self._resolver.resolve_credentials(
            username_env=self._username_env, secret_env=self._secret_env
        )


class TokenFileCredentialSource:
    """An access token kept in a file, re-read on every call.

    Args:
        username: Account the token belongs to (used for display).
        file_path: Path to the token file; ``~`` and ``$VAR`` are expanded.
        resolver: Resolver used to read the file.
    """

    def __init__(
        self,
        username: str,
        file_path: str | Path,
        resolver: CredentialResolver | None = None,
    ):
        self._username = username
        self._file_path = file_path
        self._resolver = resolver or CredentialResolver(load_dotenv=False)

    def get_credentials(self, registry_key: str) -> Credentials:
        token = self._resolver.resolve_from_file(file_path=self._file_path, required=True)
        return Credentials(username=self._username, secret=token)


class StaticCredentialSource:
    """In-memory credentials keyed by registry key."""

    def __init__(self, credentials: Mapping[str, Credentials]):
        self._credentials = dict(credentials)

    def get_credentials(self, registry_key: str) -> Credentials:
        try:
            return self._credentials[registry_key]
        except KeyError:
            raise CredentialNotFoundError(f"no credentials stored for {registry_key}") from None
