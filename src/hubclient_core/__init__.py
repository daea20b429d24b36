"""hubclient-core - Authenticated HTTP client core for the Docker Hub API.

This library provides:
- Token providers: password login with cached JWTs, and access tokens read
  from a credential source
- An authenticating, retrying transport stack built on httpx
- A request executor with a structured error taxonomy
- Cursor-based pagination with a page budget
- Typed helpers for access token, repository and organization endpoints

Example:
    ```python
    from hubclient_core import HubClient, HubClientConfig

    # DOCKER_USERNAME / DOCKER_PASSWORD from the environment or .env
    config = HubClientConfig.from_env()

    with HubClient(config) as client:
        for repo in client.repositories.list("my-org"):
            print(repo.name, repo.pull_count)
    ```
"""

from hubclient_core.client import HubClient
from hubclient_core.config import HubClientConfig

__version__ = "0.1.0"

__all__ = ["HubClient", "HubClientConfig", "__version__"]
