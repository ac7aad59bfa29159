"""Credential objects produced by Application Default Credentials resolution.

Each class describes *how* a client authenticates; none of them acquires a
token on construction. Tokens come from a `TokenSource`, the pluggable
collaborator that implements the OAuth refresh, JWT signing or metadata
fetch protocol for a given credential kind.

Every credential is an `httpx.Auth`, so it can be handed straight to an
httpx client:

Example:
    ```python
    import httpx

    from adc_client_core.auth import create_compute_engine_credentials

    credentials = create_compute_engine_credentials(token_source=my_token_source)

    with httpx.Client(auth=credentials) as client:
        response = client.get("https://storage.googleapis.com/storage/v1/b")
    ```
"""

import logging
from collections.abc import Generator, Iterable
from typing import Protocol

import httpx

from adc_client_core.auth.exceptions import CredentialError
from adc_client_core.auth.settings import (
    CLOUD_PLATFORM_SCOPE,
    DEFAULT_AUTH_URI,
    DEFAULT_SERVICE_ACCOUNT_EMAIL,
    DEFAULT_TOKEN_URI,
)

logger = logging.getLogger(__name__)


class TokenSource(Protocol):
    """Produces access tokens for a credential object."""

    def fetch_token(self, credentials: "Credentials") -> str: ...


class Credentials(httpx.Auth):
    """Base class for all credential objects.

    Subclasses only describe their parameters; the token itself is requested
    from `token_source` every time a header is needed.
    """

    def __init__(self, token_source: TokenSource | None = None):
        self.token_source = token_source

    def authorization_header(self) -> str | None:
        """Return the value for the Authorization header.

        Raises:
            CredentialError: If no token source has been configured.
        """
        if self.token_source is None:
            raise CredentialError(f"No token source configured for {type(self).__name__}")
        return f"Bearer {self.token_source.fetch_token(self)}"

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        header = self.authorization_header()
        if header is not None:
            request.headers["Authorization"] = header
        yield request


class AnonymousCredentials(Credentials):
    """Credentials that send no Authorization header at all."""

    def authorization_header(self) -> str | None:
        return None

    def __repr__(self) -> str:
        return "AnonymousCredentials()"


class AuthorizedUserCredentials(Credentials):
    """An end user's OAuth grant, refreshed with a long-lived refresh token.

    Attributes:
        client_id: OAuth client id of the application that obtained the grant.
        client_secret: OAuth client secret.
        refresh_token: Refresh token for the user's grant.
        token_uri: Endpoint where the refresh token is exchanged.
        quota_project_id: Project billed for quota, if set in the file.
    """

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        token_uri: str = DEFAULT_TOKEN_URI,
        quota_project_id: str | None = None,
        token_source: TokenSource | None = None,
    ):
        super().__init__(token_source)
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.token_uri = token_uri
        self.quota_project_id = quota_project_id

    def __repr__(self) -> str:
        # Secrets stay out of reprs.
        return f"AuthorizedUserCredentials(client_id={self.client_id!r}, token_uri={self.token_uri!r})"


class ServiceAccountCredentials(Credentials):
    """A non-human principal authenticated with assertions signed by its private key.

    Attributes:
        client_email: The service account's email address.
        private_key: PEM-encoded private key; never verified here.
        private_key_id: Id of the key, if present in the file.
        project_id: Owning project, if present in the file.
        token_uri: Endpoint where signed assertions are exchanged.
        auth_uri: OAuth authorization endpoint named in the file.
        scopes: OAuth scopes requested for issued tokens. A single string
            is one scope.
        subject: User to impersonate through domain-wide delegation, or None.
    """

    def __init__(
        self,
        *,
        client_email: str,
        private_key: str,
        private_key_id: str | None = None,
        project_id: str | None = None,
        token_uri: str = DEFAULT_TOKEN_URI,
        auth_uri: str = DEFAULT_AUTH_URI,
        scopes: Iterable[str] = (CLOUD_PLATFORM_SCOPE,),
        subject: str | None = None,
        token_source: TokenSource | None = None,
    ):
        super().__init__(token_source)
        self.client_email = client_email
        self.private_key = private_key
        self.private_key_id = private_key_id
        self.project_id = project_id
        self.token_uri = token_uri
        self.auth_uri = auth_uri
        self.scopes = (scopes,) if isinstance(scopes, str) else tuple(scopes)
        self.subject = subject

    def __repr__(self) -> str:
        return (
            f"ServiceAccountCredentials(client_email={self.client_email!r}, "
            f"scopes={self.scopes!r}, subject={self.subject!r})"
        )


class ComputeEngineCredentials(Credentials):
    """Identity served by the metadata server of a managed compute environment."""

    def __init__(
        self,
        service_account_email: str = DEFAULT_SERVICE_ACCOUNT_EMAIL,
        token_source: TokenSource | None = None,
    ):
        super().__init__(token_source)
        self._service_account_email = service_account_email

    @property
    def service_account_email(self) -> str:
        """The configured identity; "default" unless one was given explicitly."""
        return self._service_account_email

    def __repr__(self) -> str:
        return f"ComputeEngineCredentials(service_account_email={self._service_account_email!r})"


def create_anonymous_credentials() -> AnonymousCredentials:
    return AnonymousCredentials()


def create_compute_engine_credentials(
    service_account_email: str = DEFAULT_SERVICE_ACCOUNT_EMAIL,
    token_source: TokenSource | None = None,
) -> ComputeEngineCredentials:
    """Create metadata-server credentials without probing the environment.

    Args:
        service_account_email: Identity to request tokens for. Defaults to
            "default", the instance's primary service account.
        token_source: Optional collaborator that fetches tokens.
    """
    logger.debug(f"Creating compute engine credentials for {service_account_email}")
    return ComputeEngineCredentials(service_account_email, token_source=token_source)
