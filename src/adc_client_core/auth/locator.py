"""Application Default Credentials source discovery.

Finds the active credential source and hands it to the `CredentialFactory`.

Resolution order (highest to lowest priority, first match wins):
1. Explicit credentials file named by GOOGLE_APPLICATION_CREDENTIALS
2. Per-user well-known file written by `gcloud auth application-default login`
3. Ambient compute environment (metadata server)

An explicit file that cannot be read is a hard error; it never falls
through to later sources. A missing well-known file is not an error.

Example:
    ```python
    from adc_client_core.auth import CredentialSourceLocator

    # Process environment (plus .env, if present)
    credentials = CredentialSourceLocator().resolve()

    # Fully injected environment, e.g. in tests
    locator = CredentialSourceLocator(
        environ={"GOOGLE_APPLICATION_CREDENTIALS": "/secrets/adc.json"},
    )
    credentials = locator.resolve()
    ```

Security Considerations:
    - Credential contents are never logged; only paths and variable names
    - The environment is read from an injected mapping and never modified
"""

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path

import httpx

from adc_client_core.auth.credentials import ComputeEngineCredentials, Credentials, ServiceAccountCredentials
from adc_client_core.auth.exceptions import NoCredentialsFoundError
from adc_client_core.auth.factory import (
    CredentialFactory,
    CredentialFileContents,
    FileReader,
    load_contents,
    read_file_bytes,
)
from adc_client_core.auth.settings import AdcSettings, load_environ
from adc_client_core.transport.metadata import MetadataServerProbe

logger = logging.getLogger(__name__)

HELP_URL = "https://cloud.google.com/docs/authentication/application-default-credentials"


class CredentialSource(Enum):
    """Credential sources, listed in precedence order."""

    EXPLICIT_PATH_ENV_VAR = "explicit_path_env_var"
    WELL_KNOWN_USER_PATH = "well_known_user_path"
    AMBIENT_COMPUTE = "ambient_compute"


class CredentialSourceLocator:
    """Resolve Application Default Credentials from environment and filesystem.

    Each call to `resolve` is independent: nothing is cached between calls
    and the injected environment is only read.

    Args:
        environ: Environment mapping. If None, a snapshot of the process
            environment layered over a .env file is taken per call.
        settings: Variable names, probe timeout and default scopes.
        read_file: File opener; tests substitute fakes.
        factory: Credential factory. Built from `settings`/`read_file` when omitted.
        http_client: httpx client used by the metadata server probe.
        dotenv_path: .env file to layer under the process environment.
        load_dotenv: Set to False to ignore .env files.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        settings: AdcSettings | None = None,
        read_file: FileReader = read_file_bytes,
        factory: CredentialFactory | None = None,
        http_client: httpx.Client | None = None,
        dotenv_path: str | Path | None = None,
        load_dotenv: bool = True,
    ):
        self._environ = environ
        self.settings = settings or AdcSettings()
        self._read_file = read_file
        self.factory = factory or CredentialFactory(self.settings, read_file=read_file)
        self._http_client = http_client
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

    def _current_environ(self) -> Mapping[str, str]:
        if self._environ is not None:
            return self._environ
        return load_environ(self._dotenv_path, load_dotenv=self._load_dotenv_enabled)

    def resolve(self, scopes: Iterable[str] | None = None, subject: str | None = None) -> Credentials:
        """Return credentials from the highest-priority source present.

        `scopes` and `subject` are forwarded to the factory and only affect
        service account files.

        Raises:
            CannotOpenFileError: The explicit path variable names an unreadable file.
            MalformedCredentialFileError: A located file is not valid credentials.
            UnsupportedCredentialTypeError: A located file has an unknown `type`.
            NoCredentialsFoundError: No source is present.
        """
        environ = self._current_environ()
        consulted: list[str] = []

        contents = self._locate_file(environ, consulted)
        if contents is not None:
            return self.factory.from_contents(contents.data, scopes=scopes, subject=subject, path=contents.path)

        if self.running_on_compute(environ, consulted):
            logger.debug(f"Using {CredentialSource.AMBIENT_COMPUTE.value} source")
            return ComputeEngineCredentials(token_source=self.factory.token_source)

        raise self._no_credentials(consulted)

    def service_account_from_default_paths(
        self,
        scopes: Iterable[str] | None = None,
        subject: str | None = None,
    ) -> ServiceAccountCredentials:
        """Like `resolve`, but only file sources, and only service accounts.

        The ambient compute environment is never probed. A located file of
        any other kind raises `UnsupportedCredentialTypeError`.
        """
        environ = self._current_environ()
        consulted: list[str] = []

        contents = self._locate_file(environ, consulted)
        if contents is not None:
            return self.factory.service_account_from_contents(
                contents.data, scopes=scopes, subject=subject, path=contents.path
            )

        raise self._no_credentials(consulted)

    def _locate_file(self, environ: Mapping[str, str], consulted: list[str]) -> CredentialFileContents | None:
        """Read the first credentials file source that is present.

        Returns None when neither file source applies, after recording what
        was checked in `consulted`.
        """
        env_var = self.settings.explicit_path_env_var
        if env_var in environ:
            path = environ[env_var]
            logger.debug(f"Using {CredentialSource.EXPLICIT_PATH_ENV_VAR.value} source '{env_var}': {path}")
            return load_contents(path, self._read_file, env_var_name=env_var)
        consulted.append(f"environment variable {env_var} (not set)")

        path = self.settings.well_known_path(environ)
        if path is None:
            consulted.append("well-known credentials file (no path could be determined)")
            return None

        try:
            data = self._read_file(path)
        except FileNotFoundError:
            logger.debug(f"No well-known credentials file at {path}")
            consulted.append(f"well-known credentials file {path} (not found)")
            return None
        except OSError as e:
            logger.warning(f"Skipping unreadable well-known credentials file {path}: {e}")
            consulted.append(f"well-known credentials file {path} (unreadable: {e})")
            return None

        logger.debug(f"Using {CredentialSource.WELL_KNOWN_USER_PATH.value} source: {path}")
        return CredentialFileContents(data=data, path=path)

    def running_on_compute(self, environ: Mapping[str, str], consulted: list[str] | None = None) -> bool:
        """Decide whether the ambient compute environment is present.

        The override variable short-circuits the live probe: "1" forces
        present and any other value forces absent.
        """
        override_var = self.settings.compute_check_override_env_var
        if override_var in environ:
            present = environ[override_var] == "1"
            logger.debug(f"Compute environment check overridden by {override_var}={environ[override_var]!r}")
            if consulted is not None and not present:
                consulted.append(f"compute environment (forced absent by {override_var})")
            return present

        probe = MetadataServerProbe(
            host=self.settings.metadata_host_for(environ),
            timeout=self.settings.probe_timeout,
            client=self._http_client,
        )
        present = probe.is_available()
        if consulted is not None and not present:
            consulted.append(f"compute environment (no metadata server at {probe.url})")
        return present

    def _no_credentials(self, consulted: list[str]) -> NoCredentialsFoundError:
        details = "; ".join(consulted)
        message = (
            f"Could not automatically determine credentials. Checked: {details}. "
            f"For more information, please see {HELP_URL}"
        )
        return NoCredentialsFoundError(message, consulted=consulted)


def default_credentials(
    scopes: Iterable[str] | None = None,
    subject: str | None = None,
    **locator_kwargs,
) -> Credentials:
    """Resolve Application Default Credentials in one call.

    Keyword arguments other than `scopes` and `subject` configure the
    `CredentialSourceLocator`.
    """
    return CredentialSourceLocator(**locator_kwargs).resolve(scopes=scopes, subject=subject)


def service_account_from_default_paths(
    scopes: Iterable[str] | None = None,
    subject: str | None = None,
    **locator_kwargs,
) -> ServiceAccountCredentials:
    """Load service account credentials from the file sources only, never probing compute."""
    return CredentialSourceLocator(**locator_kwargs).service_account_from_default_paths(scopes=scopes, subject=subject)
