"""Application Default Credentials resolution.

This module provides:
- Source discovery in fixed precedence (explicit env var → well-known
  per-user file → ambient compute environment)
- Classification of credentials files by their `type` field
- Construction of the matching credential object

Example:
    ```python
    from adc_client_core.auth import default_credentials

    credentials = default_credentials()
    ```
"""

from adc_client_core.auth.credentials import (
    AnonymousCredentials,
    AuthorizedUserCredentials,
    ComputeEngineCredentials,
    Credentials,
    ServiceAccountCredentials,
    TokenSource,
    create_anonymous_credentials,
    create_compute_engine_credentials,
)
from adc_client_core.auth.exceptions import (
    CannotOpenFileError,
    CredentialError,
    ErrorCode,
    MalformedCredentialFileError,
    NoCredentialsFoundError,
    UnsupportedCredentialTypeError,
)
from adc_client_core.auth.factory import (
    CredentialFactory,
    CredentialFileContents,
    CredentialKind,
    ParsedCredentialFile,
    classify,
)
from adc_client_core.auth.locator import (
    CredentialSource,
    CredentialSourceLocator,
    default_credentials,
    service_account_from_default_paths,
)
from adc_client_core.auth.settings import AdcSettings, load_environ

__all__ = [
    "AdcSettings",
    "AnonymousCredentials",
    "AuthorizedUserCredentials",
    "CannotOpenFileError",
    "ComputeEngineCredentials",
    "CredentialError",
    "CredentialFactory",
    "CredentialFileContents",
    "CredentialKind",
    "CredentialSource",
    "CredentialSourceLocator",
    "Credentials",
    "ErrorCode",
    "MalformedCredentialFileError",
    "NoCredentialsFoundError",
    "ParsedCredentialFile",
    "ServiceAccountCredentials",
    "TokenSource",
    "UnsupportedCredentialTypeError",
    "classify",
    "create_anonymous_credentials",
    "create_compute_engine_credentials",
    "default_credentials",
    "load_environ",
    "service_account_from_default_paths",
]
