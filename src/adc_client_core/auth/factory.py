"""Classification and construction of credentials from JSON credential files.

A credentials file is a UTF-8 JSON object whose `type` field names the
credential kind. This module parses the bytes, tags them with a
`CredentialKind`, and builds the matching credential object:

- "authorized_user" → `AuthorizedUserCredentials`
- "service_account" → `ServiceAccountCredentials`
- anything else → `UnsupportedCredentialTypeError`

Example:
    ```python
    from adc_client_core.auth import CredentialFactory

    factory = CredentialFactory()

    # Whatever kind the file holds
    credentials = factory.from_file("/secrets/adc.json")

    # Insist on a service account, with explicit scopes and a subject
    credentials = factory.service_account_from_file(
        "/secrets/robot.json",
        scopes=["https://www.googleapis.com/auth/devstorage.full_control"],
        subject="user@example.com",
    )
    ```

Nothing here talks to the network or verifies keys; file contents are
treated as untrusted and only checked for shape.
"""

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from adc_client_core.auth.credentials import (
    AuthorizedUserCredentials,
    Credentials,
    ServiceAccountCredentials,
    TokenSource,
)
from adc_client_core.auth.exceptions import (
    CannotOpenFileError,
    ErrorCode,
    MalformedCredentialFileError,
    UnsupportedCredentialTypeError,
)
from adc_client_core.auth.settings import DEFAULT_AUTH_URI, DEFAULT_TOKEN_URI, AdcSettings

logger = logging.getLogger(__name__)

FileReader = Callable[[str], bytes]


class CredentialKind(Enum):
    """Credential kinds recognised in the `type` field."""

    AUTHORIZED_USER = "authorized_user"
    SERVICE_ACCOUNT = "service_account"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CredentialFileContents:
    """Raw credentials bytes plus the path they came from (for messages only)."""

    data: bytes
    path: str | None = None


@dataclass(frozen=True)
class ParsedCredentialFile:
    """A credentials document tagged with its kind.

    `type_value` keeps the literal `type` string, which is what error
    messages report for unknown kinds. It is None when the field is missing
    or not a string.
    """

    kind: CredentialKind
    type_value: str | None
    fields: dict[str, Any] = field(default_factory=dict)
    path: str | None = None


def read_file_bytes(path: str) -> bytes:
    """Default file opener: read the whole file, expanding `~`."""
    return Path(path).expanduser().read_bytes()


def describe_source(path: str | None) -> str:
    if path is None:
        return "credentials contents"
    return f"credentials file {path}"


def load_contents(
    path: str,
    read_file: FileReader = read_file_bytes,
    env_var_name: str | None = None,
) -> CredentialFileContents:
    """Read a credentials file.

    Args:
        path: File to read.
        read_file: File opener.
        env_var_name: Variable the path came from, reported in errors.

    Raises:
        CannotOpenFileError: If the file is missing or unreadable.
    """
    origin = f" named by environment variable {env_var_name}" if env_var_name else ""
    shown = path or "<empty path>"

    try:
        data = read_file(path)
    except FileNotFoundError:
        raise CannotOpenFileError(
            f"Cannot open credentials file {shown}{origin}: file not found",
            path=path,
            env_var_name=env_var_name,
        ) from None
    except PermissionError:
        raise CannotOpenFileError(
            f"Cannot open credentials file {shown}{origin}: permission denied",
            path=path,
            code=ErrorCode.PERMISSION_DENIED,
            env_var_name=env_var_name,
        ) from None
    except IsADirectoryError:
        # An empty path resolves to the current directory.
        raise CannotOpenFileError(
            f"Cannot open credentials file {shown}{origin}: path is a directory, not a file",
            path=path,
            code=ErrorCode.INVALID_ARGUMENT,
            env_var_name=env_var_name,
        ) from None
    except OSError as e:
        raise CannotOpenFileError(
            f"Cannot open credentials file {shown}{origin}: {e}",
            path=path,
            env_var_name=env_var_name,
        ) from e

    logger.debug(f"Read credentials file {path} ({len(data)} bytes)")
    return CredentialFileContents(data=data, path=path)


def classify(data: bytes | str, path: str | None = None) -> ParsedCredentialFile:
    """Parse credentials content and tag it with its kind.

    Unknown kinds are returned, not raised; the caller decides.

    Raises:
        MalformedCredentialFileError: If the content is not a UTF-8 JSON object.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        document = json.loads(text)
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise MalformedCredentialFileError(f"Invalid JSON in {describe_source(path)}: {e}", path=path) from e

    if not isinstance(document, dict):
        raise MalformedCredentialFileError(
            f"Invalid {describe_source(path)}: expected a JSON object, got {type(document).__name__}",
            path=path,
        )

    type_value = document.get("type")
    if not isinstance(type_value, str):
        return ParsedCredentialFile(CredentialKind.UNKNOWN, None, document, path)

    try:
        kind = CredentialKind(type_value)
    except ValueError:
        kind = CredentialKind.UNKNOWN
    return ParsedCredentialFile(kind, type_value, document, path)


def unsupported_type_error(parsed: ParsedCredentialFile) -> UnsupportedCredentialTypeError:
    shown = parsed.type_value if parsed.type_value is not None else "<missing>"
    message = f"Unsupported credential type ({shown}) when reading {describe_source(parsed.path)}"
    return UnsupportedCredentialTypeError(message, credential_type=parsed.type_value, path=parsed.path)


def _required(parsed: ParsedCredentialFile, name: str) -> str:
    value = parsed.fields.get(name)
    if not isinstance(value, str) or not value:
        raise MalformedCredentialFileError(
            f"Missing or invalid field '{name}' in {parsed.kind.value} {describe_source(parsed.path)}",
            path=parsed.path,
        )
    return value


def _optional(parsed: ParsedCredentialFile, name: str, default: str | None = None) -> str | None:
    value = parsed.fields.get(name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise MalformedCredentialFileError(
            f"Invalid field '{name}' in {parsed.kind.value} {describe_source(parsed.path)}: expected a string",
            path=parsed.path,
        )
    return value


class CredentialFactory:
    """Build credential objects from credentials file contents.

    Args:
        settings: Supplies the default service account scopes.
        read_file: File opener used by the `*_from_file` methods.
        token_source: Handed to every credential object constructed.
    """

    def __init__(
        self,
        settings: AdcSettings | None = None,
        read_file: FileReader = read_file_bytes,
        token_source: TokenSource | None = None,
    ):
        self.settings = settings or AdcSettings()
        self._read_file = read_file
        self.token_source = token_source

    def from_contents(
        self,
        data: bytes | str,
        scopes: Iterable[str] | None = None,
        subject: str | None = None,
        path: str | None = None,
    ) -> Credentials:
        """Construct whichever credential kind the content declares.

        `scopes` and `subject` only apply to service accounts and are
        ignored for other kinds.

        Raises:
            MalformedCredentialFileError: Unparseable content or missing fields.
            UnsupportedCredentialTypeError: `type` is absent or unrecognised.
        """
        parsed = classify(data, path)

        if parsed.kind is CredentialKind.AUTHORIZED_USER:
            if scopes is not None or subject is not None:
                logger.debug(f"Ignoring scopes/subject for authorized user {describe_source(path)}")
            return self._authorized_user(parsed)
        if parsed.kind is CredentialKind.SERVICE_ACCOUNT:
            return self._service_account(parsed, scopes, subject)
        raise unsupported_type_error(parsed)

    def from_file(
        self,
        path: str,
        scopes: Iterable[str] | None = None,
        subject: str | None = None,
    ) -> Credentials:
        contents = load_contents(path, self._read_file)
        return self.from_contents(contents.data, scopes=scopes, subject=subject, path=contents.path)

    def authorized_user_from_contents(self, data: bytes | str, path: str | None = None) -> AuthorizedUserCredentials:
        """Construct authorized user credentials, rejecting any other kind."""
        parsed = classify(data, path)
        if parsed.kind is not CredentialKind.AUTHORIZED_USER:
            raise unsupported_type_error(parsed)
        return self._authorized_user(parsed)

    def authorized_user_from_file(self, path: str) -> AuthorizedUserCredentials:
        contents = load_contents(path, self._read_file)
        return self.authorized_user_from_contents(contents.data, path=contents.path)

    def service_account_from_contents(
        self,
        data: bytes | str,
        scopes: Iterable[str] | None = None,
        subject: str | None = None,
        path: str | None = None,
    ) -> ServiceAccountCredentials:
        """Construct service account credentials, rejecting any other kind.

        The `type` field must still be "service_account": valid authorized
        user content is refused with `UnsupportedCredentialTypeError`.
        """
        parsed = classify(data, path)
        if parsed.kind is not CredentialKind.SERVICE_ACCOUNT:
            raise unsupported_type_error(parsed)
        return self._service_account(parsed, scopes, subject)

    def service_account_from_file(
        self,
        path: str,
        scopes: Iterable[str] | None = None,
        subject: str | None = None,
    ) -> ServiceAccountCredentials:
        contents = load_contents(path, self._read_file)
        return self.service_account_from_contents(contents.data, scopes=scopes, subject=subject, path=contents.path)

    def _authorized_user(self, parsed: ParsedCredentialFile) -> AuthorizedUserCredentials:
        credentials = AuthorizedUserCredentials(
            client_id=_required(parsed, "client_id"),
            client_secret=_required(parsed, "client_secret"),
            refresh_token=_required(parsed, "refresh_token"),
            token_uri=_optional(parsed, "token_uri", DEFAULT_TOKEN_URI),
            quota_project_id=_optional(parsed, "quota_project_id"),
            token_source=self.token_source,
        )
        logger.debug(f"Loaded authorized user credentials from {describe_source(parsed.path)}")
        return credentials

    def _service_account(
        self,
        parsed: ParsedCredentialFile,
        scopes: Iterable[str] | None,
        subject: str | None,
    ) -> ServiceAccountCredentials:
        scope_set = scopes if scopes is not None else self.settings.default_scopes
        credentials = ServiceAccountCredentials(
            client_email=_required(parsed, "client_email"),
            private_key=_required(parsed, "private_key"),
            private_key_id=_optional(parsed, "private_key_id"),
            project_id=_optional(parsed, "project_id"),
            token_uri=_optional(parsed, "token_uri", DEFAULT_TOKEN_URI),
            auth_uri=_optional(parsed, "auth_uri", DEFAULT_AUTH_URI),
            scopes=scope_set,
            subject=subject,
            token_source=self.token_source,
        )
        logger.debug(
            f"Loaded service account credentials for {credentials.client_email} "
            f"from {describe_source(parsed.path)} (private key: ***)"
        )
        return credentials
