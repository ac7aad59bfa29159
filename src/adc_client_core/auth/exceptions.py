"""Custom exceptions for Application Default Credentials resolution.

Every failure of a resolution call is raised as exactly one of these
exceptions. All of them derive from `CredentialError`, so callers can catch
the whole family at once, and all carry an `ErrorCode` plus the offending
file path when one is known.

Example:
    ```python
    from adc_client_core.auth import default_credentials
    from adc_client_core.auth.exceptions import CredentialError, ErrorCode

    try:
        credentials = default_credentials()
    except CredentialError as e:
        if e.code is ErrorCode.INVALID_ARGUMENT:
            print(f"Fix the credentials file at {e.path}")
        raise
    ```
"""

from enum import Enum


class ErrorCode(Enum):
    """Status codes attached to credential errors."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class CredentialError(Exception):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.

    Attributes:
        path: The credentials file involved, if any.
        code: Classification of the failure.
    """

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, path: str | None = None, code: ErrorCode | None = None):
        super().__init__(message)
        self.path = path
        self.code = code if code is not None else self.default_code


class CannotOpenFileError(CredentialError):
    """Raised when an explicitly configured credentials file cannot be read.

    Attributes:
        env_var_name: The environment variable that named the file (if any).

    Example:
        ```python
        try:
            credentials = default_credentials()
        except CannotOpenFileError as e:
            print(f"{e.env_var_name} points at {e.path}, which is unreadable")
        ```
    """

    default_code = ErrorCode.NOT_FOUND

    def __init__(
        self,
        message: str,
        path: str | None = None,
        code: ErrorCode | None = None,
        env_var_name: str | None = None,
    ):
        super().__init__(message, path=path, code=code)
        self.env_var_name = env_var_name


class MalformedCredentialFileError(CredentialError):
    """Raised when credentials content is not valid JSON or lacks required fields."""

    default_code = ErrorCode.INVALID_ARGUMENT


class UnsupportedCredentialTypeError(CredentialError):
    """Raised when the `type` field names a kind that cannot be constructed here.

    Attributes:
        credential_type: The literal `type` value, or None when the field is
            absent or not a string.
    """

    default_code = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str, credential_type: str | None = None, path: str | None = None):
        super().__init__(message, path=path)
        self.credential_type = credential_type


class NoCredentialsFoundError(CredentialError):
    """Raised when no credential source is present at all.

    Attributes:
        consulted: One human-readable line per source that was checked,
            in precedence order, including why it did not apply.
    """

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, consulted: list[str] | None = None):
        super().__init__(message)
        self.consulted = consulted if consulted is not None else []
