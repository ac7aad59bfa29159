"""Configuration for Application Default Credentials resolution.

Environment variable names, well-known paths and probe parameters live here
rather than being hardcoded in the resolution logic, so tests and embedding
applications can rename or redirect any of them.

The environment itself is always passed in as a plain mapping. `load_environ`
builds one from the process environment, optionally layered over a .env
file (python-dotenv) without touching `os.environ`.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

from adc_client_core.transport.metadata import DEFAULT_METADATA_HOST

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_SERVICE_ACCOUNT_EMAIL = "default"

WELL_KNOWN_FILENAME = "application_default_credentials.json"


@dataclass(frozen=True)
class AdcSettings:
    """Names and defaults consulted during credential resolution.

    Attributes:
        explicit_path_env_var: Variable holding an explicit credentials file path.
        well_known_override_env_var: Variable replacing the per-user well-known
            file path (mostly useful in tests).
        compute_check_override_env_var: Variable forcing the ambient compute
            probe result: "1" means present, any other value means absent,
            unset means run the live probe.
        metadata_host_env_var: Variable overriding the metadata server host.
        home_env_var: Variable holding the user's home directory.
        windows_config_env_var: Variable holding the per-user config root on
            Windows.
        metadata_host: Metadata server host used when no override is set.
        probe_timeout: Seconds to wait for the metadata server.
        default_scopes: Scopes given to service accounts when the caller
            supplies none.
    """

    explicit_path_env_var: str = "GOOGLE_APPLICATION_CREDENTIALS"
    well_known_override_env_var: str = "GOOGLE_GCLOUD_ADC_PATH_OVERRIDE"
    compute_check_override_env_var: str = "GOOGLE_RUNNING_ON_GCE_CHECK_OVERRIDE"
    metadata_host_env_var: str = "GCE_METADATA_ROOT"
    home_env_var: str = "HOME"
    windows_config_env_var: str = "APPDATA"
    metadata_host: str = DEFAULT_METADATA_HOST
    probe_timeout: float = 1.0
    default_scopes: tuple[str, ...] = field(default=(CLOUD_PLATFORM_SCOPE,))

    def well_known_path(self, environ: Mapping[str, str], is_windows: bool | None = None) -> str | None:
        """Return the per-user ADC file path, or None when it cannot be formed.

        An override variable that is present wins even when empty; the empty
        string then means "no well-known file".
        """
        if self.well_known_override_env_var in environ:
            return environ[self.well_known_override_env_var] or None

        if is_windows is None:
            is_windows = os.name == "nt"

        if is_windows:
            root = environ.get(self.windows_config_env_var)
            if not root:
                return None
            return str(Path(root) / "gcloud" / WELL_KNOWN_FILENAME)

        home = environ.get(self.home_env_var)
        if not home:
            return None
        return str(Path(home) / ".config" / "gcloud" / WELL_KNOWN_FILENAME)

    def metadata_host_for(self, environ: Mapping[str, str]) -> str:
        return environ.get(self.metadata_host_env_var) or self.metadata_host


def load_environ(dotenv_path: str | Path | None = None, load_dotenv: bool = True) -> dict[str, str]:
    """Snapshot the process environment, layered over an optional .env file.

    Values already present in the process environment win over .env entries,
    matching python-dotenv's default (non-overriding) behaviour.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches
            parent directories for one.
        load_dotenv: Set to False to skip .env loading entirely.

    Returns:
        A new dict; `os.environ` is never modified.
    """
    environ: dict[str, str] = {}

    if load_dotenv:
        try:
            values = dotenv_values(dotenv_path=dotenv_path)
        except OSError as e:
            logger.warning(f"Failed to load .env file: {e}")
        else:
            environ.update({key: value for key, value in values.items() if value is not None})
            if values:
                logger.debug(f"Loaded {len(values)} entries from .env file for credential resolution")

    environ.update(os.environ)
    return environ
