"""Detection of the ambient compute environment via its metadata server.

Managed compute environments expose a metadata server on a link-local,
non-routable host. A single short GET to its root tells us whether we are
running inside one: the server answers with a `Metadata-Flavor: Google`
response header.

Example:
    ```python
    from adc_client_core.transport.metadata import MetadataServerProbe

    probe = MetadataServerProbe(timeout=0.5)
    if probe.is_available():
        ...
    ```

Tests inject an `httpx.Client` built on `httpx.MockTransport`, so no real
network access is ever needed.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_METADATA_HOST = "metadata.google.internal"
METADATA_FLAVOR_HEADER = "Metadata-Flavor"
METADATA_FLAVOR_VALUE = "Google"


class MetadataServerProbe:
    """One-shot check for a reachable metadata server.

    Args:
        host: Metadata server host, optionally with scheme and port.
        timeout: Seconds to wait before concluding there is no server.
        client: httpx client to send the request with. When omitted a
            short-lived client is created per probe.
    """

    def __init__(
        self,
        *,
        host: str = DEFAULT_METADATA_HOST,
        timeout: float = 1.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.host = host
        self.timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        if "://" in self.host:
            return f"{self.host.rstrip('/')}/"
        return f"http://{self.host}/"

    def is_available(self) -> bool:
        """Return True if the metadata server answered as expected.

        Timeouts, connection failures, unusable hosts, error statuses and
        responses without the expected flavor header all count as "not
        available".
        """
        headers = {METADATA_FLAVOR_HEADER: METADATA_FLAVOR_VALUE}

        try:
            if self._client is not None:
                response = self._client.get(self.url, headers=headers, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(self.url, headers=headers)
        except httpx.InvalidURL as e:
            logger.debug(f"Metadata server host {self.host!r} is not a valid URL: {e}")
            return False
        except httpx.HTTPError as e:
            logger.debug(f"Metadata server at {self.url} not reachable: {e}")
            return False

        if not response.is_success:
            logger.debug(f"Metadata server at {self.url} returned HTTP {response.status_code}")
            return False

        flavor = response.headers.get(METADATA_FLAVOR_HEADER)
        if flavor != METADATA_FLAVOR_VALUE:
            logger.debug(f"Response from {self.url} has unexpected {METADATA_FLAVOR_HEADER} header: {flavor!r}")
            return False

        logger.debug(f"Metadata server detected at {self.url}")
        return True
