"""Network-facing helpers for credential resolution.

The only network operation in this package is the ambient compute probe:
a single short request to the metadata server, made with httpx.

Modules:
    metadata: Metadata server detection

Example:
    ```python
    from adc_client_core.transport import MetadataServerProbe

    on_compute = MetadataServerProbe(timeout=0.5).is_available()
    ```
"""

from adc_client_core.transport.metadata import MetadataServerProbe

__all__ = ["MetadataServerProbe"]
