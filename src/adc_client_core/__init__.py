"""ADC Client Core - Application Default Credentials resolution for Python clients.

This library decides how a client authenticates, without talking to any
token endpoint itself:
- Precedence-ordered credential source discovery
- Classification of untrusted credentials files
- Construction of authorized user, service account, compute engine and
  anonymous credentials
- Actionable, typed errors naming every source consulted

Example:
    ```python
    import httpx

    from adc_client_core.auth import default_credentials

    credentials = default_credentials()

    with httpx.Client(auth=credentials) as client:
        response = client.get("https://storage.googleapis.com/storage/v1/b")
    ```
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
