"""Pytest configuration and shared fixtures for adc-client-core tests."""

import pytest

from adc_client_core.testing import FakeFileSystem


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear credential-related environment variables before each test.

    This prevents the developer's own credentials from leaking into tests
    that resolve against the process environment.
    """
    import os

    test_prefixes = ("GOOGLE_", "GCE_", "CLOUDSDK_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def fake_fs():
    """Empty in-memory filesystem; tests add files as needed."""
    return FakeFileSystem()
