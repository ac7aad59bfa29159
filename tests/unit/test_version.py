"""Test basic package functionality."""

import adc_client_core


def test_version():
    """Test that package version is defined."""
    assert hasattr(adc_client_core, "__version__")
    assert adc_client_core.__version__ == "0.1.0"
