"""Root-level pytest fixtures for all tests.

Provides:
- Deterministic clock and correlation id factory
- Sample payloads for every recognized upstream error shape
"""

import itertools
from datetime import UTC, datetime

import pytest

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0, tzinfo=UTC)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests that take a long time to run"
    )


# ============================================================================
# Determinism
# ============================================================================


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def id_factory():
    """Correlation id factory yielding corr-1, corr-2, ..."""
    counter = itertools.count(1)
    return lambda: f"corr-{next(counter)}"


# ============================================================================
# Sample payloads
# ============================================================================


@pytest.fixture
def raml_payload() -> dict:
    return {
        "errorMessage": {
            "error": {
                "errorDescription": "Invalid customer ID",
                "errorType": "VALIDATION_ERROR",
                "message": "Customer 12345 does not exist",
            }
        }
    }


@pytest.fixture
def sap_payload() -> dict:
    return {
        "errorMessage": {
            "error": {
                "message": {
                    "error": {
                        "code": "MM/042",
                        "message": {"lang": "en", "value": "Material not found in SAP"},
                        "innererror": {
                            "application": {"service_id": "ZMATERIAL_SRV"},
                            "transactionid": "4F1A9C",
                            "errordetails": [
                                {"code": "MM/042", "message": "Material 100-200 unknown"}
                            ],
                        },
                    }
                }
            }
        }
    }


@pytest.fixture
def sf_payload() -> dict:
    return {
        "errorMessage": {
            "error": [
                {
                    "message": "Required fields are missing: [LastName]",
                    "errorCode": "REQUIRED_FIELD_MISSING",
                    "fields": ["LastName"],
                }
            ]
        }
    }


@pytest.fixture
def gateway_payload() -> dict:
    return {
        "errorMessage": {
            "error": {"message": "Upstream connect error", "code": "CONNECTIVITY"},
            "source": "Kong",
        }
    }
