"""
Pytest configuration and fixtures for patient-intake tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
from typing import Callable, Generator

import pytest

from patient_intake.core.config import IntakeSettings
from patient_intake.core.models import UploadedFile
from patient_intake.ingestion import IngestionPipeline
from tests.csv_fixtures import JANE_ROW, JOHN_ROW, build_csv


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that exercise several components together"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that drive the CLI"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


@pytest.fixture
def make_upload() -> Callable[..., UploadedFile]:
    """
    Factory for in-memory uploads

    Returns:
        Callable(content, name="patients.csv", content_type="text/csv") -> UploadedFile
    """
    def _make(
        content: str | bytes,
        name: str = "patients.csv",
        content_type: str = "text/csv",
    ) -> UploadedFile:
        return UploadedFile(name=name, content_type=content_type, content=content)

    return _make


@pytest.fixture
def valid_csv() -> str:
    """Two-row CSV with all required columns"""
    return build_csv([JANE_ROW, JOHN_ROW])


# =======================
# PIPELINE FIXTURES
# =======================

@pytest.fixture
def settings() -> IntakeSettings:
    """Default settings with a short timeout so failures surface quickly"""
    return IntakeSettings(timeout_seconds=5)


@pytest.fixture
def pipeline(settings) -> Generator[IngestionPipeline, None, None]:
    """
    Ingestion pipeline that is closed after the test

    Yields:
        IngestionPipeline built from the settings fixture
    """
    with IngestionPipeline(settings) as p:
        yield p
