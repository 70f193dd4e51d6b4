"""
Pytest configuration and fixtures for parcel-intake tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
from pathlib import Path
from typing import Callable, Sequence

import pytest

from parcel_intake.core.models import AIAnalysisResult, Parcel
from parcel_intake.core.rules import RuleEngine

FIXTURES_DIR = Path(__file__).parent / "fixtures"


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
        "markers", "e2e: End-to-end tests that run the full upload workflow"
    )


# =======================
# DATA FIXTURES
# =======================

@pytest.fixture
def dirty_csv_path() -> Path:
    """Semicolon-delimited merchant export with duplicates, bad phones and gaps"""
    return FIXTURES_DIR / "dirty_parcels.csv"


@pytest.fixture
def template_csv() -> str:
    """Clean comma-delimited file in the official template layout"""
    return (
        '"Invoice ID","Recipient Name","Phone Number","Full Address","COD Amount","Weight (kg)","Note"\n'
        '"INV-1001","Abdur Rahman","01712345678","House 12, Road 5, Dhanmondi, Dhaka","1500","1.5","Handle with care"\n'
        '"INV-1002","Sumaiya Akter","01811223344","Plot 45, Sector 7, Uttara, Dhaka","0","0.5","Fragile"\n'
        '"INV-1003","Karim Mia","01912334455","Shop 4, Market Road, Chittagong","550","2.2","Deliver to reception"\n'
    )


@pytest.fixture
def make_parcel() -> Callable[..., Parcel]:
    """
    Factory for parcels that pass every built-in rule unless overridden
    """
    def _make(**overrides) -> Parcel:
        values = {
            "invoice_id": "INV-1",
            "recipient_name": "Abdur Rahman",
            "phone": "01712345678",
            "address": "House 12, Road 5, Dhanmondi, Dhaka",
            "cod_amount": 100.0,
            "weight": 1.0,
            "note": "",
        }
        values.update(overrides)
        return Parcel(**values)

    return _make


@pytest.fixture
def engine() -> RuleEngine:
    return RuleEngine()


# =======================
# AI ANALYZER DOUBLES
# =======================

class StaticAnalyzer:
    """Analyzer returning a fixed report and remembering what it was sent"""

    def __init__(self, result: AIAnalysisResult):
        self.result = result
        self.calls: list[tuple[Parcel, ...]] = []

    def analyze(self, parcels: Sequence[Parcel]) -> AIAnalysisResult:
        self.calls.append(tuple(parcels))
        return self.result


class FailingAnalyzer:
    """Analyzer that always raises, like an unreachable API"""

    def analyze(self, parcels: Sequence[Parcel]) -> AIAnalysisResult:
        raise ConnectionError("AI service unavailable")


@pytest.fixture
def static_analyzer() -> Callable[[AIAnalysisResult], StaticAnalyzer]:
    return StaticAnalyzer


@pytest.fixture
def failing_analyzer() -> FailingAnalyzer:
    return FailingAnalyzer()
