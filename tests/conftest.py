"""
Shared test fixtures for listparse tests.

Sample input lines are defined here as module-level constants so the
unit and integration tests exercise the same records.
"""

from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Sample records
# ---------------------------------------------------------------------------
TRADE_LINES = [
    "date,symbol,side,quantity,price,tags",
    '2024-01-02,AAPL,B,100,185.5,"desk:eq,book:a1"',
    "2024-01-02,MSFT,S,50,,desk:eq",
    '2024-01-03,"BRK,B",B,10,360.25,',
    "2024-01-03,TSLA,X,5,240.0,desk:eq",
    "",
    "2024-13-01,NVDA,B,1,480.0,desk:eq",
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def trades_csv(tmp_path: Path) -> Path:
    """The sample trade lines written to a CSV file."""
    path = tmp_path / "trades.csv"
    path.write_text("\n".join(TRADE_LINES) + "\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs against files written to tmp_path)",
    )
