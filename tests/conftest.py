"""
Shared test fixtures and path constants for recordsaw tests.

All sample file paths are defined here as module-level constants for
easy discovery. If sample files move or new ones are added, update
this file.
"""

from __future__ import annotations

from pathlib import Path

import pytest

import recordsaw

# ---------------------------------------------------------------------------
# Sample file paths -- edit here if files move or new ones are added
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent / "data"

ORDERS_CSV = DATA_DIR / "orders.csv"
QUOTED_CSV = DATA_DIR / "quoted_contacts.csv"
PAYMENTS_FIXED = DATA_DIR / "payments.txt"
ORDERS_YAML = DATA_DIR / "orders.yaml"
PAYMENTS_YAML = DATA_DIR / "payments.yaml"


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (parses sample files end-to-end)",
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def header_detail_parser() -> recordsaw.Parser:
    """Plain CSV parser with a 'Header' (line starts with H) and a catch-all 'Detail'."""
    parser = recordsaw.csv("\n")
    parser.record("Header").where(lambda ctx: ctx.line.startswith("H"))
    parser.record("Detail").field("Code").field("Amount")
    return parser
