"""
Conftest for storage tests - minimal setup without database.
"""
import pytest


# Override the database fixtures of the parent conftest.py
@pytest.fixture(scope="session")
def setup_database():
    """Skip database setup for storage tests."""
    pass


@pytest.fixture
def db():
    """Skip database fixture for storage tests."""
    yield None
