"""
Test suite for the bookstore query runner.

Test Structure:
    - conftest.py: Shared fixtures and Motor doubles
    - test_models.py: Tests for Pydantic models and validators
    - test_repositories.py: Tests for BookRepository queries (mocked Motor)
    - test_db.py: Tests for connection lifecycle, indexes and seeding
    - test_services.py: Tests for the query catalog and script runner
    - test_cli.py: Tests for click commands and settings
    - test_integration.py: End-to-end tests against a real MongoDB

Running Tests:
    pytest                                  # Run all tests
    pytest -m "not integration"             # Skip the MongoDB-backed tests
    pytest --cov=bookstore                  # With coverage
    TEST_MONGO_URI=mongodb://host:27017 pytest tests/test_integration.py
"""
