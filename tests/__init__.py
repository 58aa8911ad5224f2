"""
Test Suite for Book Reviews API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- helpers.py: Row builders and auth header helper
- test_reviews.py: Review lifecycle service
- test_interactions.py: Likes and comments
- test_stats.py: Rating aggregates and reading statistics
- test_responses.py: Response assembly
- test_api.py: HTTP endpoints and error mapping
- test_concurrency.py: Uniqueness under concurrent writers
- test_config.py: Settings validation

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_stats.py

    # Run with verbose output
    pytest -v
"""
