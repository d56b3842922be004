"""
Test package for recordmap.

Run tests with:
    pytest tests/                    # All tests
    pytest tests/unit/              # Unit tests only
"""
