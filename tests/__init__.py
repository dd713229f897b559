"""
Asset Tracker Test Suite
========================

Test organization:
- tests/unit/                     - Shared library tests (config, auth)
- tests/services/asset_tracker/   - Warranty integration and API tests

The remote warranty service is replaced by an in-process httpx mock
transport; no network access is needed.

Run tests:
    pytest                              # All tests
    pytest tests/unit                   # Shared library only
    pytest --cov=services --cov=shared  # With coverage
"""
