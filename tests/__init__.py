#!/usr/bin/env python3
"""
Test suite for ReferralScout.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip tests that need the (in-memory SQLite) database fixture
    python -m pytest tests/ -v -m "not db"

Database tests never need a server: tests/conftest.py binds the application
to an in-memory SQLite database per test.
"""
